"""
➡️ But : Centraliser tous les paramètres configurables (nom d'app, chemin DB, secrets, cookies…)

Utilise pydantic-settings pour charger automatiquement les variables d'environnement (.env, variables système…).

Fournit un objet settings unique, que tu importes ailleurs :

from todo_app.core.config import settings
print(settings.APP_NAME)

🔹 Avantages :

Plus propre que des constantes éparpillées dans le code.

Facilite le passage entre environnements (dev / prod / test).
"""

from datetime import timedelta
from typing import Optional

from pydantic_settings import BaseSettings
from todo_app.security.tokens import JWTSettings


class Settings(BaseSettings):
    # -----------------------------
    # App
    # -----------------------------
    APP_NAME: str = "todo-htmx"
    ENV: str = "dev"  # dev | prod | test
    HOST: str = "0.0.0.0"
    PORT: int = 8082
    LOG_LEVEL: str = "INFO"

    # -----------------------------
    # DB
    # -----------------------------
    SQLITE_PATH: str = "todos.db"  # fichier SQLite
    # Si tu veux forcer une URL différente (ex: "sqlite://" en mémoire), définis DATABASE_URL dans l'env.
    DATABASE_URL: Optional[str] = None

    # -----------------------------
    # JWT / Auth
    # -----------------------------
    JWT_SECRET_KEY: str = "CHANGE_ME"     # ⚠️ change en prod
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TTL_MINUTES: int = 60          # pas de refresh : expiration = reconnexion

    # Cookie (token)
    AUTH_COOKIE_NAME: str = "token"
    AUTH_COOKIE_SAMESITE: str = "lax"     # "lax" | "strict" | "none"
    AUTH_COOKIE_PATH: str = "/"
    AUTH_COOKIE_SECURE: Optional[bool] = None   # auto selon ENV si None
    AUTH_COOKIE_MAX_AGE: Optional[int] = None   # auto depuis ACCESS_TTL si None

    # -----------------------------
    # Sessions (flags UI + messages flash)
    # -----------------------------
    SESSION_SECRET_KEY: str = "CHANGE_ME_TOO"
    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_TTL_MINUTES: int = 24 * 60    # oubli après inactivité

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    # -----------------------------
    # Post-process values
    # -----------------------------
    def model_post_init(self, __context): # appelée automatiquement
        # DATABASE_URL par défaut depuis SQLITE_PATH si non fourni
        if not self.DATABASE_URL:
            object.__setattr__(self, "DATABASE_URL", f"sqlite:///{self.SQLITE_PATH}")

        # Cookie secure auto: true en prod si non spécifié
        if self.AUTH_COOKIE_SECURE is None:
            object.__setattr__(self, "AUTH_COOKIE_SECURE", self.ENV == "prod")

        # max_age auto depuis ACCESS_TTL
        if self.AUTH_COOKIE_MAX_AGE is None:
            object.__setattr__(self, "AUTH_COOKIE_MAX_AGE", self.ACCESS_TTL_MINUTES * 60)

    @property
    def jwt(self) -> JWTSettings:
        """Objet JWT dérivé de ces réglages (utile quand settings est surchargé en test)."""
        return JWTSettings(
            secret=self.JWT_SECRET_KEY,
            algorithm=self.JWT_ALGORITHM,
            access_ttl=timedelta(minutes=self.ACCESS_TTL_MINUTES),
        )


# Instance globale importable partout
settings = Settings()
