from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, TypedDict

from jose import jwt, JWTError

from todo_app.core.errors import AppError, ErrorKind

# ==========================================================
# 🔧 Configuration : paramètres de génération/validation JWT
# ==========================================================

@dataclass(frozen=True)
class JWTSettings:
    """
    Configuration des tokens JWT.

    - `secret` : clé secrète pour signer/valider les tokens
    - `algorithm` : algo de signature (HS256 recommandé)
    - `access_ttl` : durée de vie d'un token (pas de refresh)
    """
    secret: str
    algorithm: str = "HS256"
    access_ttl: timedelta = timedelta(minutes=60)


# ==========================================================
# 🧱 Types
# ==========================================================

class TokenClaims(TypedDict):
    sub: str            # identifiant utilisateur (uuid)
    iat: int
    exp: int


# ==========================================================
# 🧩 Fonctions utilitaires
# ==========================================================

def _now() -> datetime:
    """Renvoie l'heure UTC actuelle."""
    return datetime.now(timezone.utc)


# ==========================================================
# 🎟️ Génération
# ==========================================================

def issue_token(subject: str, settings: JWTSettings, *, now: Optional[datetime] = None) -> str:
    """
    Crée un token JWT signé : sub, iat = maintenant, exp = iat + access_ttl.
    `now` permet d'injecter une horloge contrôlée (tests).
    """
    now = now or _now()
    payload: TokenClaims = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + settings.access_ttl).timestamp()),
    }
    return jwt.encode(payload, settings.secret, algorithm=settings.algorithm)


# ==========================================================
# 🔍 Décodage / Validation
# ==========================================================

def verify_token(token: str, settings: JWTSettings, *, now: Optional[datetime] = None) -> TokenClaims:
    """
    Décode et valide un token JWT (signature + expiration).
    Lève AppError(INVALID_TOKEN) si la signature est invalide, le token
    illisible, un claim manquant, ou si `now >= exp`.

    L'expiration est vérifiée ici (et non par python-jose) pour pouvoir
    injecter l'horloge.
    """
    try:
        decoded = jwt.decode(
            token,
            settings.secret,
            algorithms=[settings.algorithm],
            options={"verify_aud": False, "verify_exp": False, "verify_iat": False},
        )
    except JWTError as e:
        raise AppError(ErrorKind.INVALID_TOKEN, "Invalid token") from e

    sub, iat, exp = decoded.get("sub"), decoded.get("iat"), decoded.get("exp")
    if not isinstance(sub, str) or not sub or not isinstance(iat, int) or not isinstance(exp, int):
        raise AppError(ErrorKind.INVALID_TOKEN, "Invalid token")

    now = now or _now()
    if now.timestamp() >= exp:
        raise AppError(ErrorKind.INVALID_TOKEN, "Invalid token")

    return {"sub": sub, "iat": iat, "exp": exp}
