"""
➡️ But : Configurer la base SQLite et gérer les sessions de base de données.

build_engine() : connexion à la base (sqlite:///todos.db par défaut).

init_db() : crée les tables à partir des modèles SQLModel.

get_session() : dépendance FastAPI qui ouvre une session, la fournit aux routes, puis la ferme proprement.

🔹 Avantages :

Un seul endroit pour gérer les connexions DB.

Réutilisable par injection (Depends(get_session)).
"""

import logging
from typing import Any, Dict, Iterator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

# Import all models for creating all tables
from todo_app.db.models.users import User  # noqa: F401
from todo_app.db.models.todos import Todo  # noqa: F401

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def build_engine(url: str, *, echo: bool = False) -> Engine:
    assert url, "DATABASE_URL must be set"

    is_sqlite = url.startswith("sqlite:")

    connect_args: Dict[str, Any] = {}
    kwargs: Dict[str, Any] = {}
    if is_sqlite:
        # Requis pour SQLite quand utilisé dans un app serveur (multi-threads)
        connect_args["check_same_thread"] = False
        if _is_memory_sqlite(url):
            # une seule connexion partagée, sinon chaque connexion a sa propre base vide
            kwargs["poolclass"] = StaticPool

    engine = create_engine(
        url,
        echo=echo,
        connect_args=connect_args,
        pool_pre_ping=not is_sqlite,  # ping utile pour Postgres/MySQL ; inutile pour SQLite
        **kwargs,
    )
    logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


def init_db(engine: Engine) -> None:
    """
    Crée les tables si elles n'existent pas.
    Pas de migrations : le schéma est celui des modèles SQLModel.
    """
    SQLModel.metadata.create_all(engine)


def get_session(request: Request) -> Iterator[Session]:
    """
    Dépendance FastAPI : fournit une session par requête, sur l'engine de l'état partagé.
    Utilisation :
        def route(..., session: Session = Depends(get_session)):
            ...
    """
    with Session(request.app.state.app_state.engine) as session:
        yield session
