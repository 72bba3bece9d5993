"""
➡️ But : assembler toutes les pièces du puzzle.

create_app() crée l'instance FastAPI (app) et configure :

le logging,

l'engine DB + l'état partagé (cache des todos, RWLock),

le middleware de session (flags d'UI + messages flash),

les routers (pages, auth, todos) et les handlers d'erreurs (401 du gate, 404…).

Initialise la base SQLite au démarrage (@app.on_event("startup")).

🔹 Avantages :

Centralise la configuration du serveur HTTP.

Point unique d'exécution : uvicorn todo_app.main:app --reload.
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from todo_app.core.config import Settings, settings
from todo_app.core.errors import AppError
from todo_app.core.logging_config import configure_logging
from todo_app.core.state import AppState
from todo_app.db.session import build_engine, init_db
from todo_app.web.rendering import render_error
from todo_app.web.sessions import MemorySessionStore, SessionMiddleware, get_flag, get_session_data

from todo_app.api.routers import pages, authentication, todos

import uvicorn

logger = logging.getLogger(__name__)


def _fallback_link(request: Request) -> str:
    return "/todo/list" if get_flag(get_session_data(request)) else "/"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        # rejets du gate (401) et toute AppError non interceptée par une route
        link = "/login" if exc.status_code == 401 else _fallback_link(request)
        return render_error(exc.status_code, exc.detail, link=link)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return render_error(404, "Nothing to see here", link=_fallback_link(request))
        return render_error(exc.status_code, str(exc.detail), link=_fallback_link(request))


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    configure_logging(app_settings.LOG_LEVEL)

    app = FastAPI(title=app_settings.APP_NAME, version="0.1.0")

    # echo seulement en dev pour ne pas polluer les logs en prod
    engine = build_engine(app_settings.DATABASE_URL, echo=(app_settings.ENV == "dev"))
    app.state.app_state = AppState(settings=app_settings, engine=engine)

    app.add_middleware(
        SessionMiddleware,
        store=MemorySessionStore(ttl=timedelta(minutes=app_settings.SESSION_TTL_MINUTES)),
        secret_key=app_settings.SESSION_SECRET_KEY,
        cookie_name=app_settings.SESSION_COOKIE_NAME,
        https_only=(app_settings.ENV == "prod"),
    )

    # Routers
    app.include_router(pages.router)
    app.include_router(authentication.router)
    app.include_router(todos.router)

    register_exception_handlers(app)

    # Démarrage
    @app.on_event("startup")
    def on_startup():
        init_db(engine)
        logger.info("%s ready (env=%s)", app_settings.APP_NAME, app_settings.ENV)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "todo_app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=(settings.ENV == "dev"),
    ) # http://localhost:8082
