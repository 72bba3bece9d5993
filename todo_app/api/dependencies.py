"""
➡️ But : Centraliser les dépendances réutilisables des routes.

Exemples :

get_auth_service() : crée un AuthService à partir d'une session DB.

require_context() : le gate d'autorisation des routes protégées ; fournit un
RequestContext (session + utilisateur authentifié).

🔹 Avantages :

Routes plus propres (pas de code dupliqué).

Facile à injecter dans plusieurs endpoints (Depends()).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session

from todo_app.core.state import AppState
from todo_app.db.models.users import User
from todo_app.db.session import get_session

from todo_app.db.repositories.users import UserRepository
from todo_app.features.authentication.services import AuthService
from todo_app.features.authentication.gate import Rejected, authorize, extract_token

from todo_app.db.repositories.todos import TodoRepository
from todo_app.features.todos.services import TodoService

from todo_app.web.sessions import SessionData, get_session_data, set_flag

logger = logging.getLogger(__name__)


# -----------------------------
# Shared state
# -----------------------------
def get_app_state(request: Request) -> AppState:
    return request.app.state.app_state


# -----------------------------
# Services
# -----------------------------
def get_auth_service(session: Session = Depends(get_session)) -> AuthService:
    return AuthService(user_repo=UserRepository(session))


def get_todo_service(session: Session = Depends(get_session)) -> TodoService:
    return TodoService(TodoRepository(session))


# -----------------------------
# Request context
# -----------------------------
@dataclass
class RequestContext:
    """Ce qu'un handler a le droit de toucher : la session du navigateur et, si gate, l'utilisateur."""
    session: SessionData
    user: Optional[User] = None


def get_context(request: Request) -> RequestContext:
    return RequestContext(session=get_session_data(request))


async def require_context(
    request: Request,
    state: AppState = Depends(get_app_state),
    auth_svc: AuthService = Depends(get_auth_service),
) -> RequestContext:
    """
    Gate d'autorisation : token (cookie puis Bearer) → vérification → lookup user.
    Rejet : flag de session à False puis AppError (401), le handler ne tourne pas.
    Succès : flag à True, utilisateur attaché au contexte.
    """
    session = get_session_data(request)
    token = extract_token(request.cookies, request.headers, cookie_name=state.settings.AUTH_COOKIE_NAME)

    async with state.lock.read():
        outcome = await run_in_threadpool(
            authorize,
            token,
            jwt_settings=state.settings.jwt,
            lookup_user=auth_svc.get_user_by_id,
        )

    if isinstance(outcome, Rejected):
        set_flag(session, False)
        logger.debug("Rejected %s %s: %s", request.method, request.url.path, outcome.kind.value)
        raise outcome.to_error()

    set_flag(session, True)
    return RequestContext(session=session, user=outcome.user)
