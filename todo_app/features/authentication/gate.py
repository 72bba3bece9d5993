"""
➡️ But : Décider, pour une requête, si elle est autorisée (Authorized) ou rejetée (Rejected).

Machine à états :
1. extraction du token (cookie `token`, sinon header `Authorization: Bearer …`)
2. vérification signature + expiration
3. lookup de l'utilisateur (sub)

Aucune dépendance HTTP ici : la dépendance FastAPI (`require_context`) se
charge de la session et de la réponse 401.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping, Optional, Union

from todo_app.core.errors import AppError, ErrorKind
from todo_app.db.models.users import User
from todo_app.security.tokens import JWTSettings, verify_token

logger = logging.getLogger(__name__)

NO_TOKEN_REASON = "You are not logged in, please provide token"
INVALID_TOKEN_REASON = "Invalid token"
USER_GONE_REASON = "The user belonging to this token no longer exists"


@dataclass(frozen=True)
class Authorized:
    user: User


@dataclass(frozen=True)
class Rejected:
    kind: ErrorKind
    reason: str

    def to_error(self) -> AppError:
        return AppError(self.kind, self.reason)


Outcome = Union[Authorized, Rejected]


def extract_token(cookies: Mapping[str, str], headers: Mapping[str, str], *, cookie_name: str = "token") -> Optional[str]:
    """Cookie en priorité, puis `Authorization: Bearer <token>`."""
    token = cookies.get(cookie_name)
    if token:
        return token
    auth_header = headers.get("authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):].strip() or None
    return None


def authorize(
    token: Optional[str],
    *,
    jwt_settings: JWTSettings,
    lookup_user: Callable[[str], Optional[User]],
    now: Optional[datetime] = None,
) -> Outcome:
    """
    Évalue la machine à états pour un token déjà extrait.
    `lookup_user` est typiquement AuthService.get_user_by_id (peut lever AppError(STORAGE)).
    """
    if not token:
        return Rejected(ErrorKind.NO_TOKEN, NO_TOKEN_REASON)

    try:
        claims = verify_token(token, jwt_settings, now=now)
    except AppError:
        return Rejected(ErrorKind.INVALID_TOKEN, INVALID_TOKEN_REASON)

    try:
        user = lookup_user(claims["sub"])
    except AppError as e:
        # le détail technique reste dans les logs, pas sur la page 401
        logger.warning("User lookup failed for token subject %s: %s", claims["sub"], e.detail)
        return Rejected(ErrorKind.USER_GONE, USER_GONE_REASON)

    if user is None:
        return Rejected(ErrorKind.USER_GONE, USER_GONE_REASON)
    return Authorized(user)
