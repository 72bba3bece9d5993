"""
➡️ But : Session côté serveur par navigateur (indépendante du token) pour l'état d'UI.

- `from_protected` : ce navigateur a-t-il atteint une zone protégée ? (mis à jour par le gate)
- `time_zone` : fuseau envoyé au login (header x-timezone), utilisé pour l'affichage des dates
- messages flash : affichés une seule fois, au rendu suivant une redirection

Stockage en mémoire (perdu au redémarrage). Le navigateur ne garde qu'un identifiant
signé (itsdangerous) dans un cookie ; une session n'est enregistrée et le cookie posé
que si elle a été modifiée. Une session inactive plus de `ttl` est oubliée.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import Request
from itsdangerous import BadSignature, Signer
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

FROM_PROTECTED_KEY = "from_protected"
TZONE_KEY = "time_zone"
MESSAGES_KEY = "_messages"

SUCCESS = "Success"
ERROR = "Error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionData:
    def __init__(self, session_id: str, data: Optional[Dict[str, Any]] = None):
        self.id = session_id
        self.data: Dict[str, Any] = data if data is not None else {}
        self.modified = False

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __setitem__(self, key: str, value: Any) -> None:
        self.data[key] = value
        self.modified = True

    def pop(self, key: str, default: Any = None) -> Any:
        if key in self.data:
            self.modified = True
        return self.data.pop(key, default)


class MemorySessionStore:
    """
    Sessions en mémoire avec expiration sur inactivité : chaque chargement repousse
    l'échéance de `ttl`, une session non revue depuis `ttl` est oubliée.
    `clock` permet d'injecter l'heure (tests).
    """

    def __init__(self, ttl: timedelta = timedelta(hours=24), clock: Callable[[], datetime] = _utcnow) -> None:
        self.ttl = ttl
        self._clock = clock
        self._sessions: Dict[str, Tuple[Dict[str, Any], datetime]] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def new(self) -> SessionData:
        return SessionData(secrets.token_urlsafe(32))

    def load(self, session_id: str) -> Optional[SessionData]:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        data, expires_at = entry
        now = self._clock()
        if expires_at <= now:
            del self._sessions[session_id]
            return None
        self._sessions[session_id] = (data, now + self.ttl)
        # la requête travaille sur l'objet stocké : les écritures sont visibles tout de suite
        return SessionData(session_id, data)

    def save(self, session: SessionData) -> None:
        now = self._clock()
        self._purge_expired(now)
        self._sessions[session.id] = (session.data, now + self.ttl)

    def _purge_expired(self, now: datetime) -> None:
        expired = [sid for sid, (_, expires_at) in self._sessions.items() if expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("Dropped %d expired sessions", len(expired))


class SessionMiddleware(BaseHTTPMiddleware):
    """Charge (ou prépare) la session de chaque requête dans `request.state.session`."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        store: MemorySessionStore,
        secret_key: str,
        cookie_name: str = "session_id",
        https_only: bool = False,
    ):
        super().__init__(app)
        self.store = store
        self.signer = Signer(secret_key, salt="todo-session")
        self.cookie_name = cookie_name
        self.https_only = https_only

    def _load(self, raw: Optional[str]) -> Optional[SessionData]:
        if not raw:
            return None
        try:
            session_id = self.signer.unsign(raw).decode("utf-8")
        except BadSignature:
            logger.debug("Ignoring session cookie with a bad signature")
            return None
        return self.store.load(session_id)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        session = self._load(request.cookies.get(self.cookie_name))
        is_new = session is None
        if session is None:
            session = self.store.new()
        request.state.session = session

        response = await call_next(request)

        if session.modified:
            self.store.save(session)
        if is_new and session.modified:
            response.set_cookie(
                key=self.cookie_name,
                value=self.signer.sign(session.id).decode("utf-8"),
                path="/",
                httponly=True,
                samesite="lax",
                secure=self.https_only,
            )
        return response


# ==========================================================
# 🧩 Accès à la session depuis une requête
# ==========================================================

def get_session_data(request: Request) -> SessionData:
    session = getattr(request.state, "session", None)
    if session is None:
        # erreur de câblage : fatale pour la requête (500)
        raise RuntimeError("SessionMiddleware must be installed to access the session")
    return session


# ==========================================================
# 🚩 Flags
# ==========================================================

def set_flag(session: SessionData, value: bool) -> None:
    # pas d'écriture si rien ne change : une requête anonyme rejetée ne crée pas de session
    if get_flag(session) != bool(value):
        session[FROM_PROTECTED_KEY] = bool(value)


def get_flag(session: SessionData) -> bool:
    return bool(session.get(FROM_PROTECTED_KEY, False))


def set_timezone(session: SessionData, tz: str) -> None:
    session[TZONE_KEY] = tz


def get_timezone(session: SessionData) -> str:
    return session.get(TZONE_KEY, "")


# ==========================================================
# 💬 Messages flash
# ==========================================================

def flash(session: SessionData, level: str, message: str) -> None:
    messages: List[Tuple[str, str]] = list(session.get(MESSAGES_KEY, []))
    messages.append((level, message))
    session[MESSAGES_KEY] = messages


def pop_messages(session: SessionData) -> Tuple[str, str]:
    """
    Consomme les messages en attente.
    Retourne (statut, texte) : statut "Error" si au moins une erreur, "Success" sinon,
    ("", "") s'il n'y a rien.
    """
    messages: List[Tuple[str, str]] = session.pop(MESSAGES_KEY, None) or []
    if not messages:
        return "", ""
    status = ERROR if any(level == ERROR for level, _ in messages) else SUCCESS
    return status, ", ".join(message for _, message in messages)
