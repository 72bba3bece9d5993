"""
➡️ But : Définir la taxonomie fermée des erreurs de l'application.

Chaque erreur porte un `ErrorKind` (le discriminant) et un `detail` lisible
par un humain (affiché dans les messages flash ou les pages d'erreur).

Les services lèvent `AppError` ; les routes décident quoi en faire
(redirection + flash, page d'erreur, purge du cache…).
"""

from enum import Enum

from fastapi import status


class ErrorKind(str, Enum):
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"
    NO_TOKEN = "no_token"
    INVALID_TOKEN = "invalid_token"
    USER_GONE = "user_gone"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    STORAGE = "storage"


_STATUS_BY_KIND = {
    ErrorKind.DUPLICATE_EMAIL: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NO_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.USER_GONE: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class AppError(Exception):
    """Erreur métier : un kind fermé + un détail lisible."""

    def __init__(self, kind: ErrorKind, detail: str):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self.kind]

    def __repr__(self) -> str:
        return f"AppError({self.kind.value!r}, {self.detail!r})"
