import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from todo_app.core.errors import AppError, ErrorKind
from todo_app.db.models.users import User
from todo_app.db.repositories.users import UserRepository
from todo_app.security.password import hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "invalid email or password."
EMAIL_IN_USE = "the email is already in use."


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """
    Service d'authentification (credential store) : orchestre le repository
    users et le hachage des mots de passe.
    Ne contient pas d'accès SQL direct et lève des AppError propres.

    Méthodes synchrones : les routes async les appellent via run_in_threadpool
    (accès DB + argon2 sont bloquants).
    """

    def __init__(self, *, user_repo: UserRepository):
        self.user_repo = user_repo

    # ---------- Inscription ----------
    def create_user(self, email: str, password: str, username: str) -> User:
        email = normalize_email(email)
        try:
            if self.user_repo.email_exists(email):
                raise AppError(ErrorKind.DUPLICATE_EMAIL, EMAIL_IN_USE)
            user = self.user_repo.create(
                email=email,
                password_hash=hash_password(password),
                username=username,
            )
        except IntegrityError as e:
            # inscription concurrente avec le même email : la contrainte unique tranche
            self.user_repo.rollback()
            raise AppError(ErrorKind.DUPLICATE_EMAIL, EMAIL_IN_USE) from e
        except SQLAlchemyError as e:
            self.user_repo.rollback()
            logger.exception("Failed to create user")
            raise AppError(ErrorKind.STORAGE, f"database error: {e}") from e

        logger.info("User %s registered", user.id)
        return user

    # ---------- Connexion ----------
    def check_email_password(self, email: str, password: str) -> User:
        try:
            user = self.user_repo.get_by_email(normalize_email(email))
        except SQLAlchemyError as e:
            logger.exception("Failed to look up user by email")
            raise AppError(ErrorKind.STORAGE, f"database error: {e}") from e

        # Ne pas révéler lequel des deux facteurs est faux
        if not user or not verify_password(password, user.password_hash):
            raise AppError(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS)
        return user

    # ---------- Lookup par id (gate) ----------
    def get_user_by_id(self, user_id: str) -> Optional[User]:
        try:
            return self.user_repo.get(user_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch user %s", user_id)
            raise AppError(ErrorKind.STORAGE, f"error fetching user from database: {e}") from e
