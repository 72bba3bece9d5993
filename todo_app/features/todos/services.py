"""
➡️ But : Contenir la logique métier des todos : orchestrer le repo, appliquer des règles, gérer les erreurs.

TodoService : vérifie qu'un todo existe avant mise à jour / suppression, traduit les
erreurs SQLAlchemy en AppError(STORAGE).

⚠️ Aucune vérification que `created_by` correspond à l'utilisateur connecté
(n'importe quel utilisateur authentifié peut modifier un todo par son id).

🔹 Avantages :

Code métier découplé du web.

Test unitaire possible sans passer par FastAPI.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from todo_app.core.errors import AppError, ErrorKind
from todo_app.db.models.todos import Todo
from todo_app.db.repositories.todos import TodoRepository

logger = logging.getLogger(__name__)


def parse_checkbox(value: Optional[str]) -> bool:
    """Valeur d'une case à cocher HTML : absente/"off"/"false" → False, "on"/"true" → True."""
    if value is None:
        return False
    lowered = value.strip().lower()
    if lowered in ("on", "true"):
        return True
    if lowered in ("off", "false", ""):
        return False
    raise AppError(ErrorKind.VALIDATION, f"Invalid checkbox bool string {value}")


def validate_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise AppError(ErrorKind.VALIDATION, "the title cannot be empty.")
    return title


class TodoService:
    def __init__(self, repo: TodoRepository):
        self.repo = repo

    def _storage_error(self, e: SQLAlchemyError, action: str) -> AppError:
        self.repo.rollback()
        logger.exception("Database error while trying to %s", action)
        return AppError(ErrorKind.STORAGE, f"database error: {e}")

    def add_todo(self, created_by: str, title: str, description: str) -> Todo:
        try:
            return self.repo.create(created_by=created_by, title=title, description=description)
        except SQLAlchemyError as e:
            raise self._storage_error(e, "add a todo") from e

    def get_all_todos(self, created_by: str) -> List[Todo]:
        try:
            return list(self.repo.list_for_user(created_by))
        except SQLAlchemyError as e:
            raise self._storage_error(e, "list todos") from e

    def get_todo_by_id(self, todo_id: int) -> Todo:
        try:
            todo = self.repo.get(todo_id)
        except SQLAlchemyError as e:
            raise self._storage_error(e, "fetch a todo") from e
        if not todo:
            raise AppError(ErrorKind.NOT_FOUND, "todo does not exist in the database.")
        return todo

    def update_todo(self, todo_id: int, *, title: str, description: str, status: bool) -> Todo:
        todo = self._get_or_not_found(todo_id)
        try:
            return self.repo.update(todo, title=title, description=description, status=status)
        except SQLAlchemyError as e:
            raise self._storage_error(e, "update a todo") from e

    def remove_todo(self, todo_id: int) -> None:
        todo = self._get_or_not_found(todo_id)
        try:
            self.repo.delete(todo)
        except SQLAlchemyError as e:
            raise self._storage_error(e, "delete a todo") from e

    def _get_or_not_found(self, todo_id: int) -> Todo:
        try:
            return self.get_todo_by_id(todo_id)
        except AppError as e:
            if e.kind is ErrorKind.NOT_FOUND:
                raise AppError(ErrorKind.NOT_FOUND, f"Todo with ID: {todo_id} not found") from e
            raise
