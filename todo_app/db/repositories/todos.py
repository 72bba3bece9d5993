from typing import Sequence
from sqlmodel import select

from todo_app.db.repositories.base import BaseRepository
from todo_app.db.models.todos import Todo

class TodoRepository(BaseRepository[Todo]):
    model = Todo

    def list_for_user(self, created_by: str) -> Sequence[Todo]:
        """Todos d'un utilisateur, du plus récent au plus ancien."""
        return self.session.exec(
            select(self.model)
            .where(self.model.created_by == created_by)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        ).all()
