"""
➡️ But : Encapsuler toutes les opérations de base de données sur la table users.

Ne contient aucune logique métier, juste de la persistance.
"""

from __future__ import annotations

from typing import Optional
from sqlmodel import select

from todo_app.db.repositories.base import BaseRepository
from todo_app.db.models.users import User

class UserRepository(BaseRepository[User]):
    """
    Repository pour la table users.
    Hérite du CRUD générique de BaseRepository.
    Contient uniquement les requêtes spécifiques à User.
    """
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        """Retourne un utilisateur par email (déjà normalisé en minuscules), ou None."""
        return self.session.exec(
            select(self.model).where(self.model.email == email)
        ).first()

    def email_exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None
