"""
➡️ But : Définir la structure de la table `todos` (ORM).

Un todo appartient à exactement un utilisateur (`created_by` → users.id).
`created_at` est posé à l'insertion (UTC naïf, comme SQLite le stocke) et ne bouge plus.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import NaiveDatetime
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Todo(SQLModel, table=True):
    __tablename__ = "todos"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_by: str = Field(foreign_key="users.id", index=True)
    title: str
    description: str = ""
    status: bool = Field(default=False)
    # colonne sans fuseau : la valeur est de l'UTC naïf
    created_at: NaiveDatetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=False))
