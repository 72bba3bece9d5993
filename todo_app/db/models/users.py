"""
➡️ But : Définir la structure de la table `users` (ORM).

Chaque champ = une colonne SQL (avec type, index, clé primaire...).

- `id` : uuid généré côté serveur, immuable
- `email` : unique, stocké en minuscules (comparaison insensible à la casse)
- `password_hash` : chaîne PHC argon2id, jamais le mot de passe en clair
- `username` : affichage seulement, pas unique
"""

import uuid

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    username: str
