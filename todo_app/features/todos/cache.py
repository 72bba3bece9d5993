"""
➡️ But : Miroir en mémoire des todos, pour éviter une requête SQL à chaque affichage de liste.

Le cache est indexé par utilisateur (User.id → liste ordonnée, plus récent en tête) :
deux utilisateurs connectés en même temps ne s'écrasent pas mutuellement.

⚠️ Pas de verrou ici : l'appelant tient `AppState.lock` (lecture pour read_all,
écriture pour toute mutation).
⚠️ Un seul process : inutilisable tel quel avec plusieurs instances.
"""

from typing import Dict, Iterable, List

from todo_app.db.models.todos import Todo


def _copy(todo: Todo) -> Todo:
    return Todo.model_validate(todo.model_dump())


class TodoCache:
    def __init__(self) -> None:
        self._items: Dict[str, List[Todo]] = {}

    def __len__(self) -> int:
        return sum(len(items) for items in self._items.values())

    def has(self, owner_id: str) -> bool:
        return owner_id in self._items

    def replace_all(self, owner_id: str, items: Iterable[Todo]) -> None:
        """Remplace d'un bloc la liste d'un utilisateur (connexion)."""
        self._items[owner_id] = [_copy(t) for t in items]

    def insert_front(self, item: Todo) -> None:
        """
        Ajoute un todo fraîchement créé en tête (ordre plus récent d'abord conservé).
        No-op si la liste du propriétaire n'est pas chargée : la prochaine lecture
        de /todo/list rechargera tout depuis la base.
        """
        items = self._items.get(item.created_by)
        if items is not None:
            items.insert(0, _copy(item))

    def update_in_place(self, todo_id: int, title: str, description: str, status: bool) -> None:
        """Met à jour l'entrée correspondante ; no-op si absente."""
        for items in self._items.values():
            for item in items:
                if item.id == todo_id:
                    item.title = title
                    item.description = description
                    item.status = status
                    return

    def remove(self, todo_id: int) -> None:
        """Retire l'id de toutes les listes ; idempotent."""
        for owner_id, items in self._items.items():
            self._items[owner_id] = [item for item in items if item.id != todo_id]

    def read_all(self, owner_id: str) -> List[Todo]:
        """Copie instantanée : le lecteur peut la garder après avoir relâché le verrou."""
        return [_copy(t) for t in self._items.get(owner_id, [])]

    def evict(self, owner_id: str) -> None:
        self._items.pop(owner_id, None)
