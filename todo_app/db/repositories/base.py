from typing import Any, Generic, Optional, Type, TypeVar
from sqlmodel import SQLModel, Session

# Modèle géré par le repository (User, Todo)
ModelT = TypeVar("ModelT", bound=SQLModel)

class BaseRepository(Generic[ModelT]):
    """
    Persistance générique d'une table : lecture par clé, insertion, modification, suppression.

    👉 Chaque écriture est commitée immédiatement (une requête HTTP = une opération).
    👉 Les repositories concrets définissent `model = MaClasseSQLModel`.
    👉 Les erreurs SQLAlchemy remontent telles quelles : le service fait `rollback()` et les traduit.
    """

    model: Type[ModelT]

    def __init__(self, session: Session):
        self.session = session

    def _persist(self, entity: ModelT) -> ModelT:
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def get(self, id_: Any) -> Optional[ModelT]:
        return self.session.get(self.model, id_)

    def create(self, **fields) -> ModelT:
        """Insère une ligne ; l'entité retournée porte les valeurs générées (id, created_at…)."""
        return self._persist(self.model(**fields))

    def update(self, entity: ModelT, **changes) -> ModelT:
        for key, value in changes.items():
            setattr(entity, key, value)
        return self._persist(entity)

    def delete(self, entity: ModelT) -> None:
        self.session.delete(entity)
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
