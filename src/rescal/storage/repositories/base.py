from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, List, Dict, Any, Iterable, Type
from sqlalchemy.orm import Session

T = TypeVar("T")

class BaseRepository(Generic[T], ABC):
    """
    Shared CRUD for a single mapped model.

    Subclasses set `model` and `updatable_fields` and define list ordering.
    All writes flush but never commit; the caller owns the transaction.
    """

    model: Type[T]
    updatable_fields: Iterable[str] = ()

    def create(self, session: Session, entity: T) -> T:
        session.add(entity)
        session.flush()
        return entity

    def get(self, session: Session, id: str) -> Optional[T]:
        return session.get(self.model, id)

    def update(self, session: Session, id: str, updates: Dict[str, Any]) -> Optional[T]:
        entity = self.get(session, id)
        if not entity:
            return None

        for key in self.updatable_fields:
            if key in updates:
                setattr(entity, key, updates[key])

        session.flush()
        return entity

    def delete(self, session: Session, id: str) -> bool:
        entity = self.get(session, id)
        if not entity:
            return False
        session.delete(entity)
        session.flush()
        return True

    @abstractmethod
    def list(self, session: Session, limit: int = 1000, offset: int = 0) -> List[T]:
        pass
