# vault_ledger/database/store.py

from typing import Dict, Optional, Tuple, Type, TypeVar, Iterator

from sqlalchemy.orm import Session

from ..core.logging import LoggingMixin
from .base import DBEntity


T = TypeVar('T', bound=DBEntity)


class EntityStore(LoggingMixin):
    """
    Unit of work for a single event.

    Every entity loaded or created while applying one event is cached here,
    so repeated reads hand back the same instance and the event's mutations
    reach the database as one write per entity when the transaction commits.
    """

    def __init__(self, session: Session):
        self.session = session
        self._entities: Dict[Tuple[type, str], DBEntity] = {}

    def get(self, model_class: Type[T], entity_id: str) -> Optional[T]:
        key = (model_class, entity_id)
        cached = self._entities.get(key)
        if cached is not None:
            return cached

        instance = self.session.get(model_class, entity_id)
        if instance is not None:
            self._entities[key] = instance
        return instance

    def add(self, instance: T) -> T:
        key = (type(instance), instance.id)
        if key in self._entities and self._entities[key] is not instance:
            raise ValueError(f"{type(instance).__name__} {instance.id} already tracked in this unit of work")

        self.session.add(instance)
        self._entities[key] = instance
        return instance

    def __iter__(self) -> Iterator[DBEntity]:
        return iter(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)
