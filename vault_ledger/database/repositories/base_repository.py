# vault_ledger/database/repositories/base_repository.py

from typing import TypeVar, Generic, Type, Optional

from sqlalchemy.orm import Session

from ...core.logging import LedgerLogger
from ..base import DBEntity
from ..store import EntityStore


T = TypeVar('T', bound=DBEntity)


class BaseRepository(Generic[T]):
    """Entity access keyed by deterministic ids, routed through the per-event store"""

    def __init__(self, model_class: Type[T]):
        self.model_class = model_class
        self.logger = LedgerLogger.get_logger(f'database.repository.{model_class.__name__.lower()}')

    def get(self, store: EntityStore, entity_id: str) -> Optional[T]:
        return store.get(self.model_class, entity_id)

    def create(self, store: EntityStore, **kwargs) -> T:
        instance = store.add(self.model_class(**kwargs))
        self.logger.debug(f"Created {self.model_class.__name__} {instance.id}")
        return instance

    def get_by_id(self, session: Session, entity_id: str) -> Optional[T]:
        """Read outside event processing, against committed state"""
        return session.get(self.model_class, entity_id)
