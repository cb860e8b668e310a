# vault_ledger/processing/handlers/base.py

from abc import ABC
from typing import Callable, Dict, Type

from ...core.logging import LoggingMixin
from ...database.repository_manager import RepositoryManager
from ...types.model.base import VaultEvent
from ..context import EventContext


# Returns True when the event changed state, False when it was skipped
EventHandler = Callable[[VaultEvent, EventContext], bool]


class BaseHandler(ABC, LoggingMixin):
    def __init__(self, repos: RepositoryManager):
        self.repos = repos
        self.name = self.__class__.__name__
        self.handler_map: Dict[Type[VaultEvent], EventHandler] = {}

    def register(self, event_class: Type[VaultEvent], handler: EventHandler) -> None:
        if event_class in self.handler_map:
            raise ValueError(f"{self.name} already handles {event_class.__name__}")
        self.handler_map[event_class] = handler

    def skip(self, message: str, event: VaultEvent, **context) -> bool:
        """Recoverable missing reference: warn with the event's coordinates and move on"""
        self.log_warning(message,
                         handler_name=self.name,
                         **event.context(),
                         **context)
        return False
