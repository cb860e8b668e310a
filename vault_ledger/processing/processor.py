# vault_ledger/processing/processor.py

import enum
from decimal import localcontext
from typing import Dict, Iterable, List, Optional, Type

from msgspec import Struct, field

from ..clients.interfaces import ContractMetadataProvider, PoolParameterProvider
from ..core.logging import LoggingMixin
from ..database.connection import DatabaseManager
from ..database.repository_manager import RepositoryManager
from ..database.store import EntityStore
from ..types.configs.config import LedgerConfig, FXAggregatorConfig
from ..types.constants import VAULT_ADDRESS, PRECIOUS_METAL_TOKEN
from ..types.model.base import VaultEvent
from ..types.model.errors import (
    LedgerError,
    ProcessingError,
    StructuralInconsistencyError,
    create_processing_error,
)
from ..types.new import EvmAddress
from ..utils.amounts import ACCOUNTING_CONTEXT
from .context import EventContext
from .handlers import (
    BaseHandler,
    EventHandler,
    RegistrationHandler,
    VaultHandler,
    ShareTransferHandler,
    PricingHandler,
    SignalHandler,
)
from .snapshots import SnapshotBuilder
from .stable_math import StableMathError


class EventOutcome(str, enum.Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"


class ReplaySummary(Struct):
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    errors: List[ProcessingError] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.processed + self.skipped + self.failed


class EventProcessor(LoggingMixin):
    """
    Applies events to the ledger one at a time, in arrival order.

    Each event runs in its own transaction: the root handler, every derived
    event it queues and the resulting snapshot refreshes either all commit
    together or all roll back.
    """

    MAX_DERIVED_EVENTS = 64

    def __init__(self,
                 db: DatabaseManager,
                 metadata: ContractMetadataProvider,
                 parameters: PoolParameterProvider,
                 fx_aggregators: Optional[List[FXAggregatorConfig]] = None,
                 vault_address: EvmAddress = VAULT_ADDRESS,
                 precious_metal_token: EvmAddress = PRECIOUS_METAL_TOKEN):
        self.db = db
        self.repos = RepositoryManager(metadata)
        self.snapshots = SnapshotBuilder(self.repos)

        self.handlers: List[BaseHandler] = [
            RegistrationHandler(self.repos, metadata),
            VaultHandler(self.repos, parameters, vault_address=vault_address),
            ShareTransferHandler(self.repos),
            PricingHandler(self.repos, fx_aggregators, precious_metal_token=precious_metal_token),
            SignalHandler(self.repos),
        ]

        self.handler_map: Dict[Type[VaultEvent], EventHandler] = {}
        for handler in self.handlers:
            for event_class, handle in handler.handler_map.items():
                if event_class in self.handler_map:
                    raise ValueError(f"Multiple handlers registered for {event_class.__name__}")
                self.handler_map[event_class] = handle

        self.log_info("EventProcessor initialized",
                      handler_count=len(self.handlers),
                      event_types=sorted(cls.__name__ for cls in self.handler_map))

    @classmethod
    def from_config(cls, db: DatabaseManager, config: LedgerConfig,
                    metadata: ContractMetadataProvider,
                    parameters: PoolParameterProvider) -> "EventProcessor":
        return cls(db, metadata, parameters,
                   fx_aggregators=config.fx_aggregators,
                   vault_address=config.vault_address,
                   precious_metal_token=config.precious_metal_token)

    def process(self, event: VaultEvent) -> EventOutcome:
        """
        Apply one event atomically.

        Raises whatever the handlers raise; the transaction is rolled back
        first, so the ledger is left as it was before the event.
        """
        handler = self.handler_map.get(type(event))
        if handler is None:
            self.log_debug("No handler for event", **event.context())
            return EventOutcome.SKIPPED

        with self.db.get_transaction() as session, localcontext(ACCOUNTING_CONTEXT):
            ctx = EventContext(EntityStore(session), event)
            applied = handler(event, ctx)
            self._drain_derived(ctx)
            for pool_id in ctx.snapshot_pools:
                self.snapshots.refresh(ctx.store, pool_id, ctx.block_number, ctx.timestamp)

            self.log_debug("Event applied" if applied else "Event skipped",
                           entity_count=len(ctx.store),
                           **event.context())

        return EventOutcome.APPLIED if applied else EventOutcome.SKIPPED

    def _drain_derived(self, ctx: EventContext) -> None:
        count = 0
        while ctx.derived:
            derived = ctx.derived.popleft()
            count += 1
            if count > self.MAX_DERIVED_EVENTS:
                raise LedgerError(f"Derived event chain exceeded {self.MAX_DERIVED_EVENTS} events")

            handler = self.handler_map.get(type(derived))
            if handler is None:
                raise LedgerError(f"No handler for derived {derived.event_type}")
            handler(derived, ctx)

    def process_stream(self, events: Iterable[VaultEvent], fail_fast: bool = False) -> ReplaySummary:
        summary = ReplaySummary()

        for event in events:
            try:
                outcome = self.process(event)
            except Exception as e:
                summary.failed += 1
                summary.errors.append(self._record_failure(event, e))
                if fail_fast:
                    raise
                continue

            if outcome is EventOutcome.APPLIED:
                summary.processed += 1
            else:
                summary.skipped += 1

        self.log_info("Event stream processed",
                      processed_events=summary.processed,
                      skipped_events=summary.skipped,
                      failed_events=summary.failed)
        return summary

    def _record_failure(self, event: VaultEvent, error: Exception) -> ProcessingError:
        if isinstance(error, StructuralInconsistencyError):
            error_type = "structural_inconsistency"
        elif isinstance(error, StableMathError):
            error_type = "invariant"
        else:
            error_type = "unexpected"

        self.log_error("Event rejected, ledger state left unchanged",
                       error=str(error),
                       exception_type=type(error).__name__,
                       pool_id=getattr(event, 'pool_id', None),
                       **event.context())

        return create_processing_error(
            error_type=error_type,
            message=str(error),
            event_type=event.event_type,
            tx_hash=event.tx_hash,
            block_number=event.block_number,
            log_index=event.log_index,
            pool_id=getattr(event, 'pool_id', None),
        )
