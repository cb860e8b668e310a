# vault_ledger/processing/context.py

from collections import deque
from typing import Deque, List

from ..database.store import EntityStore
from ..types.model.base import VaultEvent
from ..types.new import PoolId


class EventContext:
    """
    Per-event processing state shared by every handler that touches the event.

    Derived events queued here are applied after the root handler returns,
    in FIFO order, inside the same transaction. Snapshot refreshes are
    collected and run once per pool after all derived events settle.
    """

    def __init__(self, store: EntityStore, event: VaultEvent):
        self.store = store
        self.event = event
        self.derived: Deque[VaultEvent] = deque()
        self.snapshot_pools: List[PoolId] = []

    def emit(self, derived_event: VaultEvent) -> None:
        self.derived.append(derived_event)

    def request_snapshot(self, pool_id: PoolId) -> None:
        pool_id = PoolId(pool_id.lower())
        if pool_id not in self.snapshot_pools:
            self.snapshot_pools.append(pool_id)

    @property
    def block_number(self) -> int:
        return self.event.block_number

    @property
    def timestamp(self) -> int:
        return self.event.timestamp
