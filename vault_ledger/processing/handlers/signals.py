# vault_ledger/processing/handlers/signals.py

from typing import Callable, Dict, Optional

from ...database.repository_manager import RepositoryManager
from ...database.tables import DBPool
from ...types.constants import SET_SWAP_ENABLED_SIGNAL, SET_POOL_TYPE_SIGNAL
from ...types.model.events import GenericSignal, PausedStateChanged, SwapEnabledSet
from ...types.pools import PoolType
from ..context import EventContext
from .base import BaseHandler


def compute_curated_swap_enabled(is_paused: bool, curation_signal: Optional[bool],
                                 internal_swap_enabled: bool) -> bool:
    if is_paused:
        return False
    if curation_signal is None:
        return internal_swap_enabled
    return curation_signal and internal_swap_enabled


class SignalHandler(BaseHandler):
    """
    Curated out-of-band signals and pool controller toggles.

    GenericSignal identifiers are keccak256 hashes of the function name;
    anything outside the table is ignored.
    """

    def __init__(self, repos: RepositoryManager):
        super().__init__(repos)
        self.signal_map: Dict[str, Callable[[DBPool, GenericSignal], bool]] = {
            SET_SWAP_ENABLED_SIGNAL: self._set_swap_enabled,
            SET_POOL_TYPE_SIGNAL: self._set_pool_type,
        }

        self.register(GenericSignal, self.handle_generic_signal)
        self.register(PausedStateChanged, self.handle_paused_state_changed)
        self.register(SwapEnabledSet, self.handle_swap_enabled_set)

    def handle_generic_signal(self, event: GenericSignal, ctx: EventContext) -> bool:
        signal = self.signal_map.get(event.identifier.lower())
        if signal is None:
            self.log_debug("Unrecognized signal identifier", identifier=event.identifier, **event.context())
            return False

        pool = self.repos.pools.get(ctx.store, event.pool_id)
        if pool is None:
            self.log_debug("Signal for unknown pool", pool_id=event.pool_id, **event.context())
            return False

        return signal(pool, event)

    def _set_swap_enabled(self, pool: DBPool, event: GenericSignal) -> bool:
        if event.value == 0:
            pool.swap_enabled_curation_signal = False
            pool.swap_enabled = False
        else:
            pool.swap_enabled_curation_signal = True
            pool.swap_enabled = compute_curated_swap_enabled(
                pool.is_paused, True, pool.swap_enabled_internal)

        self.log_info("Curated swap signal applied",
                      pool_id=pool.id,
                      swap_enabled=pool.swap_enabled,
                      **event.context())
        return True

    def _set_pool_type(self, pool: DBPool, event: GenericSignal) -> bool:
        pool_type = PoolType.from_index(event.value)
        if pool_type is None:
            self.log_debug("Pool type index out of range", pool_id=pool.id, value=event.value)
            return False

        self.log_info("Pool reclassified",
                      pool_id=pool.id,
                      previous_type=pool.pool_type.value if pool.pool_type else None,
                      pool_type=pool_type.value,
                      **event.context())
        pool.pool_type = pool_type
        return True

    def handle_paused_state_changed(self, event: PausedStateChanged, ctx: EventContext) -> bool:
        pool = self.repos.pools.get_by_address(ctx.store, event.pool_address)
        if pool is None:
            return self.skip("Pool not found for pause change", event, pool_address=event.pool_address)

        pool.is_paused = event.paused
        pool.swap_enabled = compute_curated_swap_enabled(
            pool.is_paused, pool.swap_enabled_curation_signal, pool.swap_enabled_internal)
        return True

    def handle_swap_enabled_set(self, event: SwapEnabledSet, ctx: EventContext) -> bool:
        pool = self.repos.pools.get_by_address(ctx.store, event.pool_address)
        if pool is None:
            return self.skip("Pool not found for swap enabled change", event, pool_address=event.pool_address)

        pool.swap_enabled_internal = event.swap_enabled
        pool.swap_enabled = compute_curated_swap_enabled(
            pool.is_paused, pool.swap_enabled_curation_signal, pool.swap_enabled_internal)
        return True
