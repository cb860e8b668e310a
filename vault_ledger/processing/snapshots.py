# vault_ledger/processing/snapshots.py

from decimal import Decimal
from typing import List

from ..core.logging import LoggingMixin
from ..database.repository_manager import RepositoryManager
from ..database.store import EntityStore
from ..types.constants import ZERO_BD
from ..types.new import PoolId
from ..utils.amounts import day_start


class SnapshotBuilder(LoggingMixin):
    """Daily pool rollups; the last refresh within a day wins"""

    def __init__(self, repos: RepositoryManager):
        self.repos = repos

    def refresh(self, store: EntityStore, pool_id: PoolId, block_number: int, timestamp: int) -> bool:
        pool = self.repos.pools.get(store, pool_id)
        if pool is None:
            self.log_debug("Snapshot refresh for unknown pool", pool_id=pool_id, block_number=block_number)
            return False

        day = day_start(timestamp)
        snapshot = self.repos.snapshots.get_or_create(store, PoolId(pool.id), day)

        amounts: List[Decimal] = []
        for token, pool_token in zip(pool.tokens_list, self.repos.pool_tokens.load_for_pool(store, pool)):
            if pool_token is None:
                self.log_debug("PoolToken missing from snapshot", pool_id=pool.id, token=token)
                amounts.append(ZERO_BD)
                continue
            amounts.append(pool_token.balance)

        snapshot.amounts = amounts
        snapshot.total_shares = pool.total_shares
        snapshot.swaps_count = pool.swaps_count
        snapshot.holders_count = pool.holders_count
        return True
