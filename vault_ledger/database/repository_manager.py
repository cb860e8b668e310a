# vault_ledger/database/repository_manager.py

import logging

from ..clients.interfaces import ContractMetadataProvider
from ..core.logging import LedgerLogger, log_with_context
from .repositories import (
    VaultRepository,
    UserRepository,
    PoolRepository,
    PoolTokenRepository,
    TokenRepository,
    FXOracleRepository,
    PoolShareRepository,
    InternalBalanceRepository,
    SwapRepository,
    JoinExitRepository,
    SnapshotRepository,
)


class RepositoryManager:
    """
    Central access point for every entity repository.

    Repositories are stateless; the per-event EntityStore is passed to each
    call, so one manager serves the whole replay.
    """

    def __init__(self, metadata: ContractMetadataProvider):
        self.logger = LedgerLogger.get_logger('database.repository_manager')

        # Aggregates and accounts
        self.vault = VaultRepository()
        self.users = UserRepository()
        self.pool_shares = PoolShareRepository(self.users)
        self.internal_balances = InternalBalanceRepository()

        # Pools and tokens
        self.pools = PoolRepository()
        self.pool_tokens = PoolTokenRepository()
        self.tokens = TokenRepository(metadata)
        self.fx_oracles = FXOracleRepository()

        # Immutable records and rollups
        self.swaps = SwapRepository()
        self.join_exits = JoinExitRepository()
        self.snapshots = SnapshotRepository()

        log_with_context(
            self.logger, logging.DEBUG, "RepositoryManager initialized",
            metadata_provider=type(metadata).__name__
        )
