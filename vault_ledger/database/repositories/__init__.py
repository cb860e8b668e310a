# vault_ledger/database/repositories/__init__.py

from .base_repository import BaseRepository
from .pool_repository import (
    PoolRepository,
    PoolTokenRepository,
    pool_address_from_id,
    specialization_from_id,
    pool_token_id,
)
from .token_repository import TokenRepository, FXOracleRepository
from .account_repository import (
    VaultRepository,
    UserRepository,
    PoolShareRepository,
    InternalBalanceRepository,
    pool_share_id,
    internal_balance_id,
)
from .record_repository import (
    SwapRepository,
    JoinExitRepository,
    SnapshotRepository,
    snapshot_id,
)

__all__ = [
    'BaseRepository',
    'PoolRepository',
    'PoolTokenRepository',
    'TokenRepository',
    'FXOracleRepository',
    'VaultRepository',
    'UserRepository',
    'PoolShareRepository',
    'InternalBalanceRepository',
    'SwapRepository',
    'JoinExitRepository',
    'SnapshotRepository',
    'pool_address_from_id',
    'specialization_from_id',
    'pool_token_id',
    'pool_share_id',
    'internal_balance_id',
    'snapshot_id',
]
