# vault_ledger/types/__init__.py

from .constants import (
    ZERO_ADDRESS,
    VAULT_ADDRESS,
    VAULT_ID,
    ZERO_BD,
    ONE_BD,
    SHARE_TOKEN_DECIMALS,
    SECONDS_PER_DAY,
)

from .new import (
    EvmAddress,
    EvmHash,
    PoolId,
    EntityId,
    ErrorId,
)

# Configuration Types
from .configs.config import (
    DatabaseConfig,
    RpcConfig,
    LoggingConfig,
    FXAggregatorConfig,
    TokenMetadataConfig,
    PoolMetadataConfig,
    LedgerConfig,
)

# Pool kinds
from .pools import (
    PoolType,
    PoolCapabilities,
    POOL_TYPES,
)

# Model Types: Base
from .model.base import VaultEvent

# Model Types: Events
from .model.events import (
    PoolRegistered,
    TokensRegistered,
    PoolBalanceChanged,
    PoolBalanceManaged,
    InternalBalanceChanged,
    Swap,
    ShareTransfer,
    OracleRegistered,
    OracleAnswerUpdated,
    GenericSignal,
    PausedStateChanged,
    SwapEnabledSet,
    EventUnion,
)

# Model Types: Errors
from .model.errors import (
    LedgerError,
    ConfigurationError,
    StructuralInconsistencyError,
    EventDecodeError,
    ProcessingError,
    create_processing_error,
)

__all__ = [
    # Constants
    "ZERO_ADDRESS",
    "VAULT_ADDRESS",
    "VAULT_ID",
    "ZERO_BD",
    "ONE_BD",
    "SHARE_TOKEN_DECIMALS",
    "SECONDS_PER_DAY",

    # New Types
    "EvmAddress",
    "EvmHash",
    "PoolId",
    "EntityId",
    "ErrorId",

    # Configuration types
    "DatabaseConfig",
    "RpcConfig",
    "LoggingConfig",
    "FXAggregatorConfig",
    "TokenMetadataConfig",
    "PoolMetadataConfig",
    "LedgerConfig",

    # Pool kinds
    "PoolType",
    "PoolCapabilities",
    "POOL_TYPES",

    # Events
    "VaultEvent",
    "PoolRegistered",
    "TokensRegistered",
    "PoolBalanceChanged",
    "PoolBalanceManaged",
    "InternalBalanceChanged",
    "Swap",
    "ShareTransfer",
    "OracleRegistered",
    "OracleAnswerUpdated",
    "GenericSignal",
    "PausedStateChanged",
    "SwapEnabledSet",
    "EventUnion",

    # Errors
    "LedgerError",
    "ConfigurationError",
    "StructuralInconsistencyError",
    "EventDecodeError",
    "ProcessingError",
    "create_processing_error",
]
