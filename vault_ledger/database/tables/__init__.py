# vault_ledger/database/tables/__init__.py

# Aggregate tables
from .vault import DBVault, DBUser

# Pool tables
from .pool import DBPool, DBPoolContract, DBPoolToken

# Token tables
from .token import DBToken, DBFXOracle

# Share and custody tables
from .shares import DBPoolShare, DBUserInternalBalance

# Event record tables
from .events import DBSwap, DBJoinExit, JoinExitType

# Rollup tables
from .snapshot import DBPoolSnapshot

__all__ = [
    # Aggregate tables
    'DBVault',
    'DBUser',

    # Pool tables
    'DBPool',
    'DBPoolContract',
    'DBPoolToken',

    # Token tables
    'DBToken',
    'DBFXOracle',

    # Share and custody tables
    'DBPoolShare',
    'DBUserInternalBalance',

    # Event record tables
    'DBSwap',
    'DBJoinExit',
    'JoinExitType',

    # Rollup tables
    'DBPoolSnapshot',
]
