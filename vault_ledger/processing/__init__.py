# vault_ledger/processing/__init__.py

from .processor import EventProcessor, EventOutcome, ReplaySummary
from .snapshots import SnapshotBuilder
from .context import EventContext
from .stable_math import (
    calculate_invariant,
    AMP_PRECISION,
    StableMathError,
    ZeroBalanceError,
    StableInvariantDidNotConverge,
)

__all__ = [
    'EventProcessor',
    'EventOutcome',
    'ReplaySummary',
    'SnapshotBuilder',
    'EventContext',
    'calculate_invariant',
    'AMP_PRECISION',
    'StableMathError',
    'ZeroBalanceError',
    'StableInvariantDidNotConverge',
]
