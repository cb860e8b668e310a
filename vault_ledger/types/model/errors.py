# vault_ledger/types/model/errors.py

from typing import Any, Dict, Optional
import hashlib
import msgspec
from msgspec import Struct, field

from ..new import ErrorId, EvmHash, PoolId


class LedgerError(Exception):
    """Base class for ledger failures"""


class ConfigurationError(LedgerError):
    pass


class StructuralInconsistencyError(LedgerError):
    """The event contradicts entity state established by earlier events.

    Raising rejects the whole event; nothing it touched is persisted.
    """

    def __init__(self, message: str, pool_id: Optional[PoolId] = None,
                 token: Optional[str] = None, tx_hash: Optional[EvmHash] = None):
        super().__init__(message)
        self.pool_id = pool_id
        self.token = token
        self.tx_hash = tx_hash


class EventDecodeError(LedgerError):
    """A line of the event stream is not a valid event record"""

    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.line_number = line_number


class ProcessingError(Struct):
    """A rejected event, as reported back from stream processing.

    error_id is a short digest of everything else, so replaying the same
    stream yields the same ids.
    """
    stage: str
    error_type: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    error_id: Optional[ErrorId] = None

    def __post_init__(self) -> None:
        if self.error_id is None:
            self.error_id = fingerprint(self.stage, self.error_type, self.message, self.context)


def fingerprint(*parts: Any) -> ErrorId:
    digest = hashlib.sha256(msgspec.json.encode(parts, order="sorted")).hexdigest()
    return ErrorId(digest[:12])


def create_processing_error(error_type: str, message: str, stage: str = "reduce",
                            **coordinates: Any) -> ProcessingError:
    """Build an error whose context keeps only the event coordinates that are known"""
    context = {key: value for key, value in coordinates.items() if value is not None}
    return ProcessingError(stage=stage, error_type=error_type, message=message, context=context)
