# vault_ledger/types/model/base.py

from typing import Dict, Any
from msgspec import Struct

from ..new import EvmHash, EntityId


class VaultEvent(Struct, kw_only=True, tag=True):
    """Base for every record consumed from the event source.

    Ordering by (block_number, tx_hash, log_index) is the source's job;
    the ledger applies records exactly in the order they arrive.
    """
    block_number: int = 0
    tx_hash: EvmHash = EvmHash("")
    log_index: int = 0
    timestamp: int = 0

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    @property
    def event_id(self) -> EntityId:
        """Unique per log: transaction hash followed by the log index"""
        return EntityId(f"{self.tx_hash}{self.log_index}")

    def context(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "tx_hash": self.tx_hash,
            "block_number": self.block_number,
            "log_index": self.log_index,
        }
