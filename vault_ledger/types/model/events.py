# vault_ledger/types/model/events.py

from typing import List, Optional, Union

from msgspec import field

from ..new import EvmAddress, PoolId
from .base import VaultEvent


RawAmount = Union[str, int]


'''
Pool lifecycle
'''
class PoolRegistered(VaultEvent):
    pool_id: PoolId
    pool_address: EvmAddress
    pool_type: str = "Unknown"
    pool_type_version: int = 1

class TokensRegistered(VaultEvent):
    pool_id: PoolId
    tokens: List[EvmAddress]
    asset_managers: List[EvmAddress] = []


'''
Vault balance events. Raw amounts are integers or base-10 integer strings.
'''
class PoolBalanceChanged(VaultEvent):
    pool_id: PoolId
    liquidity_provider: EvmAddress
    deltas: List[RawAmount]
    protocol_fee_amounts: List[RawAmount]

class PoolBalanceManaged(VaultEvent):
    pool_id: PoolId
    token: EvmAddress
    cash_delta: RawAmount
    managed_delta: RawAmount
    asset_manager: Optional[EvmAddress] = None

class InternalBalanceChanged(VaultEvent):
    user: EvmAddress
    token: EvmAddress
    delta: RawAmount

class Swap(VaultEvent):
    pool_id: PoolId
    token_in: EvmAddress
    token_out: EvmAddress
    amount_in: RawAmount
    amount_out: RawAmount
    sender: EvmAddress


'''
Share token movements. Derived transfers are produced by other handlers
to compensate for share movements the source never reports directly.
'''
class ShareTransfer(VaultEvent):
    token: EvmAddress
    from_: EvmAddress = field(name="from")
    to: EvmAddress
    value: RawAmount
    derived: bool = False


'''
Oracles
'''
class OracleRegistered(VaultEvent):
    oracle: EvmAddress
    token: EvmAddress
    decimals: Optional[int] = None
    divisor: Optional[RawAmount] = None

class OracleAnswerUpdated(VaultEvent):
    aggregator: EvmAddress
    answer: RawAmount


'''
Curated and pool controller signals
'''
class GenericSignal(VaultEvent):
    identifier: str
    pool_id: PoolId
    value: int

class PausedStateChanged(VaultEvent):
    pool_address: EvmAddress
    paused: bool

class SwapEnabledSet(VaultEvent):
    pool_address: EvmAddress
    swap_enabled: bool


EventUnion = Union[
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
]
