# vault_ledger/database/tables/pool.py

from sqlalchemy import Column, Integer, Boolean, Enum, String

from ..base import DBEntity
from ..types import EvmAddressType, DecimalString, AddressList
from ...types.constants import ZERO_BD, ONE_BD
from ...types.pools import PoolType, PoolCapabilities


class DBPool(DBEntity):
    __tablename__ = 'pools'

    address = Column(EvmAddressType(), nullable=False, index=True)
    pool_type = Column(Enum(PoolType, native_enum=False, length=32), nullable=False, default=PoolType.UNKNOWN)
    pool_type_version = Column(Integer, nullable=False, default=1)
    specialization = Column(Integer, nullable=True)
    tokens_list = Column(AddressList(), nullable=False, default=list)

    total_shares = Column(DecimalString(), nullable=False, default=ZERO_BD)
    total_weight = Column(DecimalString(), nullable=False, default=ZERO_BD)
    swaps_count = Column(Integer, nullable=False, default=0)
    holders_count = Column(Integer, nullable=False, default=0)

    amp = Column(DecimalString(), nullable=True)
    last_post_join_exit_invariant = Column(DecimalString(), nullable=True)
    last_join_exit_amp = Column(DecimalString(), nullable=True)

    swap_enabled = Column(Boolean, nullable=False, default=True)
    swap_enabled_internal = Column(Boolean, nullable=False, default=True)
    swap_enabled_curation_signal = Column(Boolean, nullable=True)
    is_paused = Column(Boolean, nullable=False, default=False)

    create_time = Column(Integer, nullable=False, default=0)

    @property
    def capabilities(self) -> PoolCapabilities:
        """Follows the current pool_type, so a later reclassification takes effect"""
        return (self.pool_type or PoolType.UNKNOWN).capabilities

    def __repr__(self) -> str:
        return f"<Pool(id={self.id[:12]}..., type={self.pool_type}, shares={self.total_shares})>"


class DBPoolContract(DBEntity):
    """Maps a pool (share token) address back to its pool id"""
    __tablename__ = 'pool_contracts'

    pool_id = Column(String(66), nullable=False, index=True)


class DBPoolToken(DBEntity):
    __tablename__ = 'pool_tokens'

    pool_id = Column(String(66), nullable=False, index=True)
    address = Column(EvmAddressType(), nullable=False, index=True)
    index = Column(Integer, nullable=False)
    symbol = Column(String(64), nullable=False, default="")
    name = Column(String(128), nullable=False, default="")
    decimals = Column(Integer, nullable=False, default=18)
    asset_manager = Column(EvmAddressType(), nullable=True)

    balance = Column(DecimalString(), nullable=False, default=ZERO_BD)
    cash_balance = Column(DecimalString(), nullable=False, default=ZERO_BD)
    managed_balance = Column(DecimalString(), nullable=False, default=ZERO_BD)
    price_rate = Column(DecimalString(), nullable=False, default=ONE_BD)
    weight = Column(DecimalString(), nullable=True)
    is_exempt_from_yield_protocol_fee = Column(Boolean, nullable=True)

    def __repr__(self) -> str:
        return f"<PoolToken(pool={self.pool_id[:12]}..., token={self.address}, balance={self.balance})>"
