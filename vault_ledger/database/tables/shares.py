# vault_ledger/database/tables/shares.py

from sqlalchemy import Column, String

from ..base import DBEntity
from ..types import EvmAddressType, DecimalString
from ...types.constants import ZERO_BD


class DBPoolShare(DBEntity):
    __tablename__ = 'pool_shares'

    pool_id = Column(String(66), nullable=False, index=True)
    user_address = Column(EvmAddressType(), nullable=False, index=True)
    balance = Column(DecimalString(), nullable=False, default=ZERO_BD)

    def __repr__(self) -> str:
        return f"<PoolShare(pool={self.pool_id[:12]}..., user={self.user_address}, balance={self.balance})>"


class DBUserInternalBalance(DBEntity):
    __tablename__ = 'user_internal_balances'

    user_address = Column(EvmAddressType(), nullable=False, index=True)
    token = Column(EvmAddressType(), nullable=False, index=True)
    balance = Column(DecimalString(), nullable=False, default=ZERO_BD)
