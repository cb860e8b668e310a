# vault_ledger/database/tables/token.py

from sqlalchemy import Column, Integer, String

from ..base import DBEntity
from ..types import EvmAddressType, DecimalString, AddressList, BigIntString
from ...types.constants import ZERO_BD


class DBToken(DBEntity):
    __tablename__ = 'tokens'

    address = Column(EvmAddressType(), nullable=False, unique=True)
    symbol = Column(String(64), nullable=False, default="")
    name = Column(String(128), nullable=False, default="")
    decimals = Column(Integer, nullable=False, default=18)

    total_balance_notional = Column(DecimalString(), nullable=False, default=ZERO_BD)
    total_swap_count = Column(Integer, nullable=False, default=0)

    latest_fx_price = Column(DecimalString(), nullable=True)
    fx_oracle_decimals = Column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<Token(address={self.address}, symbol={self.symbol})>"


class DBFXOracle(DBEntity):
    __tablename__ = 'fx_oracles'

    tokens = Column(AddressList(), nullable=False, default=list)
    decimals = Column(Integer, nullable=True)
    divisor = Column(BigIntString(), nullable=True)
