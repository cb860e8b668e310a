# vault_ledger/database/tables/events.py

from sqlalchemy import Column, Integer, String, Enum
import enum

from ..base import DBEntity
from ..types import EvmAddressType, EvmHashType, DecimalString, DecimalList


class JoinExitType(enum.Enum):
    JOIN = "Join"
    EXIT = "Exit"


class DBSwap(DBEntity):
    __tablename__ = 'swaps'

    pool_id = Column(String(66), nullable=False, index=True)
    token_in = Column(EvmAddressType(), nullable=False, index=True)
    token_in_sym = Column(String(64), nullable=False, default="")
    token_amount_in = Column(DecimalString(), nullable=False)
    token_out = Column(EvmAddressType(), nullable=False, index=True)
    token_out_sym = Column(String(64), nullable=False, default="")
    token_amount_out = Column(DecimalString(), nullable=False)

    caller = Column(EvmAddressType(), nullable=True)
    user_address = Column(EvmAddressType(), nullable=True, index=True)

    timestamp = Column(Integer, nullable=False, index=True)
    tx = Column(EvmHashType(), nullable=True, index=True)
    block = Column(Integer, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Swap(pool={self.pool_id[:12]}..., {self.token_amount_in} {self.token_in_sym} -> {self.token_amount_out} {self.token_out_sym})>"


class DBJoinExit(DBEntity):
    __tablename__ = 'join_exits'

    pool_id = Column(String(66), nullable=False, index=True)
    type = Column(Enum(JoinExitType, native_enum=False), nullable=False)
    amounts = Column(DecimalList(), nullable=False)
    sender = Column(EvmAddressType(), nullable=True)
    user = Column(EvmAddressType(), nullable=True, index=True)

    timestamp = Column(Integer, nullable=False, index=True)
    tx = Column(EvmHashType(), nullable=True, index=True)
    block = Column(Integer, nullable=False, index=True)
