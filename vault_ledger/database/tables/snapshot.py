# vault_ledger/database/tables/snapshot.py

from sqlalchemy import Column, Integer, String

from ..base import DBEntity
from ..types import DecimalString, DecimalList
from ...types.constants import ZERO_BD


class DBPoolSnapshot(DBEntity):
    """Daily rollup of a pool, keyed '<pool id>-<day start timestamp>'"""
    __tablename__ = 'pool_snapshots'

    pool_id = Column(String(66), nullable=False, index=True)
    timestamp = Column(Integer, nullable=False, index=True)
    amounts = Column(DecimalList(), nullable=False)
    total_shares = Column(DecimalString(), nullable=False, default=ZERO_BD)
    swaps_count = Column(Integer, nullable=False, default=0)
    holders_count = Column(Integer, nullable=False, default=0)
