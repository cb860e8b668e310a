# vault_ledger/database/tables/vault.py

from sqlalchemy import Column, Integer

from ..base import DBEntity


class DBVault(DBEntity):
    """Protocol-wide aggregate; exactly one row"""
    __tablename__ = 'vaults'

    pool_count = Column(Integer, nullable=False, default=0)
    total_swap_count = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Vault(id={self.id}, pools={self.pool_count}, swaps={self.total_swap_count})>"


class DBUser(DBEntity):
    __tablename__ = 'users'
