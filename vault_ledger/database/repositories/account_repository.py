# vault_ledger/database/repositories/account_repository.py

from typing import List

from sqlalchemy.orm import Session

from ...types.constants import ZERO_BD, VAULT_ID
from ...types.new import EvmAddress, PoolId, EntityId
from ..store import EntityStore
from ..tables import DBVault, DBUser, DBPoolShare, DBUserInternalBalance
from .base_repository import BaseRepository
from .pool_repository import pool_address_from_id


def pool_share_id(pool_id: PoolId, user: EvmAddress) -> EntityId:
    return EntityId(f"{pool_address_from_id(pool_id)}-{user.lower()}")


def internal_balance_id(user: EvmAddress, token: EvmAddress) -> EntityId:
    return EntityId(f"{user.lower()}{token.lower()}")


class VaultRepository(BaseRepository[DBVault]):
    def __init__(self):
        super().__init__(DBVault)

    def get_or_create(self, store: EntityStore) -> DBVault:
        vault = store.get(DBVault, VAULT_ID)
        if vault is None:
            vault = self.create(store, id=VAULT_ID, pool_count=0, total_swap_count=0)
        return vault


class UserRepository(BaseRepository[DBUser]):
    def __init__(self):
        super().__init__(DBUser)

    def ensure(self, store: EntityStore, user: EvmAddress) -> DBUser:
        existing = store.get(DBUser, user.lower())
        if existing is not None:
            return existing
        return self.create(store, id=user.lower())


class PoolShareRepository(BaseRepository[DBPoolShare]):
    def __init__(self, users: UserRepository):
        super().__init__(DBPoolShare)
        self.users = users

    def get_or_create(self, store: EntityStore, pool_id: PoolId, user: EvmAddress) -> DBPoolShare:
        share_id = pool_share_id(pool_id, user)
        existing = store.get(DBPoolShare, share_id)
        if existing is not None:
            return existing

        self.users.ensure(store, user)
        return self.create(
            store,
            id=share_id,
            pool_id=pool_id.lower(),
            user_address=user.lower(),
            balance=ZERO_BD,
        )

    def get_for_pool(self, session: Session, pool_id: PoolId) -> List[DBPoolShare]:
        return session.query(DBPoolShare).filter(
            DBPoolShare.pool_id == pool_id.lower()
        ).order_by(DBPoolShare.user_address).all()


class InternalBalanceRepository(BaseRepository[DBUserInternalBalance]):
    def __init__(self):
        super().__init__(DBUserInternalBalance)

    def get_or_create(self, store: EntityStore, user: EvmAddress,
                      token: EvmAddress) -> DBUserInternalBalance:
        balance_id = internal_balance_id(user, token)
        existing = store.get(DBUserInternalBalance, balance_id)
        if existing is not None:
            return existing

        return self.create(
            store,
            id=balance_id,
            user_address=user.lower(),
            token=token.lower(),
            balance=ZERO_BD,
        )
