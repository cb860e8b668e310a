# vault_ledger/database/repositories/pool_repository.py

from typing import List, Optional

from sqlalchemy.orm import Session

from ...types.constants import ZERO_BD, ONE_BD
from ...types.new import EvmAddress, PoolId, EntityId
from ...types.pools import PoolType
from ..store import EntityStore
from ..tables import DBPool, DBPoolContract, DBPoolToken
from .base_repository import BaseRepository


def pool_address_from_id(pool_id: PoolId) -> EvmAddress:
    """A pool id is the pool address followed by specialization and nonce"""
    return EvmAddress(pool_id[:42].lower())


def specialization_from_id(pool_id: PoolId) -> Optional[int]:
    segment = pool_id[42:46]
    if len(segment) != 4:
        return None
    try:
        return int(segment, 16)
    except ValueError:
        return None


def pool_token_id(pool_id: PoolId, token: EvmAddress) -> EntityId:
    return EntityId(f"{pool_id.lower()}-{token.lower()}")


class PoolRepository(BaseRepository[DBPool]):
    def __init__(self):
        super().__init__(DBPool)

    def get(self, store: EntityStore, pool_id: PoolId) -> Optional[DBPool]:
        return store.get(DBPool, pool_id.lower())

    def create_pool(self, store: EntityStore, pool_id: PoolId, pool_address: EvmAddress,
                    pool_type: PoolType, pool_type_version: int = 1,
                    create_time: int = 0) -> DBPool:
        pool = self.create(
            store,
            id=pool_id.lower(),
            address=pool_address.lower(),
            pool_type=pool_type,
            pool_type_version=pool_type_version,
            specialization=specialization_from_id(pool_id),
            tokens_list=[],
            total_shares=ZERO_BD,
            total_weight=ZERO_BD,
            swaps_count=0,
            holders_count=0,
            swap_enabled=True,
            swap_enabled_internal=True,
            swap_enabled_curation_signal=None,
            is_paused=False,
            create_time=create_time,
        )
        store.add(DBPoolContract(id=pool.address, pool_id=pool.id))
        return pool

    def get_by_address(self, store: EntityStore, pool_address: EvmAddress) -> Optional[DBPool]:
        """Resolve a share token / pool contract address to its pool"""
        contract = store.get(DBPoolContract, pool_address.lower())
        if contract is None:
            return None
        return self.get(store, PoolId(contract.pool_id))

    def is_share_token(self, store: EntityStore, token: EvmAddress) -> bool:
        return store.get(DBPoolContract, token.lower()) is not None


class PoolTokenRepository(BaseRepository[DBPoolToken]):
    def __init__(self):
        super().__init__(DBPoolToken)

    def load(self, store: EntityStore, pool_id: PoolId, token: EvmAddress) -> Optional[DBPoolToken]:
        return store.get(DBPoolToken, pool_token_id(pool_id, token))

    def create_pool_token(self, store: EntityStore, pool: DBPool, token: EvmAddress, index: int,
                          symbol: str, name: str, decimals: int,
                          asset_manager: Optional[EvmAddress] = None,
                          is_exempt_from_yield_protocol_fee: Optional[bool] = None) -> DBPoolToken:
        return self.create(
            store,
            id=pool_token_id(PoolId(pool.id), token),
            pool_id=pool.id,
            address=token.lower(),
            index=index,
            symbol=symbol,
            name=name,
            decimals=decimals,
            asset_manager=asset_manager.lower() if asset_manager else None,
            balance=ZERO_BD,
            cash_balance=ZERO_BD,
            managed_balance=ZERO_BD,
            price_rate=ONE_BD,
            weight=None,
            is_exempt_from_yield_protocol_fee=is_exempt_from_yield_protocol_fee,
        )

    def load_for_pool(self, store: EntityStore, pool: DBPool) -> List[Optional[DBPoolToken]]:
        """PoolTokens in tokens_list order; None where an entry is missing"""
        return [self.load(store, PoolId(pool.id), token) for token in pool.tokens_list]

    def get_for_pool(self, session: Session, pool_id: PoolId) -> List[DBPoolToken]:
        return session.query(DBPoolToken).filter(
            DBPoolToken.pool_id == pool_id.lower()
        ).order_by(DBPoolToken.index).all()
