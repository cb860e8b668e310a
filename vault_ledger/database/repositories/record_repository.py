# vault_ledger/database/repositories/record_repository.py

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from ...types.new import EvmAddress, EvmHash, PoolId, EntityId
from ..store import EntityStore
from ..tables import DBSwap, DBJoinExit, DBPoolSnapshot, JoinExitType
from .base_repository import BaseRepository


def snapshot_id(pool_id: PoolId, day_timestamp: int) -> EntityId:
    return EntityId(f"{pool_id.lower()}-{day_timestamp}")


class SwapRepository(BaseRepository[DBSwap]):
    def __init__(self):
        super().__init__(DBSwap)

    def record(self, store: EntityStore, swap_id: EntityId, pool_id: PoolId,
               token_in: EvmAddress, token_in_sym: str, token_amount_in: Decimal,
               token_out: EvmAddress, token_out_sym: str, token_amount_out: Decimal,
               caller: Optional[EvmAddress], timestamp: int, tx: EvmHash, block: int) -> DBSwap:
        existing = self.get(store, swap_id)
        if existing is not None:
            # Records are immutable once written
            self.logger.warning(f"Swap {swap_id} already recorded, keeping the original")
            return existing

        return self.create(
            store,
            id=swap_id,
            pool_id=pool_id.lower(),
            token_in=token_in.lower(),
            token_in_sym=token_in_sym,
            token_amount_in=token_amount_in,
            token_out=token_out.lower(),
            token_out_sym=token_out_sym,
            token_amount_out=token_amount_out,
            caller=caller.lower() if caller else None,
            user_address=caller.lower() if caller else None,
            timestamp=timestamp,
            tx=tx,
            block=block,
        )

    def get_by_pool(self, session: Session, pool_id: PoolId, limit: int = 100) -> List[DBSwap]:
        return session.query(DBSwap).filter(
            DBSwap.pool_id == pool_id.lower()
        ).order_by(desc(DBSwap.timestamp)).limit(limit).all()


class JoinExitRepository(BaseRepository[DBJoinExit]):
    def __init__(self):
        super().__init__(DBJoinExit)

    def record(self, store: EntityStore, join_exit_id: EntityId, pool_id: PoolId,
               join_exit_type: JoinExitType, amounts: List[Decimal],
               sender: Optional[EvmAddress], timestamp: int, tx: EvmHash, block: int) -> DBJoinExit:
        existing = self.get(store, join_exit_id)
        if existing is not None:
            self.logger.warning(f"JoinExit {join_exit_id} already recorded, keeping the original")
            return existing

        return self.create(
            store,
            id=join_exit_id,
            pool_id=pool_id.lower(),
            type=join_exit_type,
            amounts=amounts,
            sender=sender.lower() if sender else None,
            user=sender.lower() if sender else None,
            timestamp=timestamp,
            tx=tx,
            block=block,
        )

    def get_by_pool(self, session: Session, pool_id: PoolId, limit: int = 100) -> List[DBJoinExit]:
        return session.query(DBJoinExit).filter(
            DBJoinExit.pool_id == pool_id.lower()
        ).order_by(desc(DBJoinExit.timestamp)).limit(limit).all()


class SnapshotRepository(BaseRepository[DBPoolSnapshot]):
    def __init__(self):
        super().__init__(DBPoolSnapshot)

    def get_or_create(self, store: EntityStore, pool_id: PoolId, day_timestamp: int) -> DBPoolSnapshot:
        entity_id = snapshot_id(pool_id, day_timestamp)
        existing = store.get(DBPoolSnapshot, entity_id)
        if existing is not None:
            return existing

        return self.create(
            store,
            id=entity_id,
            pool_id=pool_id.lower(),
            timestamp=day_timestamp,
            amounts=[],
            total_shares=Decimal(0),
            swaps_count=0,
            holders_count=0,
        )

    def get_for_pool(self, session: Session, pool_id: PoolId, limit: int = 365) -> List[DBPoolSnapshot]:
        return session.query(DBPoolSnapshot).filter(
            DBPoolSnapshot.pool_id == pool_id.lower()
        ).order_by(desc(DBPoolSnapshot.timestamp)).limit(limit).all()
