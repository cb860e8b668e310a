# vault_ledger/processing/handlers/shares.py

from decimal import Decimal

from ...database.tables import DBPool, DBPoolShare
from ...types.constants import ZERO_ADDRESS, ZERO_BD, SHARE_TOKEN_DECIMALS
from ...types.model.events import ShareTransfer
from ...types.new import EvmAddress, PoolId
from ...utils.amounts import scale_down
from ..context import EventContext
from .base import BaseHandler


class ShareTransferHandler(BaseHandler):
    """
    Pool share (BPT) movements.

    Handles Transfer logs of share tokens as well as the derived transfers
    other handlers queue to compensate for share movements the vault never
    reports as a Transfer.
    """

    def __init__(self, repos):
        super().__init__(repos)
        self.register(ShareTransfer, self.handle_transfer)

    def handle_transfer(self, event: ShareTransfer, ctx: EventContext) -> bool:
        store = ctx.store
        pool = self.repos.pools.get_by_address(store, event.token)
        if pool is None:
            self.log_debug("Transfer of a token that is not a pool share, ignoring",
                           token=event.token, **event.context())
            return False

        sender = EvmAddress(event.from_.lower())
        recipient = EvmAddress(event.to.lower())
        value = scale_down(event.value, SHARE_TOKEN_DECIMALS)

        is_mint = sender == ZERO_ADDRESS
        is_burn = recipient == ZERO_ADDRESS

        if is_mint and is_burn:
            return False

        if is_mint:
            self._credit(ctx, pool, recipient, value)
            pool.total_shares = pool.total_shares + value
        elif is_burn:
            self._debit(ctx, pool, sender, value)
            pool.total_shares = pool.total_shares - value
        else:
            self._debit(ctx, pool, sender, value)
            self._credit(ctx, pool, recipient, value)

        self.log_debug("Share transfer applied",
                       pool_id=pool.id,
                       derived=event.derived,
                       value=str(value),
                       **event.context())
        return True

    def _share(self, ctx: EventContext, pool: DBPool, holder: EvmAddress) -> DBPoolShare:
        return self.repos.pool_shares.get_or_create(ctx.store, PoolId(pool.id), holder)

    def _credit(self, ctx: EventContext, pool: DBPool, holder: EvmAddress, value: Decimal) -> None:
        share = self._share(ctx, pool, holder)
        before = share.balance
        share.balance = before + value
        if before == ZERO_BD and share.balance != ZERO_BD:
            pool.holders_count = pool.holders_count + 1

    def _debit(self, ctx: EventContext, pool: DBPool, holder: EvmAddress, value: Decimal) -> None:
        share = self._share(ctx, pool, holder)
        before = share.balance
        share.balance = before - value
        if before != ZERO_BD and share.balance == ZERO_BD:
            pool.holders_count = pool.holders_count - 1
