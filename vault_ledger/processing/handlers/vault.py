# vault_ledger/processing/handlers/vault.py

from decimal import ROUND_DOWN
from typing import List

from ...clients.interfaces import PoolParameterProvider
from ...database.repository_manager import RepositoryManager
from ...database.tables import DBPool, DBPoolToken, JoinExitType
from ...types.constants import VAULT_ADDRESS, ZERO_ADDRESS, ZERO_BD, SHARE_TOKEN_DECIMALS
from ...types.model.errors import StructuralInconsistencyError
from ...types.model.events import (
    PoolBalanceChanged,
    PoolBalanceManaged,
    InternalBalanceChanged,
    Swap,
    ShareTransfer,
)
from ...types.new import EvmAddress, PoolId
from ...utils.amounts import amount_to_int, scale_down, scale_up
from ..context import EventContext
from ..stable_math import AMP_PRECISION, calculate_invariant
from .base import BaseHandler


class VaultHandler(BaseHandler):
    """
    Reducer for the vault's balance events.

    Joins and exits move pool token balances, asset managers shift value
    between cash and managed, internal balances track custodial deposits,
    and swaps move two pool token balances at once.
    """

    def __init__(self, repos: RepositoryManager, parameters: PoolParameterProvider,
                 vault_address: EvmAddress = VAULT_ADDRESS):
        super().__init__(repos)
        self.parameters = parameters
        self.vault_address = EvmAddress(vault_address.lower())

        self.register(PoolBalanceChanged, self.handle_balance_changed)
        self.register(PoolBalanceManaged, self.handle_balance_managed)
        self.register(InternalBalanceChanged, self.handle_internal_balance_changed)
        self.register(Swap, self.handle_swap)

    # === Joins and exits ===

    def handle_balance_changed(self, event: PoolBalanceChanged, ctx: EventContext) -> bool:
        deltas = [amount_to_int(delta) for delta in event.deltas]
        if not deltas:
            self.log_debug("Empty balance change", pool_id=event.pool_id, **event.context())
            return False

        pool = self.repos.pools.get(ctx.store, event.pool_id)
        if pool is None:
            return self.skip("Pool not found for balance change", event, pool_id=event.pool_id)

        fees = [amount_to_int(fee) for fee in event.protocol_fee_amounts]
        pool_tokens = self._require_pool_tokens(ctx, pool, deltas, fees, event)

        if sum(deltas) > 0:
            self._apply_join(ctx, pool, pool_tokens, deltas, fees, event)
        else:
            self._apply_exit(ctx, pool, pool_tokens, deltas, fees, event)

        ctx.request_snapshot(PoolId(pool.id))
        return True

    def _require_pool_tokens(self, ctx: EventContext, pool: DBPool, deltas: List[int],
                             fees: List[int], event: PoolBalanceChanged) -> List[DBPoolToken]:
        """Every delta must land on a registered PoolToken; checked before any mutation"""
        if len(deltas) != len(pool.tokens_list):
            raise StructuralInconsistencyError(
                f"Balance change carries {len(deltas)} deltas for a pool with "
                f"{len(pool.tokens_list)} tokens",
                pool_id=pool.id, tx_hash=event.tx_hash)
        if len(fees) != len(deltas):
            raise StructuralInconsistencyError(
                f"Balance change carries {len(fees)} protocol fee amounts for {len(deltas)} deltas",
                pool_id=pool.id, tx_hash=event.tx_hash)

        pool_tokens = []
        for token, pool_token in zip(pool.tokens_list, self.repos.pool_tokens.load_for_pool(ctx.store, pool)):
            if pool_token is None:
                raise StructuralInconsistencyError(
                    "PoolToken not found for balance change",
                    pool_id=pool.id, token=token, tx_hash=event.tx_hash)
            pool_tokens.append(pool_token)
        return pool_tokens

    def _apply_join(self, ctx: EventContext, pool: DBPool, pool_tokens: List[DBPoolToken],
                    deltas: List[int], fees: List[int], event: PoolBalanceChanged) -> None:
        # Audit record keeps gross amounts; balances take the fee-netted amounts
        amounts = [scale_down(delta, pool_token.decimals) for delta, pool_token in zip(deltas, pool_tokens)]
        self.repos.join_exits.record(
            ctx.store, event.event_id, PoolId(pool.id), JoinExitType.JOIN, amounts,
            event.liquidity_provider, event.timestamp, event.tx_hash, event.block_number)

        for pool_token, delta, fee in zip(pool_tokens, deltas, fees):
            amount_in = scale_down(delta - fee, pool_token.decimals)
            pool_token.balance = pool_token.balance + amount_in
            self._add_notional(ctx, pool_token.address, amount_in)

        if pool.capabilities.premints_on_join:
            self._burn_preminted_shares(ctx, pool, deltas, event)

    def _apply_exit(self, ctx: EventContext, pool: DBPool, pool_tokens: List[DBPoolToken],
                    deltas: List[int], fees: List[int], event: PoolBalanceChanged) -> None:
        amounts = [scale_down(-delta, pool_token.decimals) for delta, pool_token in zip(deltas, pool_tokens)]
        self.repos.join_exits.record(
            ctx.store, event.event_id, PoolId(pool.id), JoinExitType.EXIT, amounts,
            event.liquidity_provider, event.timestamp, event.tx_hash, event.block_number)

        for pool_token, delta, fee in zip(pool_tokens, deltas, fees):
            amount_out = scale_down(-(delta - fee), pool_token.decimals)
            pool_token.balance = pool_token.balance - amount_out
            self._add_notional(ctx, pool_token.address, -amount_out)

    def _burn_preminted_shares(self, ctx: EventContext, pool: DBPool, deltas: List[int],
                               event: PoolBalanceChanged) -> None:
        """
        Virtual supply pools report their preminted shares as a delta on their
        own token. Those shares sit with the vault and were never contributed
        by anyone; a derived burn from the vault removes them from both the
        vault's share balance and the pool's total shares.
        """
        preminted = 0
        for token, delta in zip(pool.tokens_list, deltas):
            if token == pool.address:
                preminted = delta

        if preminted == 0:
            return

        self.log_debug("Burning preminted shares",
                       pool_id=pool.id,
                       preminted=str(scale_down(preminted, SHARE_TOKEN_DECIMALS)),
                       **event.context())
        ctx.emit(ShareTransfer(
            token=EvmAddress(pool.address),
            from_=self.vault_address,
            to=ZERO_ADDRESS,
            value=str(preminted),
            derived=True,
            block_number=event.block_number,
            tx_hash=event.tx_hash,
            log_index=event.log_index,
            timestamp=event.timestamp,
        ))

    # === Asset managers ===

    def handle_balance_managed(self, event: PoolBalanceManaged, ctx: EventContext) -> bool:
        pool = self.repos.pools.get(ctx.store, event.pool_id)
        if pool is None:
            return self.skip("Pool not found for balance manage", event, pool_id=event.pool_id)

        pool_token = self.repos.pool_tokens.load(ctx.store, PoolId(pool.id), event.token)
        if pool_token is None:
            raise StructuralInconsistencyError(
                "PoolToken not found for balance manage",
                pool_id=pool.id, token=event.token, tx_hash=event.tx_hash)

        cash_delta = scale_down(event.cash_delta, pool_token.decimals)
        managed_delta = scale_down(event.managed_delta, pool_token.decimals)
        delta = cash_delta + managed_delta

        pool_token.balance = pool_token.balance + delta
        pool_token.cash_balance = pool_token.cash_balance + cash_delta
        pool_token.managed_balance = pool_token.managed_balance + managed_delta
        self._add_notional(ctx, pool_token.address, delta)

        ctx.request_snapshot(PoolId(pool.id))
        return True

    # === Internal balances ===

    def handle_internal_balance_changed(self, event: InternalBalanceChanged, ctx: EventContext) -> bool:
        store = ctx.store
        self.repos.users.ensure(store, event.user)

        token = self.repos.tokens.get_or_create(store, event.token)
        internal_balance = self.repos.internal_balances.get_or_create(store, event.user, event.token)

        delta = amount_to_int(event.delta)
        internal_balance.balance = internal_balance.balance + scale_down(delta, token.decimals)

        # Internal balance of a share token moves shares without a Transfer log
        if delta == 0 or not self.repos.pools.is_share_token(store, event.token):
            return True

        if delta < 0:
            sender, recipient = EvmAddress(event.user.lower()), self.vault_address
        else:
            sender, recipient = self.vault_address, EvmAddress(event.user.lower())

        ctx.emit(ShareTransfer(
            token=EvmAddress(token.address),
            from_=sender,
            to=recipient,
            value=str(abs(delta)),
            derived=True,
            block_number=event.block_number,
            tx_hash=event.tx_hash,
            log_index=event.log_index,
            timestamp=event.timestamp,
        ))
        return True

    # === Swaps ===

    def handle_swap(self, event: Swap, ctx: EventContext) -> bool:
        store = ctx.store
        pool = self.repos.pools.get(store, event.pool_id)
        if pool is None:
            return self.skip("Pool not found for swap", event, pool_id=event.pool_id)

        pool_id = PoolId(pool.id)
        token_in = EvmAddress(event.token_in.lower())
        token_out = EvmAddress(event.token_out.lower())

        pool_token_in = self.repos.pool_tokens.load(store, pool_id, token_in)
        pool_token_out = self.repos.pool_tokens.load(store, pool_id, token_out)
        if pool_token_in is None or pool_token_out is None:
            return self.skip("PoolToken not found for swap", event,
                             pool_id=pool_id, token_in=token_in, token_out=token_out)

        capabilities = pool.capabilities
        if capabilities.is_variable_weight:
            self._refresh_weights(ctx, pool)
        elif capabilities.is_stable_like:
            self._refresh_amp(pool, event.timestamp)

        raw_in = amount_to_int(event.amount_in)
        raw_out = amount_to_int(event.amount_out)

        # Swapping the pool's own token is a mint or burn that never emits a Transfer from zero
        if capabilities.has_virtual_supply:
            if token_in == pool.address:
                self._adjust_virtual_supply(ctx, pool, -scale_down(raw_in, SHARE_TOKEN_DECIMALS))
            if token_out == pool.address:
                self._adjust_virtual_supply(ctx, pool, scale_down(raw_out, SHARE_TOKEN_DECIMALS))

        amount_in = scale_down(raw_in, pool_token_in.decimals)
        amount_out = scale_down(raw_out, pool_token_out.decimals)
        pool_token_in.balance = pool_token_in.balance + amount_in
        pool_token_out.balance = pool_token_out.balance - amount_out

        is_join_exit_swap = pool.address in (token_in, token_out)
        if is_join_exit_swap and capabilities.is_composable_stable:
            self._refresh_invariant(ctx, pool, event)

        self.repos.users.ensure(store, event.sender)
        self.repos.swaps.record(
            store, event.event_id, pool_id,
            token_in, pool_token_in.symbol, amount_in,
            token_out, pool_token_out.symbol, amount_out,
            event.sender, event.timestamp, event.tx_hash, event.block_number)

        pool.swaps_count = pool.swaps_count + 1
        vault = self.repos.vault.get_or_create(store)
        vault.total_swap_count = vault.total_swap_count + 1

        entity_in = self.repos.tokens.get_or_create(store, token_in)
        entity_in.total_swap_count = entity_in.total_swap_count + 1
        entity_out = self.repos.tokens.get_or_create(store, token_out)
        entity_out.total_swap_count = entity_out.total_swap_count + 1

        self._add_notional(ctx, token_in, amount_in)
        self._add_notional(ctx, token_out, -amount_out)

        if amount_in == ZERO_BD or amount_out == ZERO_BD:
            self.log_debug("Zero amount swap leg, skipping refresh", pool_id=pool_id, **event.context())
            return True

        ctx.request_snapshot(pool_id)
        return True

    def _adjust_virtual_supply(self, ctx: EventContext, pool: DBPool, shares) -> None:
        pool.total_shares = pool.total_shares + shares
        vault_share = self.repos.pool_shares.get_or_create(ctx.store, PoolId(pool.id), self.vault_address)
        vault_share.balance = vault_share.balance + shares

    def _refresh_invariant(self, ctx: EventContext, pool: DBPool, event: Swap) -> None:
        """Composable stable invariant over rate-adjusted balances, excluding the pool's own token"""
        balances = []
        for token in pool.tokens_list:
            if token == pool.address:
                continue
            pool_token = self.repos.pool_tokens.load(ctx.store, PoolId(pool.id), token)
            if pool_token is None:
                raise StructuralInconsistencyError(
                    "PoolToken not found for invariant",
                    pool_id=pool.id, token=token, tx_hash=event.tx_hash)
            balances.append(scale_up(pool_token.balance * pool_token.price_rate, 18))

        if pool.amp is None:
            self.log_debug("Pool has no amplification factor, invariant not refreshed", pool_id=pool.id)
            return

        amp = int((pool.amp * AMP_PRECISION).to_integral_value(rounding=ROUND_DOWN))
        invariant = calculate_invariant(amp, balances)
        pool.last_post_join_exit_invariant = scale_down(invariant, 18)
        pool.last_join_exit_amp = pool.amp

    def _refresh_amp(self, pool: DBPool, timestamp: int) -> None:
        result = self.parameters.get_amplification_parameter(EvmAddress(pool.address), timestamp)
        if result.failed or result.value is None:
            self.log_debug("Amplification read failed, keeping previous value", pool_id=pool.id)
            return
        pool.amp = result.value

    def _refresh_weights(self, ctx: EventContext, pool: DBPool) -> None:
        result = self.parameters.get_normalized_weights(EvmAddress(pool.address))
        if result.failed or result.value is None:
            self.log_debug("Weights read failed, keeping previous values", pool_id=pool.id)
            return

        weights = result.value
        if len(weights) != len(pool.tokens_list):
            self.log_warning("Weight count does not match pool tokens",
                             pool_id=pool.id,
                             weight_count=len(weights),
                             token_count=len(pool.tokens_list))
            return

        total_weight = ZERO_BD
        for pool_token, weight in zip(self.repos.pool_tokens.load_for_pool(ctx.store, pool), weights):
            if pool_token is not None:
                pool_token.weight = weight
            total_weight += weight
        pool.total_weight = total_weight

    def _add_notional(self, ctx: EventContext, token: EvmAddress, amount) -> None:
        entity = self.repos.tokens.get_or_create(ctx.store, token)
        entity.total_balance_notional = entity.total_balance_notional + amount
