# tests/test_internal_balances.py

from decimal import Decimal

from vault_ledger.database.tables import DBUser
from vault_ledger.processing import EventOutcome
from vault_ledger.types import VAULT_ADDRESS

from conftest import LP, ONE_E18, POOL_ADDRESS, UNSEEDED, USDC, ZERO_ADDRESS


def test_deposit_and_withdraw_scale_by_token_decimals(processor, events, ledger):
    assert processor.process(events.internal_balance(LP, USDC, 5_000000)) is EventOutcome.APPLIED
    processor.process(events.internal_balance(LP, USDC, -2_000000))

    assert ledger.internal_balance(LP, USDC).balance == Decimal(3)
    assert ledger.get(DBUser, LP) is not None


def test_unseeded_token_defaults_to_eighteen_decimals(processor, events, ledger):
    processor.process(events.internal_balance(LP, UNSEEDED, ONE_E18))

    assert ledger.internal_balance(LP, UNSEEDED).balance == Decimal(1)
    token = ledger.token(UNSEEDED)
    assert token.decimals == 18
    assert token.symbol == ""


class TestShareTokenInternalBalances:
    def test_negative_delta_moves_shares_to_vault(self, processor, events, ledger, weighted_pool):
        processor.process(events.transfer(POOL_ADDRESS, ZERO_ADDRESS, LP, 10 * ONE_E18))
        processor.process(events.internal_balance(LP, POOL_ADDRESS, -4 * ONE_E18))

        assert ledger.share(LP).balance == Decimal(6)
        assert ledger.share(VAULT_ADDRESS).balance == Decimal(4)
        assert ledger.internal_balance(LP, POOL_ADDRESS).balance == Decimal(-4)

        pool = ledger.pool()
        assert pool.total_shares == Decimal(10)
        assert pool.holders_count == 2

    def test_positive_delta_moves_shares_back(self, processor, events, ledger, weighted_pool):
        processor.process(events.transfer(POOL_ADDRESS, ZERO_ADDRESS, LP, 10 * ONE_E18))
        processor.process(events.internal_balance(LP, POOL_ADDRESS, -4 * ONE_E18))
        processor.process(events.internal_balance(LP, POOL_ADDRESS, 4 * ONE_E18))

        assert ledger.share(LP).balance == Decimal(10)
        assert ledger.share(VAULT_ADDRESS).balance == Decimal(0)
        assert ledger.internal_balance(LP, POOL_ADDRESS).balance == Decimal(0)
        assert ledger.pool().holders_count == 1

    def test_zero_delta_moves_no_shares(self, processor, events, ledger, weighted_pool):
        processor.process(events.internal_balance(LP, POOL_ADDRESS, 0))

        assert ledger.share(LP) is None
        assert ledger.share(VAULT_ADDRESS) is None
