# tests/test_pricing.py

from decimal import Decimal

from vault_ledger.database.tables import DBFXOracle, DBToken
from vault_ledger.processing import EventOutcome
from vault_ledger.processing.handlers import value_in_fx

from conftest import (
    DAI,
    LP,
    UNSEEDED,
    USDC,
    USDC_AGGREGATOR,
    WETH,
    XAU_AGGREGATOR,
    XAU_TOKEN,
)


ORACLE = "0x" + "f1" * 20


def _create_tokens(processor, events, *tokens):
    for token in tokens:
        processor.process(events.internal_balance(LP, token, 0))


class TestOracleAnswers:
    def test_registered_oracle_decimals_rescale_answer(self, processor, events, ledger):
        _create_tokens(processor, events, WETH)
        processor.process(events.oracle_registered(ORACLE, WETH, decimals=10))
        outcome = processor.process(events.answer_updated(ORACLE, 123456789))

        assert outcome is EventOutcome.APPLIED
        token = ledger.token(WETH)
        assert token.latest_fx_price == Decimal("1.23456789")
        assert token.fx_oracle_decimals == 8

    def test_divisor_rescales_answer(self, processor, events, ledger):
        _create_tokens(processor, events, DAI)
        processor.process(events.oracle_registered(ORACLE, DAI, decimals=8, divisor="200000000"))
        processor.process(events.answer_updated(ORACLE, 300000000))

        assert ledger.token(DAI).latest_fx_price == Decimal("1.5")

    def test_allow_listed_aggregator_without_registry(self, processor, events, ledger):
        _create_tokens(processor, events, USDC)
        processor.process(events.answer_updated(USDC_AGGREGATOR, 99980000))

        assert ledger.token(USDC).latest_fx_price == Decimal("0.9998")

    def test_precious_metal_priced_per_gram(self, processor, events, ledger):
        _create_tokens(processor, events, XAU_TOKEN)
        processor.process(events.answer_updated(XAU_AGGREGATOR, 311034768000))

        assert ledger.token(XAU_TOKEN).latest_fx_price == Decimal(100)

    def test_allow_list_and_registry_are_combined(self, processor, events, ledger):
        _create_tokens(processor, events, USDC, DAI)
        processor.process(events.oracle_registered(USDC_AGGREGATOR, DAI))
        processor.process(events.answer_updated(USDC_AGGREGATOR, 100000000))

        assert ledger.token(USDC).latest_fx_price == Decimal(1)
        assert ledger.token(DAI).latest_fx_price == Decimal(1)

    def test_unknown_token_is_skipped(self, processor, events, ledger):
        processor.process(events.oracle_registered(ORACLE, UNSEEDED))
        outcome = processor.process(events.answer_updated(ORACLE, 100000000))

        assert outcome is EventOutcome.SKIPPED
        assert ledger.token(UNSEEDED) is None

    def test_unknown_aggregator_is_skipped(self, processor, events):
        outcome = processor.process(events.answer_updated("0x" + "f9" * 20, 100000000))
        assert outcome is EventOutcome.SKIPPED


def test_oracle_registration_deduplicates_tokens(processor, events, ledger):
    processor.process(events.oracle_registered(ORACLE, WETH))
    processor.process(events.oracle_registered(ORACLE, WETH))
    processor.process(events.oracle_registered(ORACLE, DAI))

    oracle = ledger.get(DBFXOracle, ORACLE)
    assert oracle.tokens == [WETH, DAI]


def test_value_in_fx():
    assert value_in_fx(Decimal(2), DBToken(latest_fx_price=Decimal("1.5"))) == Decimal(3)
    assert value_in_fx(Decimal(2), DBToken(latest_fx_price=None)) == Decimal(0)
