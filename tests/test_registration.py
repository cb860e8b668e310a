# tests/test_registration.py

from decimal import Decimal

import pytest

from vault_ledger.database.tables import DBPoolContract, DBPoolToken, DBVault
from vault_ledger.processing import EventOutcome
from vault_ledger.types import (
    PoolMetadataConfig,
    PoolType,
    StructuralInconsistencyError,
    VAULT_ID,
)

from conftest import (
    CS_POOL_ADDRESS,
    CS_POOL_ID,
    DAI,
    POOL_ADDRESS,
    POOL_ID,
    UNSEEDED,
    USDC,
    WETH,
    ZERO_ADDRESS,
)


class TestPoolRegistered:
    def test_creates_pool_and_contract(self, processor, events, ledger):
        outcome = processor.process(events.pool_registered())

        assert outcome is EventOutcome.APPLIED
        pool = ledger.pool()
        assert pool.address == POOL_ADDRESS
        assert pool.pool_type is PoolType.WEIGHTED
        assert pool.specialization == 2
        assert pool.tokens_list == []
        assert pool.total_shares == Decimal(0)
        assert pool.swap_enabled is True
        assert ledger.get(DBPoolContract, POOL_ADDRESS).pool_id == POOL_ID
        assert ledger.get(DBVault, VAULT_ID).pool_count == 1

    def test_duplicate_registration_is_skipped(self, processor, events, ledger):
        processor.process(events.pool_registered())
        outcome = processor.process(events.pool_registered(pool_type="Stable"))

        assert outcome is EventOutcome.SKIPPED
        assert ledger.pool().pool_type is PoolType.WEIGHTED
        assert ledger.get(DBVault, VAULT_ID).pool_count == 1

    def test_unrecognized_type_registers_as_unknown(self, processor, events, ledger):
        processor.process(events.pool_registered(pool_type="Cosmic"))

        assert ledger.pool().pool_type is PoolType.UNKNOWN


class TestTokensRegistered:
    def test_pool_tokens_take_token_metadata(self, processor, events, ledger, weighted_pool):
        pool = ledger.pool()
        assert pool.tokens_list == [USDC, WETH]

        usdc = ledger.pool_token(USDC)
        assert usdc.index == 0
        assert usdc.symbol == "USDC"
        assert usdc.decimals == 6
        assert usdc.balance == Decimal(0)
        assert usdc.price_rate == Decimal(1)
        assert usdc.asset_manager is None
        assert ledger.pool_token(WETH).index == 1
        assert ledger.token(USDC).name == "USD Coin"

    def test_unseeded_token_gets_defaults(self, processor, events, ledger):
        processor.process(events.pool_registered())
        processor.process(events.tokens_registered([USDC, UNSEEDED]))

        pool_token = ledger.pool_token(UNSEEDED)
        assert pool_token.decimals == 18
        assert pool_token.symbol == ""

    def test_asset_managers_recorded(self, processor, events, ledger):
        manager = "0x" + "4" * 40
        processor.process(events.pool_registered())
        processor.process(events.tokens_registered([USDC, WETH], asset_managers=[manager, ZERO_ADDRESS]))

        assert ledger.pool_token(USDC).asset_manager == manager
        assert ledger.pool_token(WETH).asset_manager is None

    def test_second_registration_is_skipped(self, processor, events, ledger, weighted_pool):
        outcome = processor.process(events.tokens_registered([DAI]))

        assert outcome is EventOutcome.SKIPPED
        assert ledger.pool().tokens_list == [USDC, WETH]
        assert ledger.pool_token(DAI) is None

    def test_unknown_pool_is_skipped(self, processor, events, ledger):
        outcome = processor.process(events.tokens_registered([USDC]))

        assert outcome is EventOutcome.SKIPPED
        assert ledger.count(DBPoolToken) == 0

    def test_duplicate_token_is_fatal(self, processor, events, ledger):
        processor.process(events.pool_registered())

        with pytest.raises(StructuralInconsistencyError):
            processor.process(events.tokens_registered([USDC, USDC]))

        assert ledger.pool().tokens_list == []
        assert ledger.count(DBPoolToken) == 0

    def test_asset_manager_count_mismatch_is_fatal(self, processor, events):
        processor.process(events.pool_registered())

        with pytest.raises(StructuralInconsistencyError):
            processor.process(events.tokens_registered([USDC, WETH], asset_managers=[ZERO_ADDRESS]))


class TestYieldFeeExemption:
    def test_composable_stable_reads_exemption(self, processor, events, ledger):
        processor.process(events.pool_registered(
            pool_id=CS_POOL_ID, pool_address=CS_POOL_ADDRESS, pool_type="ComposableStable"))
        processor.process(events.tokens_registered([CS_POOL_ADDRESS, USDC, DAI], pool_id=CS_POOL_ID))

        assert ledger.pool_token(USDC, CS_POOL_ID).is_exempt_from_yield_protocol_fee is True
        assert ledger.pool_token(DAI, CS_POOL_ID).is_exempt_from_yield_protocol_fee is None

    def test_weighted_v4_reads_rate_providers(self, processor, events, ledger, provider):
        provider.add_pool(PoolMetadataConfig(address=POOL_ADDRESS,
                                             rate_providers=[ZERO_ADDRESS, "0x" + "5" * 40]))
        processor.process(events.pool_registered(pool_type_version=4))
        processor.process(events.tokens_registered([USDC, WETH]))

        assert ledger.pool_token(USDC).is_exempt_from_yield_protocol_fee is True
        assert ledger.pool_token(WETH).is_exempt_from_yield_protocol_fee is False

    def test_other_pools_leave_exemption_unknown(self, ledger, weighted_pool):
        assert ledger.pool_token(USDC).is_exempt_from_yield_protocol_fee is None
