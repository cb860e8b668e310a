# tests/test_processor.py

from decimal import Decimal

import pytest

from vault_ledger import create_ledger
from vault_ledger.database.tables import DBJoinExit, DBPool
from vault_ledger.processing import EventOutcome, EventProcessor
from vault_ledger.types import (
    DatabaseConfig,
    LedgerConfig,
    LoggingConfig,
    StructuralInconsistencyError,
    TokenMetadataConfig,
)

from conftest import ONE_E18, POOL_ID, USDC, WETH


class TestProcessStream:
    def test_summary_counts_outcomes(self, processor, events, ledger):
        stream = [
            events.pool_registered(),
            events.tokens_registered([USDC, WETH]),
            events.balance_changed([1_000000, 2 * ONE_E18]),
            events.balance_changed([1, 1, 1]),
            events.swap(USDC, WETH, 1, 1, pool_id="0x" + "9" * 64),
        ]

        summary = processor.process_stream(stream)

        assert summary.processed == 3
        assert summary.failed == 1
        assert summary.skipped == 1
        assert summary.total == 5

    def test_rejected_event_is_recorded_and_replay_continues(self, processor, events, ledger):
        rejected = events.balance_changed([1, 1, 1])
        stream = [
            events.pool_registered(),
            events.tokens_registered([USDC, WETH]),
            rejected,
            events.balance_changed([1_000000, 2 * ONE_E18]),
        ]

        summary = processor.process_stream(stream)

        error = summary.errors[0]
        assert error.error_type == "structural_inconsistency"
        assert error.context["event_type"] == "PoolBalanceChanged"
        assert error.context["log_index"] == rejected.log_index
        assert error.context["pool_id"] == POOL_ID
        assert error.error_id

        assert ledger.count(DBJoinExit) == 1
        assert ledger.pool_token(USDC).balance == Decimal(1)

    def test_fail_fast_reraises(self, processor, events, ledger):
        stream = [
            events.pool_registered(),
            events.tokens_registered([USDC, WETH]),
            events.balance_changed([1, 1, 1]),
            events.balance_changed([1_000000, 2 * ONE_E18]),
        ]

        with pytest.raises(StructuralInconsistencyError):
            processor.process_stream(stream, fail_fast=True)

        assert ledger.count(DBJoinExit) == 0


def test_events_apply_in_arrival_order(processor, events, ledger):
    tokens = events.tokens_registered([USDC, WETH])
    registered = events.pool_registered()

    assert processor.process(tokens) is EventOutcome.SKIPPED
    assert processor.process(registered) is EventOutcome.APPLIED
    assert ledger.pool().tokens_list == []


def test_handler_map_covers_every_event_type(processor):
    names = {event_class.__name__ for event_class in processor.handler_map}
    assert names == {
        "PoolRegistered", "TokensRegistered", "PoolBalanceChanged", "PoolBalanceManaged",
        "InternalBalanceChanged", "Swap", "ShareTransfer", "OracleRegistered",
        "OracleAnswerUpdated", "GenericSignal", "PausedStateChanged", "SwapEnabledSet",
    }


def test_create_ledger_from_config(events):
    config = LedgerConfig(
        database=DatabaseConfig(url="sqlite://"),
        logging=LoggingConfig(console_enabled=False),
        tokens=[TokenMetadataConfig(address=USDC, symbol="USDC", decimals=6)],
    )

    processor = create_ledger(config)
    try:
        assert isinstance(processor, EventProcessor)
        processor.process(events.pool_registered())
        processor.process(events.tokens_registered([USDC, WETH]))

        with processor.db.get_session() as session:
            assert session.get(DBPool, POOL_ID).tokens_list == [USDC, WETH]
    finally:
        processor.db.shutdown()
