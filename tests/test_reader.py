# tests/test_reader.py

import json

import pytest

from vault_ledger.stream import EventStreamReader
from vault_ledger.types import EventDecodeError, PoolBalanceChanged, ShareTransfer, Swap

from conftest import LP, POOL_ADDRESS, POOL_ID, TRADER, TX_HASH, USDC, WETH, ZERO_ADDRESS


def _write_lines(path, records):
    path.write_text("\n".join(
        record if isinstance(record, str) else json.dumps(record) for record in records
    ) + "\n")
    return path


def test_reads_tagged_events_in_file_order(tmp_path):
    path = _write_lines(tmp_path / "events.jsonl", [
        "# exported vault events",
        {"type": "Swap", "pool_id": POOL_ID, "token_in": USDC, "token_out": WETH,
         "amount_in": "1000000", "amount_out": 5, "sender": TRADER,
         "block_number": 10, "tx_hash": TX_HASH, "log_index": 1, "timestamp": 1700000000},
        "",
        {"type": "ShareTransfer", "token": POOL_ADDRESS, "from": ZERO_ADDRESS, "to": LP,
         "value": "1000000000000000000", "log_index": 2},
        {"type": "PoolBalanceChanged", "pool_id": POOL_ID, "liquidity_provider": LP,
         "deltas": ["1", 2], "protocol_fee_amounts": [0, "0"], "log_index": 3},
    ])

    events = EventStreamReader(path).read_all()

    assert [type(event) for event in events] == [Swap, ShareTransfer, PoolBalanceChanged]
    assert events[0].amount_in == "1000000"
    assert events[0].amount_out == 5
    assert events[0].block_number == 10
    assert events[1].from_ == ZERO_ADDRESS
    assert events[1].derived is False
    assert events[2].deltas == ["1", 2]


def test_invalid_record_reports_line_number(tmp_path):
    path = _write_lines(tmp_path / "events.jsonl", [
        {"type": "PausedStateChanged", "pool_address": POOL_ADDRESS, "paused": True},
        {"type": "Swap", "pool_id": POOL_ID},
    ])

    with pytest.raises(EventDecodeError) as exc_info:
        EventStreamReader(path).read_all()

    assert exc_info.value.line_number == 2


def test_unknown_event_type_rejected(tmp_path):
    path = _write_lines(tmp_path / "events.jsonl", [{"type": "FlashLoan", "amount": "1"}])

    with pytest.raises(EventDecodeError):
        EventStreamReader(path).read_all()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        EventStreamReader(tmp_path / "missing.jsonl").read_all()
