# tests/test_cli.py

import json

import pytest
from click.testing import CliRunner

from vault_ledger.cli.__main__ import cli

from conftest import LP, ONE_E18, POOL_ADDRESS, POOL_ID, TX_HASH, USDC, WETH


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    monkeypatch.delenv("LEDGER_DB_URL", raising=False)
    monkeypatch.delenv("LEDGER_RPC_URL", raising=False)
    path = tmp_path / "ledger.yaml"
    path.write_text(
        f"database:\n"
        f"  url: sqlite:///{tmp_path / 'ledger.db'}\n"
        f"logging:\n"
        f"  console_enabled: false\n"
        f"tokens:\n"
        f"  - address: \"{USDC}\"\n"
        f"    symbol: USDC\n"
        f"    decimals: 6\n"
        f"  - address: \"{WETH}\"\n"
        f"    symbol: WETH\n"
    )
    return str(path)


def _events_file(tmp_path, records):
    path = tmp_path / "events.jsonl"
    path.write_text("\n".join(json.dumps(record) for record in records) + "\n")
    return str(path)


def _pool_setup():
    meta = {"block_number": 1, "tx_hash": TX_HASH, "timestamp": 1700006400 + 60}
    return [
        {"type": "PoolRegistered", "pool_id": POOL_ID, "pool_address": POOL_ADDRESS,
         "pool_type": "Weighted", "log_index": 0, **meta},
        {"type": "TokensRegistered", "pool_id": POOL_ID, "tokens": [USDC, WETH], "log_index": 1, **meta},
        {"type": "PoolBalanceChanged", "pool_id": POOL_ID, "liquidity_provider": LP,
         "deltas": ["1000000", str(2 * ONE_E18)], "protocol_fee_amounts": ["0", "0"],
         "log_index": 2, **meta},
    ]


def test_init_db(config_file):
    result = CliRunner().invoke(cli, ["--config", config_file, "init-db"])

    assert result.exit_code == 0, result.output
    assert "Ledger tables ready" in result.output


def test_replay_then_inspect_pool(tmp_path, config_file):
    runner = CliRunner()
    events_path = _events_file(tmp_path, _pool_setup())

    result = runner.invoke(cli, ["--config", config_file, "replay", events_path, "--offline"])
    assert result.exit_code == 0, result.output
    assert "Applied: 3" in result.output
    assert "Rejected: 0" in result.output

    result = runner.invoke(cli, ["--config", config_file, "pool", "show", POOL_ID])
    assert result.exit_code == 0, result.output
    assert "Type: Weighted v1" in result.output
    assert "[0] USDC: 1" in result.output
    assert "[1] WETH: 2" in result.output

    result = runner.invoke(cli, ["--config", config_file, "pool", "snapshots", POOL_ID])
    assert result.exit_code == 0, result.output
    assert "1700006400" in result.output


def test_replay_reports_rejected_events(tmp_path, config_file):
    records = _pool_setup()
    records.append({"type": "PoolBalanceChanged", "pool_id": POOL_ID, "liquidity_provider": LP,
                    "deltas": ["1", "1", "1"], "protocol_fee_amounts": ["0", "0", "0"],
                    "tx_hash": TX_HASH, "log_index": 3})

    result = CliRunner().invoke(cli, ["--config", config_file, "replay",
                                      _events_file(tmp_path, records), "--offline"])

    assert result.exit_code == 1
    assert "Rejected: 1" in result.output
    assert "structural_inconsistency" in result.output


def test_replay_rejects_malformed_file(tmp_path, config_file):
    path = tmp_path / "broken.jsonl"
    path.write_text('{"type": "Swap"}\n')

    result = CliRunner().invoke(cli, ["--config", config_file, "replay", str(path)])

    assert result.exit_code == 1
    assert "Invalid event file" in result.output


def test_unknown_pool(config_file):
    runner = CliRunner()
    runner.invoke(cli, ["--config", config_file, "init-db"])

    result = runner.invoke(cli, ["--config", config_file, "pool", "show", "0x" + "9" * 64])

    assert result.exit_code == 1
    assert "not found" in result.output
