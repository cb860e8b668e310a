# tests/conftest.py
"""
pytest configuration and fixtures for the vault ledger

Every test gets a fresh in-memory SQLite ledger, a static metadata
provider seeded with a handful of tokens, and an EventFactory that
stamps events with increasing log indexes.
"""

from typing import List, Optional

import pytest

from vault_ledger.clients.static_provider import StaticMetadataProvider
from vault_ledger.database.connection import DatabaseManager
from vault_ledger.database.repositories import pool_share_id, pool_token_id, internal_balance_id, snapshot_id
from vault_ledger.database.tables import (
    DBPool,
    DBPoolToken,
    DBPoolShare,
    DBToken,
    DBUserInternalBalance,
    DBPoolSnapshot,
)
from vault_ledger.processing.processor import EventProcessor
from vault_ledger.types import (
    DatabaseConfig,
    FXAggregatorConfig,
    TokenMetadataConfig,
    PoolMetadataConfig,
    PoolRegistered,
    TokensRegistered,
    PoolBalanceChanged,
    PoolBalanceManaged,
    InternalBalanceChanged,
    Swap,
    ShareTransfer,
    OracleRegistered,
    OracleAnswerUpdated,
    GenericSignal,
    PausedStateChanged,
    SwapEnabledSet,
    ZERO_ADDRESS,
    VAULT_ADDRESS,
)


DAY = 86400
DAY_START = 1_700_006_400  # a UTC midnight
TX_HASH = "0x" + "ab" * 32

POOL_ADDRESS = "0x32296969ef14eb0c6d29669c550d4a0449130230"
POOL_ID = POOL_ADDRESS + "000200000000000000000080"

CS_POOL_ADDRESS = "0x2d011adf89f0576c9b722c28269fcb5d50c2d179"
CS_POOL_ID = CS_POOL_ADDRESS + "000000000000000000000104"

USDC = "0x" + "a" * 40
WETH = "0x" + "b" * 40
DAI = "0x" + "c" * 40
UNSEEDED = "0x" + "d" * 40

LP = "0x" + "1" * 40
TRADER = "0x" + "2" * 40
HOLDER = "0x" + "3" * 40

USDC_AGGREGATOR = "0x" + "e1" * 20
XAU_AGGREGATOR = "0x" + "e2" * 20
XAU_TOKEN = "0xc8bb8eda94931ca2f20ef43ea7dbd58e68400400"

ONE_E18 = 10 ** 18
PREMINT = 1000 * ONE_E18


class EventFactory:
    """Builds events with increasing log indexes within one transaction"""

    def __init__(self):
        self.log_index = 0
        self.block_number = 100
        self.timestamp = DAY_START + 3600

    def _meta(self, timestamp: Optional[int] = None) -> dict:
        self.log_index += 1
        return {
            "block_number": self.block_number,
            "tx_hash": TX_HASH,
            "log_index": self.log_index,
            "timestamp": self.timestamp if timestamp is None else timestamp,
        }

    def pool_registered(self, pool_id=POOL_ID, pool_address=POOL_ADDRESS,
                        pool_type="Weighted", pool_type_version=1):
        return PoolRegistered(pool_id=pool_id, pool_address=pool_address,
                              pool_type=pool_type, pool_type_version=pool_type_version,
                              **self._meta())

    def tokens_registered(self, tokens: List[str], pool_id=POOL_ID, asset_managers=None):
        return TokensRegistered(pool_id=pool_id, tokens=tokens,
                                asset_managers=asset_managers or [], **self._meta())

    def balance_changed(self, deltas, fees=None, pool_id=POOL_ID, provider=LP, timestamp=None):
        return PoolBalanceChanged(
            pool_id=pool_id,
            liquidity_provider=provider,
            deltas=[str(delta) for delta in deltas],
            protocol_fee_amounts=[str(fee) for fee in (fees or [0] * len(deltas))],
            **self._meta(timestamp))

    def balance_managed(self, token, cash_delta, managed_delta, pool_id=POOL_ID):
        return PoolBalanceManaged(pool_id=pool_id, token=token,
                                  cash_delta=str(cash_delta), managed_delta=str(managed_delta),
                                  **self._meta())

    def internal_balance(self, user, token, delta):
        return InternalBalanceChanged(user=user, token=token, delta=str(delta), **self._meta())

    def swap(self, token_in, token_out, amount_in, amount_out, pool_id=POOL_ID,
             sender=TRADER, timestamp=None):
        return Swap(pool_id=pool_id, token_in=token_in, token_out=token_out,
                    amount_in=str(amount_in), amount_out=str(amount_out), sender=sender,
                    **self._meta(timestamp))

    def transfer(self, token, sender, recipient, value):
        return ShareTransfer(token=token, from_=sender, to=recipient, value=str(value), **self._meta())

    def oracle_registered(self, oracle, token, decimals=None, divisor=None):
        return OracleRegistered(oracle=oracle, token=token, decimals=decimals,
                                divisor=divisor, **self._meta())

    def answer_updated(self, aggregator, answer):
        return OracleAnswerUpdated(aggregator=aggregator, answer=str(answer), **self._meta())

    def signal(self, identifier, value, pool_id=POOL_ID):
        return GenericSignal(identifier=identifier, pool_id=pool_id, value=value, **self._meta())

    def paused(self, paused, pool_address=POOL_ADDRESS):
        return PausedStateChanged(pool_address=pool_address, paused=paused, **self._meta())

    def swap_enabled(self, swap_enabled, pool_address=POOL_ADDRESS):
        return SwapEnabledSet(pool_address=pool_address, swap_enabled=swap_enabled, **self._meta())


class LedgerReader:
    """Reads committed ledger state through fresh sessions"""

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    def get(self, model, entity_id):
        with self.db_manager.get_session() as session:
            return session.get(model, entity_id)

    def all(self, model):
        with self.db_manager.get_session() as session:
            return session.query(model).order_by(model.id).all()

    def count(self, model) -> int:
        with self.db_manager.get_session() as session:
            return session.query(model).count()

    def pool(self, pool_id=POOL_ID) -> Optional[DBPool]:
        return self.get(DBPool, pool_id.lower())

    def pool_token(self, token, pool_id=POOL_ID) -> Optional[DBPoolToken]:
        return self.get(DBPoolToken, pool_token_id(pool_id, token))

    def token(self, address) -> Optional[DBToken]:
        return self.get(DBToken, address.lower())

    def share(self, holder, pool_id=POOL_ID) -> Optional[DBPoolShare]:
        return self.get(DBPoolShare, pool_share_id(pool_id, holder))

    def internal_balance(self, user, token) -> Optional[DBUserInternalBalance]:
        return self.get(DBUserInternalBalance, internal_balance_id(user, token))

    def snapshot(self, day_timestamp, pool_id=POOL_ID) -> Optional[DBPoolSnapshot]:
        return self.get(DBPoolSnapshot, snapshot_id(pool_id, day_timestamp))


@pytest.fixture
def db_manager():
    """In-memory ledger database with all tables created"""
    manager = DatabaseManager(DatabaseConfig(url="sqlite://"))
    manager.initialize()
    manager.create_tables()
    yield manager
    manager.shutdown()


@pytest.fixture
def provider():
    """Static metadata for the test tokens and the composable stable pool"""
    return StaticMetadataProvider(
        tokens=[
            TokenMetadataConfig(address=USDC, symbol="USDC", name="USD Coin", decimals=6),
            TokenMetadataConfig(address=WETH, symbol="WETH", name="Wrapped Ether", decimals=18),
            TokenMetadataConfig(address=DAI, symbol="DAI", name="Dai Stablecoin", decimals=18),
            TokenMetadataConfig(address=XAU_TOKEN, symbol="VNXAU", name="VNX Gold", decimals=18),
            TokenMetadataConfig(address=POOL_ADDRESS, symbol="B-50USDC-50WETH", decimals=18),
            TokenMetadataConfig(address=CS_POOL_ADDRESS, symbol="bb-USD", decimals=18),
        ],
        pools=[
            PoolMetadataConfig(address=CS_POOL_ADDRESS, amp="100",
                               yield_fee_exempt={USDC: True}),
        ],
    )


@pytest.fixture
def fx_aggregators():
    return [
        FXAggregatorConfig(token=USDC, aggregator=USDC_AGGREGATOR),
        FXAggregatorConfig(token=XAU_TOKEN, aggregator=XAU_AGGREGATOR),
    ]


@pytest.fixture
def processor(db_manager, provider, fx_aggregators):
    return EventProcessor(db_manager, provider, provider, fx_aggregators=fx_aggregators)


@pytest.fixture
def events():
    return EventFactory()


@pytest.fixture
def ledger(db_manager):
    return LedgerReader(db_manager)


@pytest.fixture
def weighted_pool(processor, events):
    """Weighted pool with tokens [USDC (6 decimals), WETH (18 decimals)]"""
    processor.process(events.pool_registered())
    processor.process(events.tokens_registered([USDC, WETH]))
    return POOL_ID


@pytest.fixture
def composable_pool(processor, events):
    """
    Initialized composable stable pool with tokens [bb-USD, USDC, DAI].

    The preminted shares are minted to the vault and reported in the
    initializing join; 100 USDC and 100 DAI are contributed.
    """
    processor.process(events.pool_registered(
        pool_id=CS_POOL_ID, pool_address=CS_POOL_ADDRESS, pool_type="ComposableStable"))
    processor.process(events.tokens_registered([CS_POOL_ADDRESS, USDC, DAI], pool_id=CS_POOL_ID))
    processor.process(events.transfer(CS_POOL_ADDRESS, ZERO_ADDRESS, VAULT_ADDRESS, PREMINT))
    processor.process(events.balance_changed([PREMINT, 100_000000, 100 * ONE_E18], pool_id=CS_POOL_ID))
    return CS_POOL_ID
