# vault_ledger/database/repositories/token_repository.py

from typing import Optional

from ...clients.interfaces import ContractMetadataProvider
from ...types.constants import ZERO_BD, DEFAULT_TOKEN_DECIMALS
from ...types.new import EvmAddress
from ..store import EntityStore
from ..tables import DBToken, DBFXOracle
from .base_repository import BaseRepository


class TokenRepository(BaseRepository[DBToken]):
    """Tokens are created on first reference, populated from contract metadata"""

    def __init__(self, metadata: ContractMetadataProvider):
        super().__init__(DBToken)
        self.metadata = metadata

    def get(self, store: EntityStore, token: EvmAddress) -> Optional[DBToken]:
        return store.get(DBToken, token.lower())

    def get_or_create(self, store: EntityStore, token: EvmAddress) -> DBToken:
        existing = self.get(store, token)
        if existing is not None:
            return existing

        address = EvmAddress(token.lower())
        return self.create(
            store,
            id=address,
            address=address,
            symbol=self.metadata.symbol(address).value_or(""),
            name=self.metadata.name(address).value_or(""),
            decimals=self.metadata.decimals(address).value_or(DEFAULT_TOKEN_DECIMALS),
            total_balance_notional=ZERO_BD,
            total_swap_count=0,
            latest_fx_price=None,
            fx_oracle_decimals=None,
        )


class FXOracleRepository(BaseRepository[DBFXOracle]):
    def __init__(self):
        super().__init__(DBFXOracle)

    def get(self, store: EntityStore, oracle: EvmAddress) -> Optional[DBFXOracle]:
        return store.get(DBFXOracle, oracle.lower())

    def get_or_create(self, store: EntityStore, oracle: EvmAddress) -> DBFXOracle:
        existing = self.get(store, oracle)
        if existing is not None:
            return existing
        return self.create(store, id=oracle.lower(), tokens=[], decimals=None, divisor=None)

    def add_token(self, oracle: DBFXOracle, token: EvmAddress) -> bool:
        """Append a consumer token; the list never holds duplicates"""
        token = EvmAddress(token.lower())
        if token in oracle.tokens:
            return False
        oracle.tokens = list(oracle.tokens) + [token]
        return True
