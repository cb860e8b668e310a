# vault_ledger/clients/static_provider.py

from decimal import Decimal
from typing import Dict, List, Optional

from ..core.logging import LoggingMixin
from ..types.configs.config import LedgerConfig, TokenMetadataConfig, PoolMetadataConfig
from ..types.new import EvmAddress
from .interfaces import CallResult, ContractMetadataProvider, PoolParameterProvider


class StaticMetadataProvider(ContractMetadataProvider, PoolParameterProvider, LoggingMixin):
    """
    Metadata served from pre-seeded tables instead of chain reads.

    Used for offline replays and tests. Anything not seeded behaves like a
    reverted call.
    """

    def __init__(self,
                 tokens: Optional[List[TokenMetadataConfig]] = None,
                 pools: Optional[List[PoolMetadataConfig]] = None):
        self.tokens: Dict[str, TokenMetadataConfig] = {}
        self.pools: Dict[str, PoolMetadataConfig] = {}

        for token in tokens or []:
            self.add_token(token)
        for pool in pools or []:
            self.add_pool(pool)

    @classmethod
    def from_config(cls, config: LedgerConfig) -> "StaticMetadataProvider":
        return cls(tokens=config.tokens, pools=config.pools)

    def add_token(self, token: TokenMetadataConfig) -> None:
        token.validate()
        self.tokens[token.address.lower()] = token

    def add_pool(self, pool: PoolMetadataConfig) -> None:
        self.pools[pool.address.lower()] = pool

    def _token(self, token: EvmAddress) -> Optional[TokenMetadataConfig]:
        return self.tokens.get(token.lower())

    def _pool(self, pool_address: EvmAddress) -> Optional[PoolMetadataConfig]:
        return self.pools.get(pool_address.lower())

    def symbol(self, token: EvmAddress) -> CallResult[str]:
        metadata = self._token(token)
        return CallResult.ok(metadata.symbol) if metadata else CallResult.failure()

    def name(self, token: EvmAddress) -> CallResult[str]:
        metadata = self._token(token)
        return CallResult.ok(metadata.name) if metadata else CallResult.failure()

    def decimals(self, token: EvmAddress) -> CallResult[int]:
        metadata = self._token(token)
        return CallResult.ok(metadata.decimals) if metadata else CallResult.failure()

    def is_token_exempt_from_yield_protocol_fee(self, pool_address: EvmAddress,
                                                token: EvmAddress) -> CallResult[bool]:
        pool = self._pool(pool_address)
        if pool is None:
            return CallResult.failure()

        exemptions = {address.lower(): exempt for address, exempt in pool.yield_fee_exempt.items()}
        if token.lower() not in exemptions:
            return CallResult.failure()
        return CallResult.ok(exemptions[token.lower()])

    def get_rate_providers(self, pool_address: EvmAddress) -> CallResult[List[EvmAddress]]:
        pool = self._pool(pool_address)
        if pool is None or pool.rate_providers is None:
            return CallResult.failure()
        return CallResult.ok(list(pool.rate_providers))

    def get_amplification_parameter(self, pool_address: EvmAddress,
                                    timestamp: int) -> CallResult[Decimal]:
        pool = self._pool(pool_address)
        if pool is None or pool.amp is None:
            return CallResult.failure()
        return CallResult.ok(Decimal(pool.amp))

    def get_normalized_weights(self, pool_address: EvmAddress) -> CallResult[List[Decimal]]:
        pool = self._pool(pool_address)
        if pool is None or pool.weights is None:
            return CallResult.failure()
        return CallResult.ok([Decimal(weight) for weight in pool.weights])
