# vault_ledger/types/configs/config.py

from typing import Dict, Optional, List

from msgspec import Struct, field

from ..constants import PRECIOUS_METAL_TOKEN, VAULT_ADDRESS
from ..new import EvmAddress


class DatabaseConfig(Struct):
    url: str
    pool_size: int = 5
    max_overflow: int = 10
    echo: bool = False

class RpcConfig(Struct):
    endpoint_url: str
    timeout: int = 30
    max_retries: int = 3

class LoggingConfig(Struct):
    level: str = "INFO"
    log_dir: Optional[str] = None
    console_enabled: bool = True
    file_enabled: bool = False
    structured_format: bool = True

class FXAggregatorConfig(Struct):
    token: EvmAddress
    aggregator: EvmAddress

class TokenMetadataConfig(Struct):
    address: EvmAddress
    symbol: str = ""
    name: str = ""
    decimals: int = 18

    def validate(self):
        if self.decimals < 0 or self.decimals > 77:
            raise ValueError(f"Token decimals must be 0-77, got {self.decimals}")

class PoolMetadataConfig(Struct):
    address: EvmAddress
    amp: Optional[str] = None
    weights: Optional[List[str]] = None
    rate_providers: Optional[List[EvmAddress]] = None
    yield_fee_exempt: Dict[EvmAddress, bool] = {}

class LedgerConfig(Struct):
    database: DatabaseConfig
    rpc: Optional[RpcConfig] = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    vault_address: EvmAddress = VAULT_ADDRESS
    precious_metal_token: EvmAddress = PRECIOUS_METAL_TOKEN
    fx_aggregators: List[FXAggregatorConfig] = []
    tokens: List[TokenMetadataConfig] = []
    pools: List[PoolMetadataConfig] = []
