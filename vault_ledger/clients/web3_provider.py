# vault_ledger/clients/web3_provider.py

import time
from decimal import Decimal
from typing import Any, Callable, List, TypeVar

from web3 import Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError

from ..core.logging import LoggingMixin
from ..types.configs.config import RpcConfig
from ..types.new import EvmAddress
from ..utils.amounts import scale_down
from .interfaces import CallResult, ContractMetadataProvider, PoolParameterProvider


T = TypeVar('T')


ERC20_ABI = [
    {"name": "symbol", "type": "function", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "", "type": "string"}]},
    {"name": "name", "type": "function", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "", "type": "string"}]},
    {"name": "decimals", "type": "function", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "", "type": "uint8"}]},
]

POOL_ABI = [
    {"name": "isTokenExemptFromYieldProtocolFee", "type": "function", "stateMutability": "view",
     "inputs": [{"name": "token", "type": "address"}], "outputs": [{"name": "", "type": "bool"}]},
    {"name": "getRateProviders", "type": "function", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "", "type": "address[]"}]},
    {"name": "getAmplificationParameter", "type": "function", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "value", "type": "uint256"},
                               {"name": "isUpdating", "type": "bool"},
                               {"name": "precision", "type": "uint256"}]},
    {"name": "getNormalizedWeights", "type": "function", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "", "type": "uint256[]"}]},
]


class Web3MetadataProvider(ContractMetadataProvider, PoolParameterProvider, LoggingMixin):
    """
    Chain-backed metadata reads over JSON-RPC.

    Reverts fail immediately; transport errors are retried up to
    RpcConfig.max_retries before the call is reported as failed.
    """

    def __init__(self, config: RpcConfig, retry_delay: float = 0.5):
        self.config = config
        self.retry_delay = retry_delay
        self.w3 = Web3(Web3.HTTPProvider(config.endpoint_url,
                                         request_kwargs={"timeout": config.timeout}))

        if not self.w3.is_connected():
            raise ConnectionError("Failed to connect to RPC endpoint")

        self.log_info("Web3MetadataProvider initialized",
                      timeout=config.timeout,
                      max_retries=config.max_retries)

    def _contract(self, address: EvmAddress, abi: List[dict]):
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def _call(self, description: str, address: EvmAddress, fn: Callable[[], Any],
              convert: Callable[[Any], T] = lambda value: value) -> CallResult[T]:
        attempts = max(1, self.config.max_retries)
        for attempt in range(1, attempts + 1):
            try:
                return CallResult.ok(convert(fn()))
            except (ContractLogicError, BadFunctionCallOutput) as e:
                self.log_debug("Contract call reverted",
                               call=description,
                               contract_address=address,
                               error=str(e))
                return CallResult.failure()
            except Exception as e:
                self.log_warning("Contract call failed",
                                 call=description,
                                 contract_address=address,
                                 attempt=attempt,
                                 error=str(e),
                                 exception_type=type(e).__name__)
                if attempt < attempts:
                    time.sleep(self.retry_delay * attempt)

        return CallResult.failure()

    def symbol(self, token: EvmAddress) -> CallResult[str]:
        contract = self._contract(token, ERC20_ABI)
        return self._call("symbol", token, contract.functions.symbol().call)

    def name(self, token: EvmAddress) -> CallResult[str]:
        contract = self._contract(token, ERC20_ABI)
        return self._call("name", token, contract.functions.name().call)

    def decimals(self, token: EvmAddress) -> CallResult[int]:
        contract = self._contract(token, ERC20_ABI)
        return self._call("decimals", token, contract.functions.decimals().call, int)

    def is_token_exempt_from_yield_protocol_fee(self, pool_address: EvmAddress,
                                                token: EvmAddress) -> CallResult[bool]:
        contract = self._contract(pool_address, POOL_ABI)
        fn = contract.functions.isTokenExemptFromYieldProtocolFee(Web3.to_checksum_address(token))
        return self._call("isTokenExemptFromYieldProtocolFee", pool_address, fn.call, bool)

    def get_rate_providers(self, pool_address: EvmAddress) -> CallResult[List[EvmAddress]]:
        contract = self._contract(pool_address, POOL_ABI)
        return self._call("getRateProviders", pool_address,
                          contract.functions.getRateProviders().call,
                          lambda providers: [EvmAddress(p.lower()) for p in providers])

    def get_amplification_parameter(self, pool_address: EvmAddress,
                                    timestamp: int) -> CallResult[Decimal]:
        contract = self._contract(pool_address, POOL_ABI)
        return self._call("getAmplificationParameter", pool_address,
                          contract.functions.getAmplificationParameter().call,
                          lambda result: Decimal(result[0]) / Decimal(result[2]))

    def get_normalized_weights(self, pool_address: EvmAddress) -> CallResult[List[Decimal]]:
        contract = self._contract(pool_address, POOL_ABI)
        return self._call("getNormalizedWeights", pool_address,
                          contract.functions.getNormalizedWeights().call,
                          lambda weights: [scale_down(w, 18) for w in weights])
