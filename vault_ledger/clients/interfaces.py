# vault_ledger/clients/interfaces.py
"""
Read-through interfaces for on-chain state the ledger cannot derive from events.

Every call returns a CallResult instead of raising. Callers decide the
default to apply when a read fails, which keeps that decision visible at
the call site.
"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

from msgspec import Struct

from ..types.new import EvmAddress


T = TypeVar('T')


class CallResult(Struct, Generic[T], frozen=True):
    value: Optional[T] = None
    failed: bool = False

    @classmethod
    def ok(cls, value: T) -> "CallResult[T]":
        return cls(value=value, failed=False)

    @classmethod
    def failure(cls) -> "CallResult[T]":
        return cls(value=None, failed=True)

    def value_or(self, default: T) -> T:
        return default if self.failed or self.value is None else self.value


class ContractMetadataProvider(ABC):
    """Token and pool metadata reads."""

    @abstractmethod
    def symbol(self, token: EvmAddress) -> CallResult[str]:
        pass

    @abstractmethod
    def name(self, token: EvmAddress) -> CallResult[str]:
        pass

    @abstractmethod
    def decimals(self, token: EvmAddress) -> CallResult[int]:
        pass

    @abstractmethod
    def is_token_exempt_from_yield_protocol_fee(self, pool_address: EvmAddress,
                                                token: EvmAddress) -> CallResult[bool]:
        pass

    @abstractmethod
    def get_rate_providers(self, pool_address: EvmAddress) -> CallResult[List[EvmAddress]]:
        """
        Rate provider per pool token, in pool token order.

        Returns:
            Addresses, the zero address where a token has no provider
        """
        pass


class PoolParameterProvider(ABC):
    """Time-dependent pool parameters (amplification ramps, weight schedules)."""

    @abstractmethod
    def get_amplification_parameter(self, pool_address: EvmAddress,
                                    timestamp: int) -> CallResult[Decimal]:
        """
        Current amplification factor, already divided by its precision.
        """
        pass

    @abstractmethod
    def get_normalized_weights(self, pool_address: EvmAddress) -> CallResult[List[Decimal]]:
        """
        Normalized weights in pool token order, as fractions summing to one.
        """
        pass
