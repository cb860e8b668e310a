# vault_ledger/database/types.py

from decimal import Decimal
from typing import List, Optional

from sqlalchemy.types import JSON, TypeDecorator, String, Text

from ..types.new import EvmAddress, EvmHash


class EvmAddressType(TypeDecorator):
    impl = String(42)
    cache_ok = True

    def process_bind_param(self, value: Optional[EvmAddress], dialect) -> Optional[str]:
        return str(value).lower() if value else None

    def process_result_value(self, value: Optional[str], dialect) -> Optional[EvmAddress]:
        return EvmAddress(value) if value else None


class EvmHashType(TypeDecorator):
    impl = String(66)
    cache_ok = True

    def process_bind_param(self, value: Optional[EvmHash], dialect) -> Optional[str]:
        return str(value).lower() if value else None

    def process_result_value(self, value: Optional[str], dialect) -> Optional[EvmHash]:
        return EvmHash(value) if value else None


class DecimalString(TypeDecorator):
    """Arbitrary-precision decimal stored as its exact string form"""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[str]:
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value: Optional[str], dialect) -> Optional[Decimal]:
        return Decimal(value) if value is not None else None


class BigIntString(TypeDecorator):
    """uint256-sized integers, which overflow native integer columns"""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Optional[int], dialect) -> Optional[str]:
        return str(int(value)) if value is not None else None

    def process_result_value(self, value: Optional[str], dialect) -> Optional[int]:
        return int(value) if value is not None else None


class DecimalList(TypeDecorator):
    """Ordered decimal amounts, one per pool token"""
    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: Optional[List[Decimal]], dialect) -> Optional[List[Optional[str]]]:
        if value is None:
            return None
        return [str(Decimal(item)) if item is not None else None for item in value]

    def process_result_value(self, value: Optional[List[Optional[str]]], dialect) -> Optional[List[Optional[Decimal]]]:
        if value is None:
            return None
        return [Decimal(item) if item is not None else None for item in value]


class AddressList(TypeDecorator):
    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: Optional[List[EvmAddress]], dialect) -> Optional[List[str]]:
        if value is None:
            return None
        return [str(item).lower() for item in value]

    def process_result_value(self, value: Optional[List[str]], dialect) -> Optional[List[EvmAddress]]:
        if value is None:
            return None
        return [EvmAddress(item) for item in value]
