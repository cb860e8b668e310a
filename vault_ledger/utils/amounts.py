# vault_ledger/utils/amounts.py
"""
Fixed-point helpers for moving between raw on-chain integers and decimal amounts.

to_decimal divides exactly; from_decimal truncates toward zero before scaling.
Round-trip error therefore always lands on the side of the smaller magnitude.
"""

from decimal import Decimal, Context, ROUND_DOWN
from typing import Union

from ..types.constants import SECONDS_PER_DAY

# Wide enough for any uint256 / int256 with 18 fractional digits on top
ACCOUNTING_CONTEXT = Context(prec=120, rounding=ROUND_DOWN)

def amount_to_int(amount: Union[str, int, None]) -> int:
    """Convert a raw amount to int; empty values count as zero"""
    if amount is None:
        return 0
    if isinstance(amount, bool):
        return int(amount)
    if isinstance(amount, int):
        return amount
    if isinstance(amount, str):
        if amount.strip() == "":
            return 0
        return int(amount.strip(), 0) if amount.strip().lower().startswith(("0x", "-0x")) else int(amount)
    raise TypeError(f"Unsupported raw amount type: {type(amount).__name__}")

def to_decimal(raw: Union[str, int], decimals: int) -> Decimal:
    """raw / 10**decimals, exact"""
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    value = amount_to_int(raw)
    # String construction never rounds
    return Decimal(f"{value}E-{decimals}")

def from_decimal(value: Decimal, decimals: int) -> int:
    """Truncate value to `decimals` fractional digits, then scale to an integer"""
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    scaled = ACCOUNTING_CONTEXT.multiply(Decimal(value), Decimal(10) ** decimals)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN, context=ACCOUNTING_CONTEXT))

# Names used throughout the reducers
scale_down = to_decimal
scale_up = from_decimal

def truncating_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero, matching on-chain signed division"""
    if denominator == 0:
        raise ZeroDivisionError("division by zero")
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient

def day_start(timestamp: int) -> int:
    return timestamp - (timestamp % SECONDS_PER_DAY)
