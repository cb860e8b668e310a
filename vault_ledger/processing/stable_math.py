# vault_ledger/processing/stable_math.py
"""
StableSwap invariant in Balancer's integer parameterization.

Balances are 18-decimal fixed-point integers; the amplification parameter
carries AMP_PRECISION. The Newton iteration uses A*n rather than A*n^n,
with the n^n factor folded into the running d_p product.
"""

from typing import Sequence

from ..types.model.errors import LedgerError


AMP_PRECISION = 1000
MAX_ITERATIONS = 255


class StableMathError(LedgerError):
    pass


class ZeroBalanceError(StableMathError):
    pass


class StableInvariantDidNotConverge(StableMathError):
    pass


def calculate_invariant(amplification_parameter: int, balances: Sequence[int]) -> int:
    """
    Compute the invariant D for a stable pool.

    Args:
        amplification_parameter: A * AMP_PRECISION
        balances: token balances upscaled to 18 decimals

    Returns:
        D as an 18-decimal integer; 0 for an empty or all-zero pool

    Raises:
        ZeroBalanceError: one balance is zero while others are not
        StableInvariantDidNotConverge: no fixed point within MAX_ITERATIONS
    """
    n_coins = len(balances)
    if n_coins == 0:
        return 0

    sum_balances = sum(balances)
    if sum_balances == 0:
        return 0

    for i, balance in enumerate(balances):
        if balance <= 0:
            raise ZeroBalanceError(f"Balance at index {i} must be positive, got {balance}")

    amp_times_n = amplification_parameter * n_coins
    invariant = sum_balances

    for _ in range(MAX_ITERATIONS):
        d_p = invariant
        for balance in balances:
            d_p = (d_p * invariant) // (n_coins * balance)

        previous = invariant
        numerator = ((amp_times_n * sum_balances) // AMP_PRECISION + d_p * n_coins) * invariant
        denominator = ((amp_times_n - AMP_PRECISION) * invariant) // AMP_PRECISION + (n_coins + 1) * d_p
        invariant = numerator // denominator

        if abs(invariant - previous) <= 1:
            return invariant

    raise StableInvariantDidNotConverge(
        f"Stable invariant did not converge after {MAX_ITERATIONS} iterations"
    )
