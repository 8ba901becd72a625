"""Constant product pricing and share math.

Pure functions over reserve values: no pool lookups, no mutation. All
arithmetic is integer with floor division at every step, matching what the
ledger can actually settle.

Swap formula (fee taken from the input and retained in the pool):
    amount_in_after_fee = amount_in * (10000 - fee_bps) // 10000
    amount_out = amount_in_after_fee * reserve_out // (reserve_in + amount_in_after_fee)
"""

from __future__ import annotations

from enum import Enum

from pool_engine.constants import (
    BOOTSTRAP_UNIT,
    BPS_DENOMINATOR,
    FEE_BPS,
    PRICE_SCALE,
    UINT256_MAX,
)
from pool_engine.errors import InsufficientLiquidity, InvalidAmount, PoolNotFound
from pool_engine.safe_int import S


class BootstrapPolicy(str, Enum):
    """How shares are minted for the first deposit into an empty pool."""

    # shares = (amount0 + amount1) * BOOTSTRAP_UNIT
    SUM = "sum"
    # shares = isqrt(amount0 * amount1), independent of token units
    GEOMETRIC_MEAN = "geometric_mean"


def validate_amount(name: str, amount: int) -> None:
    """Reject amounts that are not positive integers.

    Raises:
        InvalidAmount: If amount is zero, negative or not an int
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"{name} must be an integer, got {type(amount).__name__}")
    if amount <= 0:
        raise InvalidAmount(f"{name} must be positive: {amount}")
    if amount > UINT256_MAX:
        raise InvalidAmount(f"{name} exceeds uint256: {amount}")


def _require_fee(fee_bps: int) -> None:
    if not 0 <= fee_bps < BPS_DENOMINATOR:
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOMINATOR}): {fee_bps}")


def quote_output(
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int = FEE_BPS,
) -> int:
    """Calculate the output of an exact-input swap.

    Args:
        reserve_in: Reserve of the input token
        reserve_out: Reserve of the output token
        amount_in: Amount of input token supplied
        fee_bps: Trading fee in basis points (default 30 = 0.3%)

    Returns:
        Output token amount, floored

    Raises:
        InvalidAmount: If amount_in is not positive
        InsufficientLiquidity: If either reserve is empty
    """
    validate_amount("amount_in", amount_in)
    _require_fee(fee_bps)
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity(f"Empty reserves: ({reserve_in}, {reserve_out})")

    amount_in_after_fee = S(amount_in) * S(BPS_DENOMINATOR - fee_bps) // S(BPS_DENOMINATOR)
    numerator = amount_in_after_fee * S(reserve_out)
    denominator = S(reserve_in) + amount_in_after_fee

    return (numerator // denominator).to_uint256()


def quote_input(
    reserve_in: int,
    reserve_out: int,
    amount_out: int,
    fee_bps: int = FEE_BPS,
) -> int:
    """Calculate the input needed to receive at least amount_out.

    Inverse of quote_output, rounded up at each step so that
    quote_output(reserve_in, reserve_out, result) >= amount_out.

    Raises:
        InvalidAmount: If amount_out is not positive
        InsufficientLiquidity: If amount_out would drain the output reserve
    """
    validate_amount("amount_out", amount_out)
    _require_fee(fee_bps)
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity(f"Empty reserves: ({reserve_in}, {reserve_out})")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"Requested output {amount_out} exhausts reserve {reserve_out}"
        )

    # Smallest post-fee input x with x * reserve_out // (reserve_in + x) >= amount_out
    after_fee = (S(reserve_in) * S(amount_out)).ceiling_div(S(reserve_out) - S(amount_out))
    # Smallest gross input whose post-fee value reaches after_fee
    gross = (after_fee * S(BPS_DENOMINATOR)).ceiling_div(BPS_DENOMINATOR - fee_bps)

    return gross.to_uint256()


def spot_price(reserve_in: int, reserve_out: int, scale: int = PRICE_SCALE) -> int:
    """Price of one unit of the input token in output tokens, scaled.

    Args:
        reserve_in: Reserve of the base token
        reserve_out: Reserve of the quote token
        scale: Fixed-point scale (default 1e18)

    Raises:
        PoolNotFound: If the base reserve is empty (no price exists)
    """
    if reserve_in <= 0:
        raise PoolNotFound("Pool has no liquidity to price against")
    return (S(reserve_out) * S(scale) // S(reserve_in)).to_uint256()


def shares_for_deposit(
    amount0: int,
    amount1: int,
    reserve0: int,
    reserve1: int,
    total_shares: int,
    bootstrap: BootstrapPolicy = BootstrapPolicy.SUM,
) -> int:
    """Shares to mint for a deposit of (amount0, amount1).

    Bootstrap deposit (total_shares == 0): minted per the bootstrap policy.

    Subsequent deposits: min(amount0 * T // reserve0, amount1 * T // reserve1).
    Unbalanced deposits are accepted, but only the side matching the current
    ratio is credited; the excess stays in the pool for all providers.

    Raises:
        InvalidAmount: If either amount is not positive, nothing would be minted,
            or the deposit would overflow uint256 reserves or supply
    """
    validate_amount("amount0", amount0)
    validate_amount("amount1", amount1)
    if reserve0 + amount0 > UINT256_MAX or reserve1 + amount1 > UINT256_MAX:
        raise InvalidAmount(f"Deposit ({amount0}, {amount1}) would overflow reserves")

    if total_shares == 0:
        if bootstrap is BootstrapPolicy.GEOMETRIC_MEAN:
            shares = (S(amount0) * S(amount1)).isqrt()
        else:
            shares = (S(amount0) + S(amount1)) * S(BOOTSTRAP_UNIT)
    else:
        if reserve0 <= 0 or reserve1 <= 0:
            raise PoolNotFound(
                f"Pool has shares but empty reserves: ({reserve0}, {reserve1})"
            )
        shares0 = S(amount0) * S(total_shares) // S(reserve0)
        shares1 = S(amount1) * S(total_shares) // S(reserve1)
        shares = shares0.min(shares1)

    if not shares:
        raise InvalidAmount(f"Deposit ({amount0}, {amount1}) is too small to mint shares")
    if int(shares) + total_shares > UINT256_MAX:
        raise InvalidAmount(f"Minting {int(shares)} shares would overflow total supply")
    return shares.to_uint256()


def amounts_for_withdrawal(
    shares_burned: int,
    total_shares: int,
    reserve0: int,
    reserve1: int,
) -> tuple[int, int]:
    """Token amounts owed for burning shares_burned of total_shares.

    Returns:
        (reserve0 * s // T, reserve1 * s // T)

    Raises:
        InvalidAmount: If shares_burned is not positive or exceeds total_shares
    """
    validate_amount("shares_burned", shares_burned)
    if shares_burned > total_shares:
        raise InvalidAmount(f"Cannot burn {shares_burned} of {total_shares} shares")

    amount0 = S(reserve0) * S(shares_burned) // S(total_shares)
    amount1 = S(reserve1) * S(shares_burned) // S(total_shares)
    return amount0.to_uint256(), amount1.to_uint256()


__all__ = [
    "BootstrapPolicy",
    "validate_amount",
    "quote_output",
    "quote_input",
    "spot_price",
    "shares_for_deposit",
    "amounts_for_withdrawal",
]
