"""
Constant product pricing.

Pure integer formulas for swap output, swap input and proportional quotes.

Algorithm Design:
- Type: Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per call
- Invariant: for any swap priced by `get_amount_out`, the post-trade product
  (reserve_in + amount_in) * (reserve_out - amount_out) >= reserve_in * reserve_out.
  The fee is taken on the input side and stays in the pool.
"""

from __future__ import annotations

from ..state.balances import Amount
from .errors import ArithmeticFault, DivisionByZero, InsufficientLiquidity

# 0.3%, global for every pool.
FEE_NUMERATOR = 3
FEE_DENOMINATOR = 1000


def require_uint(name: str, value: int) -> None:
    """Reject non-int (and bool) values with TypeError, negative ones with ArithmeticFault."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ArithmeticFault(f"{name} must be non-negative: {value}")


def _require_fee(fee_num: int, fee_den: int) -> None:
    require_uint("fee_num", fee_num)
    require_uint("fee_den", fee_den)
    if fee_den == 0:
        raise DivisionByZero("fee_den must be positive")
    if fee_num >= fee_den:
        raise ArithmeticFault(f"fee must be below 100%: {fee_num}/{fee_den}")


def quote(amount_a: Amount, reserve_a: Amount, reserve_b: Amount) -> Amount:
    """
    Proportional price of `amount_a` in terms of B, without fee.

        amount_b = floor(amount_a * reserve_b / reserve_a)
    """
    require_uint("amount_a", amount_a)
    require_uint("reserve_a", reserve_a)
    require_uint("reserve_b", reserve_b)
    if reserve_a == 0:
        raise DivisionByZero("quote against an empty reserve")
    return (amount_a * reserve_b) // reserve_a


def get_amount_out(
    amount_in: Amount,
    reserve_in: Amount,
    reserve_out: Amount,
    fee_num: int = FEE_NUMERATOR,
    fee_den: int = FEE_DENOMINATOR,
) -> Amount:
    """
    Output amount for an exact input.

        effective_in = amount_in * (fee_den - fee_num)
        amount_out = floor(effective_in * reserve_out / (reserve_in * fee_den + effective_in))

    Raises:
        DivisionByZero: If both reserve_in and amount_in are zero
    """
    require_uint("amount_in", amount_in)
    require_uint("reserve_in", reserve_in)
    require_uint("reserve_out", reserve_out)
    _require_fee(fee_num, fee_den)

    effective_in = amount_in * (fee_den - fee_num)
    denominator = reserve_in * fee_den + effective_in
    if denominator == 0:
        raise DivisionByZero("swap against an empty pool with zero input")
    return (effective_in * reserve_out) // denominator


def get_amount_in(
    amount_out: Amount,
    reserve_in: Amount,
    reserve_out: Amount,
    fee_num: int = FEE_NUMERATOR,
    fee_den: int = FEE_DENOMINATOR,
) -> Amount:
    """
    Input amount required to receive an exact output.

        amount_in = floor(reserve_in * amount_out * fee_den
                          / ((reserve_out - amount_out) * (fee_den - fee_num))) + 1

    Rounded up so the returned input always buys at least `amount_out`.

    Raises:
        InsufficientLiquidity: If amount_out >= reserve_out
    """
    require_uint("amount_out", amount_out)
    require_uint("reserve_in", reserve_in)
    require_uint("reserve_out", reserve_out)
    _require_fee(fee_num, fee_den)

    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"amount_out ({amount_out}) >= reserve_out ({reserve_out})"
        )
    numerator = reserve_in * amount_out * fee_den
    denominator = (reserve_out - amount_out) * (fee_den - fee_num)
    return numerator // denominator + 1
