"""
Liquidity share math: contribution sizing, share minting, share burning.

Pure functions with explicit rounding rules (always floor). Amounts and
reserves are in canonical (x, y) order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from ..state.balances import Amount
from .errors import DivisionByZero, InsufficientBalance, ZeroAmount
from .pricing import require_uint

# Share count credited to the creator of a pool, independent of deposit size.
INITIAL_SHARES = 1_000_000_000


@dataclass(frozen=True)
class Contribution:
    amount_x: Amount
    amount_y: Amount
    shares: Amount


def optimal_amounts(
    *,
    reserve_x: Amount,
    reserve_y: Amount,
    amount_x_desired: Amount,
    amount_y_desired: Amount,
) -> Tuple[Amount, Amount]:
    """
    Ratio-preserving contribution.

        amount_x = min(amount_x_desired, floor(amount_y_desired * reserve_x / reserve_y))
        amount_y = min(amount_y_desired, floor(amount_x_desired * reserve_y / reserve_x))

    An empty pool (either reserve zero) takes the desired amounts as-is.
    """
    for name, v in (
        ("reserve_x", reserve_x),
        ("reserve_y", reserve_y),
        ("amount_x_desired", amount_x_desired),
        ("amount_y_desired", amount_y_desired),
    ):
        require_uint(name, v)

    if reserve_x == 0 or reserve_y == 0:
        return amount_x_desired, amount_y_desired

    amount_x = min(amount_x_desired, (amount_y_desired * reserve_x) // reserve_y)
    amount_y = min(amount_y_desired, (amount_x_desired * reserve_y) // reserve_x)
    return amount_x, amount_y


def shares_to_mint(
    *,
    reserve_x: Amount,
    reserve_y: Amount,
    total_shares: Amount,
    amount_x: Amount,
    amount_y: Amount,
) -> Amount:
    """
    Shares minted for a deposit of (amount_x, amount_y).

    For an empty pool (total_shares == 0):
        shares = floor(sqrt(amount_x * amount_y))

    Otherwise:
        shares = min(floor(amount_x * total_shares / reserve_x),
                     floor(amount_y * total_shares / reserve_y))
    """
    for name, v in (
        ("reserve_x", reserve_x),
        ("reserve_y", reserve_y),
        ("total_shares", total_shares),
        ("amount_x", amount_x),
        ("amount_y", amount_y),
    ):
        require_uint(name, v)

    if total_shares == 0:
        return math.isqrt(amount_x * amount_y)

    if reserve_x == 0 or reserve_y == 0:
        raise DivisionByZero("outstanding shares against an empty reserve")
    return min(
        (amount_x * total_shares) // reserve_x,
        (amount_y * total_shares) // reserve_y,
    )


def plan_deposit(
    *,
    reserve_x: Amount,
    reserve_y: Amount,
    total_shares: Amount,
    amount_x_desired: Amount,
    amount_y_desired: Amount,
) -> Contribution:
    """
    Size a deposit into an existing pool and the shares it earns.

    Raises:
        ZeroAmount: If a side rounds to nothing or no shares would be minted
    """
    amount_x, amount_y = optimal_amounts(
        reserve_x=reserve_x,
        reserve_y=reserve_y,
        amount_x_desired=amount_x_desired,
        amount_y_desired=amount_y_desired,
    )
    if amount_x == 0 or amount_y == 0:
        raise ZeroAmount(f"deposit rounds to zero on one side: ({amount_x}, {amount_y})")

    shares = shares_to_mint(
        reserve_x=reserve_x,
        reserve_y=reserve_y,
        total_shares=total_shares,
        amount_x=amount_x,
        amount_y=amount_y,
    )
    if shares == 0:
        raise ZeroAmount("deposit too small to mint any shares")
    return Contribution(amount_x=amount_x, amount_y=amount_y, shares=shares)


def amounts_for_shares(
    *,
    shares: Amount,
    reserve_x: Amount,
    reserve_y: Amount,
    total_shares: Amount,
) -> Tuple[Amount, Amount]:
    """
    Reserves released by burning `shares`.

        amount_x = floor(shares * reserve_x / total_shares)
        amount_y = floor(shares * reserve_y / total_shares)
    """
    for name, v in (
        ("shares", shares),
        ("reserve_x", reserve_x),
        ("reserve_y", reserve_y),
        ("total_shares", total_shares),
    ):
        require_uint(name, v)

    if total_shares == 0:
        raise DivisionByZero("no shares outstanding")
    if shares > total_shares:
        raise InsufficientBalance(f"Cannot burn more shares than exist: {shares} > {total_shares}")

    return (shares * reserve_x) // total_shares, (shares * reserve_y) // total_shares
