# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.core.errors import DivisionByZero, InsufficientBalance, ZeroAmount
from pairswap.core.liquidity import amounts_for_shares, optimal_amounts, plan_deposit, shares_to_mint


def test_optimal_amounts_keep_pool_ratio() -> None:
    # 1:2 pool, caller over-supplies y.
    assert optimal_amounts(
        reserve_x=1_000_000, reserve_y=2_000_000, amount_x_desired=500_000, amount_y_desired=1_500_000
    ) == (500_000, 1_000_000)
    # Caller over-supplies x.
    assert optimal_amounts(
        reserve_x=1_000_000, reserve_y=2_000_000, amount_x_desired=500_000, amount_y_desired=900_000
    ) == (450_000, 900_000)


def test_optimal_amounts_take_everything_for_empty_pool() -> None:
    assert optimal_amounts(reserve_x=0, reserve_y=0, amount_x_desired=4, amount_y_desired=9) == (4, 9)


def test_shares_bootstrap_uses_integer_sqrt() -> None:
    n = (1 << 70) + 12345
    assert shares_to_mint(reserve_x=0, reserve_y=0, total_shares=0, amount_x=n, amount_y=n) == n
    assert shares_to_mint(reserve_x=0, reserve_y=0, total_shares=0, amount_x=4_000, amount_y=9_000) == 6_000
    assert shares_to_mint(reserve_x=0, reserve_y=0, total_shares=0, amount_x=2, amount_y=3) == 2


def test_shares_proportional_take_the_smaller_side() -> None:
    shares = shares_to_mint(
        reserve_x=1_000_000, reserve_y=2_000_000, total_shares=1_000_000_000, amount_x=500_000, amount_y=999_999
    )
    assert shares == (999_999 * 1_000_000_000) // 2_000_000


def test_shares_reject_outstanding_supply_without_reserves() -> None:
    with pytest.raises(DivisionByZero):
        shares_to_mint(reserve_x=0, reserve_y=10, total_shares=5, amount_x=1, amount_y=1)


def test_plan_deposit_rejects_dust() -> None:
    # 1 unit of x against a 1:2_000_000 pool rounds y to nothing when y is scarce.
    with pytest.raises(ZeroAmount):
        plan_deposit(
            reserve_x=2_000_000, reserve_y=1, total_shares=1_000, amount_x_desired=1, amount_y_desired=1
        )
    # Both sides non-zero but the share slice floors to zero.
    with pytest.raises(ZeroAmount):
        plan_deposit(
            reserve_x=1_000_000, reserve_y=1_000_000, total_shares=10, amount_x_desired=5, amount_y_desired=5
        )


def test_plan_deposit_matches_pool_ratio() -> None:
    deposit = plan_deposit(
        reserve_x=1_000_000,
        reserve_y=2_000_000,
        total_shares=1_000_000_000,
        amount_x_desired=500_000,
        amount_y_desired=1_000_000,
    )
    assert (deposit.amount_x, deposit.amount_y, deposit.shares) == (500_000, 1_000_000, 500_000_000)


def test_amounts_for_shares_are_pro_rata() -> None:
    assert amounts_for_shares(
        shares=500_000_000, reserve_x=1_500_000, reserve_y=3_000_000, total_shares=1_500_000_000
    ) == (500_000, 1_000_000)
    # Burning everything releases everything.
    assert amounts_for_shares(shares=7, reserve_x=11, reserve_y=13, total_shares=7) == (11, 13)


def test_amounts_for_shares_rejects_bad_supply() -> None:
    with pytest.raises(DivisionByZero):
        amounts_for_shares(shares=1, reserve_x=0, reserve_y=0, total_shares=0)
    with pytest.raises(InsufficientBalance):
        amounts_for_shares(shares=8, reserve_x=11, reserve_y=13, total_shares=7)
