"""
Core AMM algorithms
"""

from .pricing import FEE_DENOMINATOR, FEE_NUMERATOR, get_amount_in, get_amount_out, quote
from .liquidity import INITIAL_SHARES, amounts_for_shares, optimal_amounts, plan_deposit, shares_to_mint
from .gateway import LedgerTokenGateway, TokenGateway, Transfer
from .height import HeightOracle, ManualHeightOracle
from .operations import LiquidityAdded, LiquidityRemoved, PoolCreated, PoolOperations, SwapExecuted

__all__ = [
    "FEE_NUMERATOR",
    "FEE_DENOMINATOR",
    "get_amount_in",
    "get_amount_out",
    "quote",
    "INITIAL_SHARES",
    "amounts_for_shares",
    "optimal_amounts",
    "plan_deposit",
    "shares_to_mint",
    "LedgerTokenGateway",
    "TokenGateway",
    "Transfer",
    "HeightOracle",
    "ManualHeightOracle",
    "LiquidityAdded",
    "LiquidityRemoved",
    "PoolCreated",
    "PoolOperations",
    "SwapExecuted",
]
