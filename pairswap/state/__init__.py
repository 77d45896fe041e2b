"""
State management for pairswap pools
"""

from .balances import BalanceTable
from .pools import PoolKey, PoolRecord, PoolRegistry
from .positions import LiquidityLedger
from .store import AmmStore

__all__ = [
    "BalanceTable",
    "PoolKey",
    "PoolRecord",
    "PoolRegistry",
    "LiquidityLedger",
    "AmmStore",
]
