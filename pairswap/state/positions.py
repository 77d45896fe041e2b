"""
Liquidity share tracking per (pool, provider).

Shares are scoped per pool and tracked separately from token balances.
"""

from __future__ import annotations

from typing import Dict, Tuple

from .balances import Amount, Principal
from .pools import PoolKey


class LiquidityLedger:
    """
    Share table mapping (pool_key, provider) -> shares.

    Notes:
    - Shares are always non-negative.
    - A position that drops to zero keeps its entry; a missing entry reads as 0.
    """

    def __init__(self) -> None:
        self._shares: Dict[Tuple[PoolKey, Principal], Amount] = {}

    def get(self, key: PoolKey, provider: Principal) -> Amount:
        """Get shares for (key, provider). Returns 0 if not found."""
        return self._shares.get((key, provider), 0)

    def set(self, key: PoolKey, provider: Principal, shares: Amount) -> None:
        if shares < 0:
            raise ValueError(f"Share balance cannot be negative: {shares}")
        self._shares[(key, provider)] = shares

    def credit(self, key: PoolKey, provider: Principal, shares: Amount) -> None:
        if shares < 0:
            raise ValueError(f"Credit must be non-negative: {shares}")
        self.set(key, provider, self.get(key, provider) + shares)

    def debit(self, key: PoolKey, provider: Principal, shares: Amount) -> None:
        if shares < 0:
            raise ValueError(f"Debit must be non-negative: {shares}")
        current = self.get(key, provider)
        if current < shares:
            raise ValueError(f"Insufficient shares: {current} < {shares}")
        self.set(key, provider, current - shares)

    def total_for_pool(self, key: PoolKey) -> Amount:
        return sum(shares for (k, _), shares in self._shares.items() if k == key)

    def providers_for_pool(self, key: PoolKey) -> Dict[Principal, Amount]:
        return {p: shares for (k, p), shares in self._shares.items() if k == key}

    def get_all_positions(self) -> Dict[Tuple[PoolKey, Principal], Amount]:
        return dict(self._shares)

    def __repr__(self) -> str:
        return f"LiquidityLedger({len(self._shares)} entries)"
