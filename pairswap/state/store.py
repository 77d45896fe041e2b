"""
Injected state store for pool operations.

Holds the two persisted tables (pools, positions). Callers construct one store
per deployment and hand it to `PoolOperations`; there is no module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .pools import PoolRegistry
from .positions import LiquidityLedger


@dataclass
class AmmStore:
    pools: PoolRegistry = field(default_factory=PoolRegistry)
    positions: LiquidityLedger = field(default_factory=LiquidityLedger)

    def verify_share_accounting(self) -> bool:
        """True if every pool's total_shares equals the sum of its positions."""
        for key, pool in self.pools.items():
            if self.positions.total_for_pool(key) != pool.total_shares:
                return False
        return True
