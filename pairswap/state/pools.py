"""
Pool records and the pool registry.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, NamedTuple, Optional, Tuple

from .balances import Amount, TokenId
from .canonical import canonical_pair


class PoolKey(NamedTuple):
    """Canonical pool key: `token_x < token_y`."""

    token_x: TokenId
    token_y: TokenId

    @classmethod
    def of(cls, token_a: TokenId, token_b: TokenId) -> "PoolKey":
        return cls(*canonical_pair(token_a, token_b))

    def __str__(self) -> str:
        return f"{self.token_x}/{self.token_y}"


@dataclass(frozen=True)
class PoolRecord:
    """
    Reserve and share-count record for one canonical token pair.

    Attributes:
        token_x: Smaller token identifier
        token_y: Larger token identifier
        reserve_x: Balance of token_x held in pool custody
        reserve_y: Balance of token_y held in pool custody
        total_shares: Sum of every outstanding liquidity share
    """

    token_x: TokenId
    token_y: TokenId
    reserve_x: Amount
    reserve_y: Amount
    total_shares: Amount

    def __post_init__(self) -> None:
        if self.token_x >= self.token_y:
            raise ValueError(
                f"Tokens must be in canonical order: {self.token_x} < {self.token_y}"
            )
        for name in ("reserve_x", "reserve_y", "total_shares"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an int")
            if value < 0:
                raise ValueError(f"{name} must be non-negative: {value}")
        # Shares outstanding imply both sides hold something.
        if self.total_shares > 0 and (self.reserve_x == 0 or self.reserve_y == 0):
            raise ValueError(
                f"Pool with outstanding shares must have positive reserves: "
                f"({self.reserve_x}, {self.reserve_y})"
            )

    @property
    def key(self) -> PoolKey:
        return PoolKey(self.token_x, self.token_y)

    @property
    def is_drained(self) -> bool:
        return self.total_shares == 0

    def reserves_for(self, token_in: TokenId) -> Tuple[Amount, Amount]:
        """
        Return (reserve_in, reserve_out) for a trade paying `token_in`.

        Raises:
            ValueError: If token_in is not in this pool
        """
        if token_in == self.token_x:
            return self.reserve_x, self.reserve_y
        if token_in == self.token_y:
            return self.reserve_y, self.reserve_x
        raise ValueError(f"Token {token_in} not in pool {self.key}")

    def constant_product(self) -> int:
        return self.reserve_x * self.reserve_y

    def with_changes(self, **changes: int) -> "PoolRecord":
        return replace(self, **changes)


class PoolRegistry:
    """
    Mapping from canonical pool key to pool record.

    Records are immutable; writers replace them wholesale. Records are never
    removed, a drained pool stays addressable.
    """

    def __init__(self) -> None:
        self._pools: Dict[PoolKey, PoolRecord] = {}

    def get(self, key: PoolKey) -> Optional[PoolRecord]:
        return self._pools.get(key)

    def contains(self, key: PoolKey) -> bool:
        return key in self._pools

    def put(self, record: PoolRecord) -> None:
        self._pools[record.key] = record

    def items(self) -> Iterator[Tuple[PoolKey, PoolRecord]]:
        for key in sorted(self._pools):
            yield key, self._pools[key]

    def __len__(self) -> int:
        return len(self._pools)

    def __repr__(self) -> str:
        return f"PoolRegistry({len(self._pools)} pools)"
