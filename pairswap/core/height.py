"""
Ledger height source for deadline checks.

Deadlines compare against the height immediately preceding the one being
processed, not the current height. Host ledgers expose it that way and the
comparison must stay `preceding_height <= deadline`.
"""

from __future__ import annotations

from typing import Protocol


class HeightOracle(Protocol):
    def preceding_height(self) -> int:
        ...


class ManualHeightOracle:
    """Monotonic counter driven by the caller (tests, offline tools)."""

    def __init__(self, current: int = 0) -> None:
        if not isinstance(current, int) or isinstance(current, bool) or current < 0:
            raise ValueError(f"height must be a non-negative int: {current!r}")
        self.current = current

    def advance(self, blocks: int = 1) -> int:
        if not isinstance(blocks, int) or isinstance(blocks, bool) or blocks < 0:
            raise ValueError(f"blocks must be a non-negative int: {blocks!r}")
        self.current += blocks
        return self.current

    def preceding_height(self) -> int:
        return max(self.current - 1, 0)
