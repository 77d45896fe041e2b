"""
Pool operations: create pool, add/remove liquidity, swap.

Every command follows the same shape:
    validate -> resolve pool -> compute amounts -> settle transfers -> commit

All reads and arithmetic happen against the committed store before anything is
written. Token transfers run next; if one is refused, the transfers already made
by that call are reversed and the call fails with `TransferFailed`. Registry and
ledger writes happen last and cannot fail, so a failed call has no observable
effect.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from ..state.balances import Amount, Principal, TokenId
from ..state.pools import PoolKey, PoolRecord
from ..state.store import AmmStore
from . import pricing
from .errors import (
    ArithmeticFault,
    DeadlinePassed,
    InsufficientBalance,
    InsufficientLiquidity,
    PoolAlreadyExists,
    PoolNotFound,
    SameToken,
    SlippageExceeded,
    TransferFailed,
    ZeroAmount,
)
from .gateway import TokenGateway, Transfer
from .height import HeightOracle
from .liquidity import INITIAL_SHARES, amounts_for_shares, plan_deposit
from .pricing import require_uint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolCreated:
    token_x: TokenId
    token_y: TokenId
    shares: Amount
    amount_x: Amount
    amount_y: Amount


@dataclass(frozen=True)
class LiquidityAdded:
    token_x: TokenId
    token_y: TokenId
    shares: Amount
    amount_x: Amount
    amount_y: Amount


@dataclass(frozen=True)
class LiquidityRemoved:
    token_x: TokenId
    token_y: TokenId
    shares: Amount
    amount_x: Amount
    amount_y: Amount


@dataclass(frozen=True)
class SwapExecuted:
    token_in: TokenId
    token_out: TokenId
    amount_in: Amount
    amount_out: Amount


def _require_pair(token_a: TokenId, token_b: TokenId) -> PoolKey:
    for name, token in (("token_a", token_a), ("token_b", token_b)):
        if not isinstance(token, str) or not token:
            raise TypeError(f"{name} must be a non-empty string")
    if token_a == token_b:
        raise SameToken(f"pair tokens are identical: {token_a}")
    return PoolKey.of(token_a, token_b)


def _to_canonical(key: PoolKey, token_a: TokenId, value_a: int, value_b: int) -> Tuple[int, int]:
    """Reorder a caller-order (a, b) value pair into (x, y)."""
    if token_a == key.token_x:
        return value_a, value_b
    return value_b, value_a


class PoolOperations:
    """
    Command and query surface over an injected `AmmStore`.

    Holds no pool state of its own: every call re-reads the store, and writes
    back whole records only after every check and transfer has succeeded.
    """

    def __init__(
        self,
        store: AmmStore,
        gateway: TokenGateway,
        heights: HeightOracle,
        *,
        custody: Principal,
    ) -> None:
        if not isinstance(custody, str) or not custody:
            raise ValueError("custody must be a non-empty principal")
        self.store = store
        self.gateway = gateway
        self.heights = heights
        self.custody = custody

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_pool(
        self,
        sender: Principal,
        token_a: TokenId,
        token_b: TokenId,
        amount_a: Amount,
        amount_b: Amount,
    ) -> PoolCreated:
        """
        Create the pool for (token_a, token_b) and credit the creator with
        `INITIAL_SHARES`, whatever the deposit size.
        """
        key = _require_pair(token_a, token_b)
        require_uint("amount_a", amount_a)
        require_uint("amount_b", amount_b)
        amount_x, amount_y = _to_canonical(key, token_a, amount_a, amount_b)
        if amount_x == 0 or amount_y == 0:
            raise ZeroAmount(f"initial deposit must be positive: ({amount_x}, {amount_y})")
        if self.store.pools.contains(key):
            raise PoolAlreadyExists(f"pool {key} already exists")

        record = PoolRecord(
            token_x=key.token_x,
            token_y=key.token_y,
            reserve_x=amount_x,
            reserve_y=amount_y,
            total_shares=INITIAL_SHARES,
        )

        self._settle(
            [
                Transfer(key.token_x, amount_x, sender, self.custody),
                Transfer(key.token_y, amount_y, sender, self.custody),
            ]
        )
        self.store.pools.put(record)
        self.store.positions.credit(key, sender, INITIAL_SHARES)

        logger.info("pool created %s by %s: reserves=(%d, %d) shares=%d",
                    key, sender, amount_x, amount_y, INITIAL_SHARES)
        return PoolCreated(
            token_x=key.token_x,
            token_y=key.token_y,
            shares=INITIAL_SHARES,
            amount_x=amount_x,
            amount_y=amount_y,
        )

    def add_liquidity(
        self,
        sender: Principal,
        token_a: TokenId,
        token_b: TokenId,
        amount_a_desired: Amount,
        amount_b_desired: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        deadline: int,
    ) -> Union[PoolCreated, LiquidityAdded]:
        """
        Deposit a ratio-preserving amount of both tokens.

        A missing pool is created with the desired amounts (minimums unused).
        A drained pool is re-seeded with the desired amounts and
        floor(sqrt(amount_x * amount_y)) shares.
        """
        self._check_deadline(deadline)
        key = _require_pair(token_a, token_b)
        for name, v in (
            ("amount_a_desired", amount_a_desired),
            ("amount_b_desired", amount_b_desired),
            ("amount_a_min", amount_a_min),
            ("amount_b_min", amount_b_min),
        ):
            require_uint(name, v)
        if amount_a_desired == 0 or amount_b_desired == 0:
            raise ZeroAmount(f"desired amounts must be positive: ({amount_a_desired}, {amount_b_desired})")

        pool = self.store.pools.get(key)
        if pool is None:
            return self.create_pool(sender, token_a, token_b, amount_a_desired, amount_b_desired)

        x_desired, y_desired = _to_canonical(key, token_a, amount_a_desired, amount_b_desired)
        x_min, y_min = _to_canonical(key, token_a, amount_a_min, amount_b_min)

        deposit = plan_deposit(
            reserve_x=pool.reserve_x,
            reserve_y=pool.reserve_y,
            total_shares=pool.total_shares,
            amount_x_desired=x_desired,
            amount_y_desired=y_desired,
        )
        if deposit.amount_x < x_min or deposit.amount_y < y_min:
            raise SlippageExceeded(
                f"deposit ({deposit.amount_x}, {deposit.amount_y}) below minimum ({x_min}, {y_min})"
            )

        updated = pool.with_changes(
            reserve_x=pool.reserve_x + deposit.amount_x,
            reserve_y=pool.reserve_y + deposit.amount_y,
            total_shares=pool.total_shares + deposit.shares,
        )

        self._settle(
            [
                Transfer(key.token_x, deposit.amount_x, sender, self.custody),
                Transfer(key.token_y, deposit.amount_y, sender, self.custody),
            ]
        )
        self.store.pools.put(updated)
        self.store.positions.credit(key, sender, deposit.shares)

        logger.info("liquidity added to %s by %s: (%d, %d) for %d shares",
                    key, sender, deposit.amount_x, deposit.amount_y, deposit.shares)
        return LiquidityAdded(
            token_x=key.token_x,
            token_y=key.token_y,
            shares=deposit.shares,
            amount_x=deposit.amount_x,
            amount_y=deposit.amount_y,
        )

    def remove_liquidity(
        self,
        sender: Principal,
        token_a: TokenId,
        token_b: TokenId,
        shares: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        deadline: int,
    ) -> LiquidityRemoved:
        """Burn `shares` of the caller's position for a pro-rata slice of both reserves."""
        self._check_deadline(deadline)
        key = _require_pair(token_a, token_b)
        for name, v in (("shares", shares), ("amount_a_min", amount_a_min), ("amount_b_min", amount_b_min)):
            require_uint(name, v)
        if shares == 0:
            raise ZeroAmount("shares must be positive")

        pool = self._require_pool(key)
        held = self.store.positions.get(key, sender)
        if held < shares:
            raise InsufficientBalance(f"{sender} holds {held} shares of {key}, requested {shares}")

        amount_x, amount_y = amounts_for_shares(
            shares=shares,
            reserve_x=pool.reserve_x,
            reserve_y=pool.reserve_y,
            total_shares=pool.total_shares,
        )
        x_min, y_min = _to_canonical(key, token_a, amount_a_min, amount_b_min)
        if amount_x < x_min or amount_y < y_min:
            raise SlippageExceeded(
                f"withdrawal ({amount_x}, {amount_y}) below minimum ({x_min}, {y_min})"
            )

        updated = pool.with_changes(
            reserve_x=pool.reserve_x - amount_x,
            reserve_y=pool.reserve_y - amount_y,
            total_shares=pool.total_shares - shares,
        )

        self._settle(
            [
                Transfer(key.token_x, amount_x, self.custody, sender),
                Transfer(key.token_y, amount_y, self.custody, sender),
            ]
        )
        self.store.pools.put(updated)
        self.store.positions.debit(key, sender, shares)

        logger.info("liquidity removed from %s by %s: %d shares for (%d, %d)",
                    key, sender, shares, amount_x, amount_y)
        if updated.is_drained:
            logger.info("pool %s drained", key)
        return LiquidityRemoved(
            token_x=key.token_x,
            token_y=key.token_y,
            shares=shares,
            amount_x=amount_x,
            amount_y=amount_y,
        )

    def swap(
        self,
        sender: Principal,
        token_in: TokenId,
        token_out: TokenId,
        amount_in: Amount,
        amount_out_min: Amount,
        deadline: int,
    ) -> SwapExecuted:
        """Sell exactly `amount_in` of `token_in` for at least `amount_out_min` of `token_out`."""
        self._check_deadline(deadline)
        key = _require_pair(token_in, token_out)
        require_uint("amount_in", amount_in)
        require_uint("amount_out_min", amount_out_min)
        if amount_in == 0:
            raise ZeroAmount("amount_in must be positive")

        pool = self._require_pool(key)
        reserve_in, reserve_out = pool.reserves_for(token_in)
        amount_out = pricing.get_amount_out(amount_in, reserve_in, reserve_out)

        if amount_out < amount_out_min:
            raise SlippageExceeded(f"amount_out ({amount_out}) < amount_out_min ({amount_out_min})")
        # Strict: a swap may never empty the output side.
        if amount_out >= reserve_out:
            raise InsufficientLiquidity(f"amount_out ({amount_out}) >= reserve_out ({reserve_out})")

        if token_in == key.token_x:
            updated = pool.with_changes(reserve_x=pool.reserve_x + amount_in, reserve_y=pool.reserve_y - amount_out)
        else:
            updated = pool.with_changes(reserve_x=pool.reserve_x - amount_out, reserve_y=pool.reserve_y + amount_in)
        if updated.constant_product() < pool.constant_product():
            raise ArithmeticFault(
                f"Invariant violation: new_k ({updated.constant_product()}) < old_k ({pool.constant_product()})"
            )

        self._settle(
            [
                Transfer(token_in, amount_in, sender, self.custody),
                Transfer(token_out, amount_out, self.custody, sender),
            ]
        )
        self.store.pools.put(updated)

        logger.info("swap on %s by %s: %d %s -> %d %s",
                    key, sender, amount_in, token_in, amount_out, token_out)
        return SwapExecuted(token_in=token_in, token_out=token_out, amount_in=amount_in, amount_out=amount_out)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_pool_details(self, token_a: TokenId, token_b: TokenId) -> Optional[PoolRecord]:
        if token_a == token_b:
            return None
        return self.store.pools.get(PoolKey.of(token_a, token_b))

    def get_provider_shares(self, token_a: TokenId, token_b: TokenId, provider: Principal) -> Amount:
        if token_a == token_b:
            return 0
        return self.store.positions.get(PoolKey.of(token_a, token_b), provider)

    def get_swap_output(self, token_in: TokenId, token_out: TokenId, amount_in: Amount) -> Amount:
        """Price an exact-input swap against the live pool without executing it."""
        key = _require_pair(token_in, token_out)
        require_uint("amount_in", amount_in)
        if amount_in == 0:
            raise ZeroAmount("amount_in must be positive")
        reserve_in, reserve_out = self._require_pool(key).reserves_for(token_in)
        return pricing.get_amount_out(amount_in, reserve_in, reserve_out)

    def get_swap_input(self, token_in: TokenId, token_out: TokenId, amount_out: Amount) -> Amount:
        """Input of `token_in` needed to receive exactly `amount_out` of `token_out`."""
        key = _require_pair(token_in, token_out)
        require_uint("amount_out", amount_out)
        if amount_out == 0:
            raise ZeroAmount("amount_out must be positive")
        reserve_in, reserve_out = self._require_pool(key).reserves_for(token_in)
        return pricing.get_amount_in(amount_out, reserve_in, reserve_out)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_deadline(self, deadline: int) -> None:
        if not isinstance(deadline, int) or isinstance(deadline, bool):
            raise TypeError("deadline must be an int")
        height = self.heights.preceding_height()
        if height > deadline:
            raise DeadlinePassed(f"height {height} is past deadline {deadline}")

    def _require_pool(self, key: PoolKey) -> PoolRecord:
        pool = self.store.pools.get(key)
        if pool is None:
            raise PoolNotFound(f"no pool for {key}")
        return pool

    def _settle(self, transfers: Sequence[Transfer]) -> None:
        """
        Run transfers in order. On the first refusal, reverse the completed ones
        (newest first) and raise `TransferFailed`.
        """
        done: List[Transfer] = []
        for t in transfers:
            if t.amount == 0:
                continue
            if not self._try_transfer(t):
                self._unwind(done)
                raise TransferFailed(f"transfer of {t.amount} {t.token} from {t.sender} to {t.recipient} failed")
            done.append(t)

    def _unwind(self, done: List[Transfer]) -> None:
        for t in reversed(done):
            back = t.reversed()
            logger.warning("reversing transfer of %d %s to %s", t.amount, t.token, t.recipient)
            if not self._try_transfer(back):
                logger.error("could not reverse transfer of %d %s from %s to %s",
                             back.amount, back.token, back.sender, back.recipient)
                raise TransferFailed(f"unwind of {t.amount} {t.token} to {t.sender} failed")

    def _try_transfer(self, t: Transfer) -> bool:
        try:
            return bool(self.gateway.transfer(t.token, t.amount, t.sender, t.recipient))
        except Exception as exc:
            logger.warning("token gateway raised on %s transfer: %s: %s", t.token, type(exc).__name__, exc)
            return False
