"""
Token balance tracking for the in-memory transfer gateway.

Implements BalanceTable[Principal, TokenId] -> Amount
"""

from typing import Dict, Tuple


# Type aliases
Principal = str  # account or contract identity
TokenId = str  # totally ordered token identifier
Amount = int  # non-negative integer (arbitrary precision)


class BalanceTable:
    """
    Balance table mapping (principal, token) -> amount.

    Zero balances are dropped so two tables holding the same balances compare
    equal regardless of history.
    """

    def __init__(self):
        self._balances: Dict[Tuple[Principal, TokenId], Amount] = {}

    def get(self, principal: Principal, token: TokenId) -> Amount:
        """Get balance for (principal, token). Returns 0 if not found."""
        return self._balances.get((principal, token), 0)

    def set(self, principal: Principal, token: TokenId, amount: Amount) -> None:
        """
        Set balance for (principal, token).

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((principal, token), None)
        else:
            self._balances[(principal, token)] = amount

    def add(self, principal: Principal, token: TokenId, delta: Amount) -> None:
        """
        Add delta to a balance (delta may be negative).

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(principal, token)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(principal, token, new_balance)

    def subtract(self, principal: Principal, token: TokenId, delta: Amount) -> None:
        """Subtract a non-negative amount from a balance."""
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(principal, token, -delta)

    def get_all_balances(self) -> Dict[Tuple[Principal, TokenId], Amount]:
        return dict(self._balances)

    def total_supply(self, token: TokenId) -> Amount:
        """Sum of every holder's balance of `token`."""
        return sum(amount for (_, t), amount in self._balances.items() if t == token)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
