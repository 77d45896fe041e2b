"""
Token transfer collaborator.

`PoolOperations` moves real balances only through a `TokenGateway`. Any
implementation that returns False (or raises) is treated as a failed transfer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from ..state.balances import Amount, BalanceTable, Principal, TokenId

logger = logging.getLogger(__name__)


class TokenGateway(Protocol):
    def transfer(self, token: TokenId, amount: Amount, sender: Principal, recipient: Principal) -> bool:
        ...


@dataclass(frozen=True)
class Transfer:
    token: TokenId
    amount: Amount
    sender: Principal
    recipient: Principal

    def reversed(self) -> "Transfer":
        return Transfer(token=self.token, amount=self.amount, sender=self.recipient, recipient=self.sender)


class LedgerTokenGateway:
    """
    In-memory gateway backed by a `BalanceTable`.

    Transfers are all-or-nothing per call: an overdraft or a non-positive amount
    returns False and leaves both balances untouched.
    """

    def __init__(self, balances: Optional[BalanceTable] = None) -> None:
        self.balances = balances if balances is not None else BalanceTable()

    def mint(self, principal: Principal, token: TokenId, amount: Amount) -> None:
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise ValueError(f"mint amount must be a positive int: {amount!r}")
        self.balances.add(principal, token, amount)

    def balance_of(self, principal: Principal, token: TokenId) -> Amount:
        return self.balances.get(principal, token)

    def transfer(self, token: TokenId, amount: Amount, sender: Principal, recipient: Principal) -> bool:
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            return False
        if sender == recipient:
            return False
        if self.balances.get(sender, token) < amount:
            logger.debug("transfer refused: %s holds %d %s, needs %d",
                         sender, self.balances.get(sender, token), token, amount)
            return False
        self.balances.subtract(sender, token, amount)
        self.balances.add(recipient, token, amount)
        return True
