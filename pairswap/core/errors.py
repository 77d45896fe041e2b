"""Exception types for pool operations.

Every failure is a precondition or invariant violation detected before any
state is written. ``code`` values 102-109 keep the numbering of the deployed
contract so clients can map them one to one.
"""

from __future__ import annotations


class AmmError(Exception):
    """Base class for every expected pool-operation failure."""

    code: int = 0

    @property
    def kind(self) -> str:
        return type(self).__name__


class InsufficientBalance(AmmError):
    """Raised when a provider's share (or token) balance is too small."""

    code = 102


class InsufficientLiquidity(AmmError):
    """Raised when an output would consume the entire output reserve."""

    code = 103


class ZeroAmount(AmmError):
    """Raised when a required amount or share count is zero."""

    code = 104


class SameToken(AmmError):
    """Raised when both tokens of a pair are identical."""

    code = 105


class SlippageExceeded(AmmError):
    """Raised when a computed amount is below the caller's minimum."""

    code = 106


class DeadlinePassed(AmmError):
    """Raised when the preceding ledger height is past the caller's deadline."""

    code = 107


class PoolAlreadyExists(AmmError):
    code = 108


class TransferFailed(AmmError):
    """Raised when the token gateway refuses a transfer."""

    code = 109


class PoolNotFound(AmmError):
    code = 110


class ArithmeticFault(AmmError):
    """Raised on negative or otherwise invalid arithmetic inputs."""

    code = 111


class DivisionByZero(ArithmeticFault):
    code = 112
