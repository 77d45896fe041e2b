"""
Pool engine: imperative shell around `PoolOperations`.

- Parses command payloads.
- Dispatches them one at a time, in submission order.
- Converts every expected failure into a typed `TxResult` instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from ..config import AmmConfig
from ..core import pricing
from ..core.errors import AmmError
from ..core.gateway import LedgerTokenGateway, TokenGateway
from ..core.height import HeightOracle, ManualHeightOracle
from ..core.operations import PoolOperations
from ..state.store import AmmStore
from .commands import Command, CommandKind, encode_value, parse_command
from .snapshot import AmmSnapshot, snapshot_from_store, store_from_snapshot

logger = logging.getLogger(__name__)

INVALID_COMMAND = "InvalidCommand"


@dataclass(frozen=True)
class TxResult:
    ok: bool
    kind: Optional[CommandKind] = None
    value: Optional[Any] = None
    error: Optional[str] = None
    code: Optional[int] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict = {"ok": self.ok, "kind": self.kind.value if self.kind else None}
        if self.ok:
            out["value"] = encode_value(self.value)
        else:
            out["error"] = {"kind": self.error_kind, "code": self.code, "message": self.error}
        return out


class AmmEngine:
    def __init__(self, operations: PoolOperations, config: Optional[AmmConfig] = None) -> None:
        self.operations = operations
        self.config = config if config is not None else AmmConfig(custody_principal=operations.custody)

    @classmethod
    def create(
        cls,
        config: Optional[AmmConfig] = None,
        *,
        store: Optional[AmmStore] = None,
        gateway: Optional[TokenGateway] = None,
        heights: Optional[HeightOracle] = None,
    ) -> "AmmEngine":
        """Wire an engine; missing collaborators default to in-memory ones."""
        config = config if config is not None else AmmConfig()
        ops = PoolOperations(
            store if store is not None else AmmStore(),
            gateway if gateway is not None else LedgerTokenGateway(),
            heights if heights is not None else ManualHeightOracle(),
            custody=config.custody_principal,
        )
        return cls(ops, config)

    @property
    def contract_owner(self) -> Optional[str]:
        return self.config.contract_owner

    def execute(self, payload: Mapping[str, Any], *, sender: Optional[str] = None) -> TxResult:
        """
        Execute one command payload. Mutating commands require `sender`.

        Never raises for expected failures; unexpected exceptions propagate.
        """
        try:
            command = parse_command(payload)
        except ValueError as exc:
            logger.info("rejected malformed command: %s", exc)
            return TxResult(ok=False, error=str(exc), error_kind=INVALID_COMMAND)

        if command.kind.mutating and (not isinstance(sender, str) or not sender):
            return TxResult(
                ok=False, kind=command.kind, error="sender is required for mutating commands",
                error_kind=INVALID_COMMAND,
            )

        logger.debug("executing %s for %s", command.as_dict(), sender)
        try:
            value = self._dispatch(command, sender)
        except AmmError as exc:
            logger.info("%s rejected (%s %d): %s", command.kind.value, exc.kind, exc.code, exc)
            return TxResult(ok=False, kind=command.kind, error=str(exc), code=exc.code, error_kind=exc.kind)
        return TxResult(ok=True, kind=command.kind, value=value)

    def execute_all(self, payloads: Iterable[Mapping[str, Any]], *, sender: Optional[str] = None) -> List[TxResult]:
        """
        Execute payloads in order. Each one is its own atomic call and sees the
        committed result of the ones before it; a failure does not stop the rest.
        """
        return [self.execute(payload, sender=sender) for payload in payloads]

    def snapshot(self) -> AmmSnapshot:
        return snapshot_from_store(self.operations.store)

    def restore(self, data: Mapping[str, Any]) -> None:
        """Replace pool state with a persisted snapshot (validated before swapping in)."""
        self.operations.store = store_from_snapshot(data, max_snapshot_bytes=self.config.max_snapshot_bytes)
        logger.info("restored %d pools from snapshot", len(self.operations.store.pools))

    def _dispatch(self, command: Command, sender: Optional[str]) -> Any:
        ops = self.operations
        kind = command.kind
        args = command.args
        if kind is CommandKind.CREATE_POOL:
            return ops.create_pool(sender, *args)
        if kind is CommandKind.ADD_LIQUIDITY:
            return ops.add_liquidity(sender, *args)
        if kind is CommandKind.REMOVE_LIQUIDITY:
            return ops.remove_liquidity(sender, *args)
        if kind is CommandKind.SWAP:
            return ops.swap(sender, *args)
        if kind is CommandKind.GET_POOL_DETAILS:
            return ops.get_pool_details(*args)
        if kind is CommandKind.GET_PROVIDER_SHARES:
            return ops.get_provider_shares(*args)
        if kind is CommandKind.GET_AMOUNT_OUT:
            return pricing.get_amount_out(*args)
        if kind is CommandKind.GET_AMOUNT_IN:
            return pricing.get_amount_in(*args)
        if kind is CommandKind.QUOTE:
            return pricing.quote(*args)
        if kind is CommandKind.GET_SWAP_OUTPUT:
            return ops.get_swap_output(*args)
        if kind is CommandKind.GET_SWAP_INPUT:
            return ops.get_swap_input(*args)
        raise AssertionError(f"unhandled command kind: {kind}")
