"""
Command and query payload handling.

Parses JSON-style payloads into typed `Command` values and encodes operation
results back into plain dicts.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class CommandKind(Enum):
    """Command/query type enumeration."""
    # State-mutating.
    CREATE_POOL = "CREATE_POOL"
    ADD_LIQUIDITY = "ADD_LIQUIDITY"
    REMOVE_LIQUIDITY = "REMOVE_LIQUIDITY"
    SWAP = "SWAP"
    # Read-only.
    GET_POOL_DETAILS = "GET_POOL_DETAILS"
    GET_PROVIDER_SHARES = "GET_PROVIDER_SHARES"
    GET_AMOUNT_OUT = "GET_AMOUNT_OUT"
    GET_AMOUNT_IN = "GET_AMOUNT_IN"
    QUOTE = "QUOTE"
    GET_SWAP_OUTPUT = "GET_SWAP_OUTPUT"
    GET_SWAP_INPUT = "GET_SWAP_INPUT"

    @property
    def mutating(self) -> bool:
        return self in _MUTATING


_MUTATING = frozenset(
    {CommandKind.CREATE_POOL, CommandKind.ADD_LIQUIDITY, CommandKind.REMOVE_LIQUIDITY, CommandKind.SWAP}
)

_TOKEN = "token"
_PRINCIPAL = "principal"
_UINT = "uint"

# Field schema per kind, in the positional order the operation takes them.
_SCHEMAS: Dict[CommandKind, Tuple[Tuple[str, str], ...]] = {
    CommandKind.CREATE_POOL: (
        ("token_a", _TOKEN), ("token_b", _TOKEN), ("amount_a", _UINT), ("amount_b", _UINT),
    ),
    CommandKind.ADD_LIQUIDITY: (
        ("token_a", _TOKEN), ("token_b", _TOKEN),
        ("amount_a_desired", _UINT), ("amount_b_desired", _UINT),
        ("amount_a_min", _UINT), ("amount_b_min", _UINT),
        ("deadline", _UINT),
    ),
    CommandKind.REMOVE_LIQUIDITY: (
        ("token_a", _TOKEN), ("token_b", _TOKEN), ("shares", _UINT),
        ("amount_a_min", _UINT), ("amount_b_min", _UINT), ("deadline", _UINT),
    ),
    CommandKind.SWAP: (
        ("token_in", _TOKEN), ("token_out", _TOKEN), ("amount_in", _UINT),
        ("amount_out_min", _UINT), ("deadline", _UINT),
    ),
    CommandKind.GET_POOL_DETAILS: (("token_a", _TOKEN), ("token_b", _TOKEN)),
    CommandKind.GET_PROVIDER_SHARES: (("token_a", _TOKEN), ("token_b", _TOKEN), ("provider", _PRINCIPAL)),
    CommandKind.GET_AMOUNT_OUT: (("amount_in", _UINT), ("reserve_in", _UINT), ("reserve_out", _UINT)),
    CommandKind.GET_AMOUNT_IN: (("amount_out", _UINT), ("reserve_in", _UINT), ("reserve_out", _UINT)),
    CommandKind.QUOTE: (("amount_a", _UINT), ("reserve_a", _UINT), ("reserve_b", _UINT)),
    CommandKind.GET_SWAP_OUTPUT: (("token_in", _TOKEN), ("token_out", _TOKEN), ("amount_in", _UINT)),
    CommandKind.GET_SWAP_INPUT: (("token_in", _TOKEN), ("token_out", _TOKEN), ("amount_out", _UINT)),
}


def _require_str(value: Any, *, name: str, non_empty: bool = True, max_len: int = 4096) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    if non_empty and not value:
        raise ValueError(f"{name} must be non-empty")
    if max_len > 0 and len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_int(value: Any, *, name: str, non_negative: bool = False) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an int")
    if non_negative and value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    args: Tuple[Any, ...]

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.kind.value}
        for (name, _), value in zip(_SCHEMAS[self.kind], self.args):
            out[name] = value
        return out


def parse_command(payload: Mapping) -> Command:
    """
    Parse a single command payload.

    Raises:
        ValueError: If the payload is malformed or has unknown fields
    """
    if not isinstance(payload, Mapping):
        raise ValueError(f"command must be an object, got {type(payload)}")
    for k in payload.keys():
        if not isinstance(k, str):
            raise ValueError("command keys must be strings")

    kind_raw = _require_str(payload.get("kind"), name="command.kind", max_len=64)
    try:
        kind = CommandKind(kind_raw)
    except ValueError as e:
        raise ValueError(f"Invalid command kind: {kind_raw}") from e

    schema = _SCHEMAS[kind]
    allowed = {"kind"} | {name for name, _ in schema}
    extra = sorted(set(payload) - allowed)
    if extra:
        raise ValueError(f"unexpected fields for {kind.value}: {', '.join(extra)}")

    args: List[Any] = []
    for name, field_type in schema:
        if name not in payload:
            raise ValueError(f"Missing required field: {name}")
        value = payload[name]
        if field_type == _UINT:
            args.append(_require_int(value, name=name, non_negative=True))
        else:
            args.append(_require_str(value, name=name, non_empty=True, max_len=256))
    return Command(kind=kind, args=tuple(args))


def parse_commands(payloads: Any) -> List[Command]:
    if not isinstance(payloads, list):
        raise ValueError(f"commands must be a list, got {type(payloads)}")
    out = []
    for i, payload in enumerate(payloads):
        try:
            out.append(parse_command(payload))
        except ValueError as e:
            raise ValueError(f"Failed to parse command {i}: {e}") from e
    return out


def encode_value(value: Any) -> Optional[Any]:
    """Encode an operation result (dataclass record, int or None) as JSON-compatible data."""
    if value is None or isinstance(value, int):
        return value
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    raise TypeError(f"cannot encode result of type {type(value).__name__}")
