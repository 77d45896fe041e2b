"""
Integration shell: command payloads, engine, persisted snapshots.
"""

from .commands import Command, CommandKind, parse_command, parse_commands
from .engine import AmmEngine, TxResult
from .snapshot import AmmSnapshot, snapshot_from_store, store_from_snapshot

__all__ = [
    "Command",
    "CommandKind",
    "parse_command",
    "parse_commands",
    "AmmEngine",
    "TxResult",
    "AmmSnapshot",
    "snapshot_from_store",
    "store_from_snapshot",
]
