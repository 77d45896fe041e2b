"""
Persisted state layout for the pool store.

Goals:
- Deterministic JSON serialization for hashing / snapshot distribution.
- Round-trippable into `AmmStore`.
- Explicit versioning.

Layout: two tables, `pools` keyed by canonical pair and `positions` keyed by
(canonical pair, provider), each sorted by key.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..state.canonical import bounded_json_utf8_size, canonical_json_bytes, domain_sep_bytes, sha256_hex
from ..state.pools import PoolKey, PoolRecord
from ..state.store import AmmStore


SNAPSHOT_VERSION = 1


def _require_str(value: Any, *, name: str, max_len: int = 256) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    if len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


@dataclass(frozen=True)
class AmmSnapshot:
    """
    Deterministic, versioned snapshot of an `AmmStore`.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_bytes(self) -> bytes:
        payload = domain_sep_bytes("amm_snapshot", version=self.version) + self.canonical_bytes()
        return hashlib.sha256(payload).digest()

    def commitment_hex(self) -> str:
        payload = domain_sep_bytes("amm_snapshot", version=self.version) + self.canonical_bytes()
        return sha256_hex(payload)


def snapshot_from_store(store: AmmStore) -> AmmSnapshot:
    pools_entries = [
        {
            "token_x": key.token_x,
            "token_y": key.token_y,
            "reserve_x": int(pool.reserve_x),
            "reserve_y": int(pool.reserve_y),
            "total_shares": int(pool.total_shares),
        }
        for key, pool in store.pools.items()
    ]

    position_entries = [
        {"token_x": key.token_x, "token_y": key.token_y, "provider": provider, "shares": int(shares)}
        for (key, provider), shares in store.positions.get_all_positions().items()
    ]
    position_entries.sort(key=lambda e: (e["token_x"], e["token_y"], e["provider"]))

    data: Dict[str, Any] = {
        "version": SNAPSHOT_VERSION,
        "pools": pools_entries,
        "positions": position_entries,
    }
    return AmmSnapshot(version=SNAPSHOT_VERSION, data=data)


def store_from_snapshot(
    snapshot: Mapping[str, Any],
    *,
    max_snapshot_bytes: int = 4_000_000,
    max_pools: int = 50_000,
    max_positions: int = 500_000,
) -> AmmStore:
    """
    Rebuild a store from snapshot data. Fail-closed: any malformed, duplicate or
    non-canonical entry, or a pool whose positions do not sum to its
    total_shares, raises.
    """
    if not isinstance(snapshot, Mapping):
        raise TypeError("snapshot must be a mapping")
    if not isinstance(snapshot, dict):
        snapshot = dict(snapshot)

    try:
        bounded_json_utf8_size(snapshot, max_bytes=max_snapshot_bytes)
    except ValueError as exc:
        raise ValueError("snapshot too large") from exc

    version = snapshot.get("version", SNAPSHOT_VERSION)
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("snapshot.version must be a positive int")
    if version != SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version}")

    store = AmmStore()

    pools_entries = snapshot.get("pools")
    if pools_entries is None:
        pools_entries = []
    if not isinstance(pools_entries, list):
        raise TypeError("snapshot.pools must be a list")
    if len(pools_entries) > max_pools:
        raise ValueError(f"too many pools entries: {len(pools_entries)} > {max_pools}")
    for entry in pools_entries:
        if not isinstance(entry, Mapping):
            raise TypeError("snapshot.pools entries must be objects")
        token_x = _require_str(entry.get("token_x"), name="pool.token_x")
        token_y = _require_str(entry.get("token_y"), name="pool.token_y")
        # PoolRecord rejects non-canonical order and inconsistent reserves.
        record = PoolRecord(
            token_x=token_x,
            token_y=token_y,
            reserve_x=_require_int(entry.get("reserve_x", 0), name="pool.reserve_x"),
            reserve_y=_require_int(entry.get("reserve_y", 0), name="pool.reserve_y"),
            total_shares=_require_int(entry.get("total_shares", 0), name="pool.total_shares"),
        )
        if store.pools.contains(record.key):
            raise ValueError(f"duplicate pool entry: {record.key}")
        store.pools.put(record)

    position_entries = snapshot.get("positions")
    if position_entries is None:
        position_entries = []
    if not isinstance(position_entries, list):
        raise TypeError("snapshot.positions must be a list")
    if len(position_entries) > max_positions:
        raise ValueError(f"too many positions entries: {len(position_entries)} > {max_positions}")
    seen: set[tuple[PoolKey, str]] = set()
    for entry in position_entries:
        if not isinstance(entry, Mapping):
            raise TypeError("snapshot.positions entries must be objects")
        key = PoolKey(
            _require_str(entry.get("token_x"), name="position.token_x"),
            _require_str(entry.get("token_y"), name="position.token_y"),
        )
        if not store.pools.contains(key):
            raise ValueError(f"position references unknown pool: {key}")
        provider = _require_str(entry.get("provider"), name="position.provider", max_len=512)
        if (key, provider) in seen:
            raise ValueError("duplicate position entry (pool, provider)")
        seen.add((key, provider))
        store.positions.set(key, provider, _require_int(entry.get("shares"), name="position.shares"))

    if not store.verify_share_accounting():
        raise ValueError("positions do not sum to pool total_shares")
    return store
