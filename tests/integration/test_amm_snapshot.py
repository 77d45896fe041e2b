# [TESTER] v1

from __future__ import annotations

import copy

import pytest

from pairswap.integration.snapshot import SNAPSHOT_VERSION, snapshot_from_store, store_from_snapshot
from pairswap.state import AmmStore, PoolKey, PoolRecord

TOKEN_X = "0x" + "11" * 20
TOKEN_Y = "0x" + "22" * 20
TOKEN_Z = "0x" + "33" * 20


def _store(order: int = 0) -> AmmStore:
    store = AmmStore()
    k1 = PoolKey(TOKEN_X, TOKEN_Y)
    k2 = PoolKey(TOKEN_X, TOKEN_Z)
    pools = [PoolRecord(TOKEN_X, TOKEN_Y, 100, 200, 30), PoolRecord(TOKEN_X, TOKEN_Z, 5, 7, 9)]
    positions = [(k1, "bob", 10), (k1, "alice", 20), (k2, "carol", 9)]
    if order:
        pools.reverse()
        positions.reverse()
    for p in pools:
        store.pools.put(p)
    for key, who, shares in positions:
        store.positions.credit(key, who, shares)
    return store


def test_snapshot_is_insertion_order_independent() -> None:
    a = snapshot_from_store(_store(0))
    b = snapshot_from_store(_store(1))
    assert a.canonical_bytes() == b.canonical_bytes()
    assert a.commitment_hex() == b.commitment_hex()
    assert a.commitment_hex() == "0x" + a.commitment_bytes().hex()


def test_snapshot_layout_is_sorted() -> None:
    data = snapshot_from_store(_store(1)).data
    assert data["version"] == SNAPSHOT_VERSION
    assert [(p["token_x"], p["token_y"]) for p in data["pools"]] == [(TOKEN_X, TOKEN_Y), (TOKEN_X, TOKEN_Z)]
    assert [e["provider"] for e in data["positions"]] == ["alice", "bob", "carol"]


def test_round_trip_restores_equal_state() -> None:
    snap = snapshot_from_store(_store())
    restored = store_from_snapshot(snap.data)
    assert snapshot_from_store(restored).canonical_bytes() == snap.canonical_bytes()
    assert restored.positions.get(PoolKey(TOKEN_X, TOKEN_Y), "alice") == 20


def test_commitment_changes_with_state() -> None:
    store = _store()
    before = snapshot_from_store(store).commitment_hex()
    store.positions.credit(PoolKey(TOKEN_X, TOKEN_Z), "carol", 0)
    assert snapshot_from_store(store).commitment_hex() == before
    store.pools.put(PoolRecord(TOKEN_X, TOKEN_Z, 6, 7, 9))
    assert snapshot_from_store(store).commitment_hex() != before


def _mutated(fn) -> dict:
    data = copy.deepcopy(snapshot_from_store(_store()).data)
    fn(data)
    return data


@pytest.mark.parametrize(
    "mutate,exc",
    [
        (lambda d: d.update(version=2), ValueError),
        (lambda d: d.update(pools="nope"), TypeError),
        (lambda d: d["pools"].append(dict(d["pools"][0])), ValueError),
        (lambda d: d["pools"][0].update(token_x=TOKEN_Z), ValueError),
        (lambda d: d["pools"][0].update(reserve_x=-1), ValueError),
        (lambda d: d["pools"][0].update(reserve_x="100"), TypeError),
        (lambda d: d["positions"][0].update(shares=21), ValueError),
        (lambda d: d["positions"].append(dict(d["positions"][0])), ValueError),
        (lambda d: d["positions"][0].update(token_y="0x" + "44" * 20), ValueError),
        (lambda d: d["positions"][0].update(provider=""), ValueError),
    ],
)
def test_restore_is_fail_closed(mutate, exc) -> None:
    with pytest.raises(exc):
        store_from_snapshot(_mutated(mutate))


def test_restore_rejects_oversized_input() -> None:
    with pytest.raises(ValueError, match="too large"):
        store_from_snapshot(snapshot_from_store(_store()).data, max_snapshot_bytes=32)
    with pytest.raises(ValueError, match="too many pools"):
        store_from_snapshot(snapshot_from_store(_store()).data, max_pools=1)
