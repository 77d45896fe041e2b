# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.state.canonical import canonical_pair
from pairswap.state.pools import PoolKey, PoolRecord, PoolRegistry

TOKEN_X = "0x" + "11" * 20
TOKEN_Y = "0x" + "22" * 20
TOKEN_Z = "0x" + "33" * 20


def _record(token_x: str = TOKEN_X, token_y: str = TOKEN_Y, rx: int = 10, ry: int = 20, shares: int = 5) -> PoolRecord:
    return PoolRecord(token_x=token_x, token_y=token_y, reserve_x=rx, reserve_y=ry, total_shares=shares)


def test_canonical_pair_orders_tokens() -> None:
    assert canonical_pair(TOKEN_Y, TOKEN_X) == (TOKEN_X, TOKEN_Y)
    assert canonical_pair(TOKEN_X, TOKEN_Y) == (TOKEN_X, TOKEN_Y)
    # Plain string order, not numeric.
    assert canonical_pair("b", "A") == ("A", "b")
    assert canonical_pair("10", "9") == ("10", "9")
    with pytest.raises(ValueError):
        canonical_pair(TOKEN_X, TOKEN_X)


def test_pool_key_is_order_independent() -> None:
    assert PoolKey.of(TOKEN_Y, TOKEN_X) == PoolKey.of(TOKEN_X, TOKEN_Y) == PoolKey(TOKEN_X, TOKEN_Y)
    assert str(PoolKey.of(TOKEN_Y, TOKEN_X)) == f"{TOKEN_X}/{TOKEN_Y}"


def test_pool_record_rejects_non_canonical_order() -> None:
    with pytest.raises(ValueError):
        _record(token_x=TOKEN_Y, token_y=TOKEN_X)
    with pytest.raises(ValueError):
        _record(token_x=TOKEN_X, token_y=TOKEN_X)


def test_pool_record_rejects_bad_amounts() -> None:
    with pytest.raises(ValueError):
        _record(rx=-1)
    with pytest.raises(TypeError):
        _record(ry=True)
    with pytest.raises(TypeError):
        _record(shares=1.5)  # type: ignore[arg-type]
    # Outstanding shares with an empty side.
    with pytest.raises(ValueError):
        _record(rx=0, ry=20, shares=5)


def test_drained_record_is_valid() -> None:
    rec = _record(rx=0, ry=0, shares=0)
    assert rec.is_drained
    assert rec.constant_product() == 0


def test_reserves_for_orients_by_input_token() -> None:
    rec = _record(rx=10, ry=20)
    assert rec.reserves_for(TOKEN_X) == (10, 20)
    assert rec.reserves_for(TOKEN_Y) == (20, 10)
    with pytest.raises(ValueError):
        rec.reserves_for(TOKEN_Z)


def test_with_changes_returns_new_record() -> None:
    rec = _record()
    updated = rec.with_changes(reserve_x=11, total_shares=6)
    assert (rec.reserve_x, rec.total_shares) == (10, 5)
    assert (updated.reserve_x, updated.reserve_y, updated.total_shares) == (11, 20, 6)
    with pytest.raises(ValueError):
        rec.with_changes(reserve_y=0)


def test_registry_iterates_in_key_order() -> None:
    reg = PoolRegistry()
    reg.put(_record(token_x=TOKEN_Y, token_y=TOKEN_Z))
    reg.put(_record(token_x=TOKEN_X, token_y=TOKEN_Z))
    reg.put(_record(token_x=TOKEN_X, token_y=TOKEN_Y))

    assert [key for key, _ in reg.items()] == [
        PoolKey(TOKEN_X, TOKEN_Y),
        PoolKey(TOKEN_X, TOKEN_Z),
        PoolKey(TOKEN_Y, TOKEN_Z),
    ]
    assert len(reg) == 3
    assert reg.contains(PoolKey.of(TOKEN_Z, TOKEN_Y))
    assert reg.get(PoolKey(TOKEN_Z, "0x" + "44" * 20)) is None

