"""
Deterministic canonical encoding primitives.

Used for pair canonicalization (one pool per unordered token pair) and for
hashing persisted snapshots.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Tuple


def canonical_pair(token_a: str, token_b: str) -> Tuple[str, str]:
    """
    Order two token identifiers so that the smaller one comes first.

    Every registry lookup goes through this; skipping it would split one logical
    pair into two pools.
    """
    if token_a == token_b:
        raise ValueError(f"pair tokens must differ: {token_a!r}")
    if token_a < token_b:
        return token_a, token_b
    return token_b, token_a


def _reject_surrogates(s: str) -> None:
    for ch in s:
        o = ord(ch)
        if 0xD800 <= o <= 0xDFFF:
            raise TypeError("surrogate code points are not allowed in canonical encoding")


def _reject_floats(value: Any) -> None:
    if isinstance(value, float):
        raise TypeError("floats are not allowed in canonical encoding")
    if isinstance(value, str):
        _reject_surrogates(value)
    if isinstance(value, dict):
        for k in value.keys():
            if not isinstance(k, str):
                raise TypeError("dict keys must be str for canonical encoding")
        for k, v in value.items():
            _reject_surrogates(k)
            _reject_floats(v)
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _reject_floats(item)
        return


def canonical_json_bytes(value: Any) -> bytes:
    """
    Canonical JSON encoding for hashing.

    Rules:
    - UTF-8
    - sort_keys=True
    - separators=(',', ':') (no whitespace)
    - allow_nan=False
    - floats rejected (to avoid representation ambiguity)
    """
    _reject_floats(value)
    text = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    return text.encode("utf-8")


def bounded_json_utf8_size(value: Any, *, max_bytes: int, max_depth: int = 16) -> int:
    """
    Upper bound on `len(canonical_json_bytes(value))`, computed without building
    the JSON text.

    Raises ValueError as soon as the running bound passes `max_bytes`, so an
    oversized snapshot is rejected before it is encoded.
    """
    if not isinstance(max_bytes, int) or isinstance(max_bytes, bool) or max_bytes <= 0:
        raise ValueError("max_bytes must be a positive int")
    if not isinstance(max_depth, int) or isinstance(max_depth, bool) or max_depth <= 0:
        raise ValueError("max_depth must be a positive int")

    def _check(n: int) -> int:
        if n > max_bytes:
            raise ValueError("json size exceeds max_bytes")
        return n

    def _size_str(s: str) -> int:
        total = 2  # quotes
        for ch in s:
            o = ord(ch)
            if 0xD800 <= o <= 0xDFFF:
                raise TypeError("surrogate code points are not allowed in canonical encoding")
            if o < 0x20:
                total += 6  # worst case \u00XX
            elif ch in ('"', "\\"):
                total += 2
            elif o < 0x80:
                total += 1
            elif o < 0x800:
                total += 2
            elif o < 0x10000:
                total += 3
            else:
                total += 4
            _check(total)
        return total

    def _size(v: Any, depth: int) -> int:
        if depth <= 0:
            raise ValueError("json nesting exceeds max_depth")
        if isinstance(v, float):
            raise TypeError("floats are not allowed in canonical encoding")
        if v is None or v is True:
            return 4
        if v is False:
            return 5
        if isinstance(v, int):
            # n < 2**b, so digits(n) <= floor(b * log10(2)) + 1.
            n = abs(v)
            digits = (n.bit_length() * 30103) // 100000 + 1
            return digits + (1 if v < 0 else 0)
        if isinstance(v, str):
            return _size_str(v)
        if isinstance(v, (list, tuple)):
            total = 2
            for i, item in enumerate(v):
                total = _check(total + (1 if i else 0) + _size(item, depth - 1))
            return total
        if isinstance(v, dict):
            total = 2
            for i, (k, item) in enumerate(v.items()):
                if not isinstance(k, str):
                    raise TypeError("dict keys must be str for canonical encoding")
                total = _check(total + (1 if i else 0) + _size_str(k) + 1 + _size(item, depth - 1))
            return total
        raise TypeError(f"unsupported type for canonical encoding: {type(v).__name__}")

    return _check(_size(value, max_depth))


def sha256_hex(data: bytes) -> str:
    return "0x" + hashlib.sha256(data).hexdigest()


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """
    Create a domain separation prefix.

    The output is ASCII-only and NUL-terminated to make concatenation unambiguous.
    """
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if "\x00" in label:
        raise ValueError("label must not contain NUL")
    try:
        label_bytes = label.encode("ascii")
    except UnicodeEncodeError as exc:
        raise ValueError("label must be ASCII") from exc
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return b"pairswap:" + label_bytes + b":v" + str(version).encode("ascii") + b"\x00"
