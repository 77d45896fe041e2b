#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pairswap.config import configure_logging, load_config
from pairswap.core.gateway import LedgerTokenGateway
from pairswap.core.height import ManualHeightOracle
from pairswap.integration.engine import AmmEngine


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Create a pool, add liquidity, swap and withdraw against in-memory state.")
    ap.add_argument("--config", default=None, help="optional YAML config file")
    ap.add_argument("--amount-in", type=int, default=100_000)
    args = ap.parse_args(argv)

    config = load_config(args.config)
    configure_logging(config)

    alice = "alice"
    token_x = "token-x"
    token_y = "token-y"

    gateway = LedgerTokenGateway()
    gateway.mint(alice, token_x, 10_000_000)
    gateway.mint(alice, token_y, 10_000_000)
    heights = ManualHeightOracle(current=100)
    engine = AmmEngine.create(config, gateway=gateway, heights=heights)

    steps = [
        {"kind": "CREATE_POOL", "token_a": token_x, "token_b": token_y, "amount_a": 1_000_000, "amount_b": 2_000_000},
        {
            "kind": "ADD_LIQUIDITY", "token_a": token_x, "token_b": token_y,
            "amount_a_desired": 500_000, "amount_b_desired": 1_000_000,
            "amount_a_min": 0, "amount_b_min": 0, "deadline": 200,
        },
        {"kind": "GET_SWAP_OUTPUT", "token_in": token_x, "token_out": token_y, "amount_in": args.amount_in},
        {
            "kind": "SWAP", "token_in": token_x, "token_out": token_y,
            "amount_in": args.amount_in, "amount_out_min": 1, "deadline": 200,
        },
        {
            "kind": "REMOVE_LIQUIDITY", "token_a": token_x, "token_b": token_y,
            "shares": 500_000_000, "amount_a_min": 0, "amount_b_min": 0, "deadline": 200,
        },
        {"kind": "GET_POOL_DETAILS", "token_a": token_y, "token_b": token_x},
    ]

    for step in steps:
        res = engine.execute(step, sender=alice)
        print(f"[offline-demo] {json.dumps(res.to_dict(), sort_keys=True)}")
        if not res.ok:
            return 1

    print(f"[offline-demo] state commitment={engine.snapshot().commitment_hex()}")
    print(
        f"[offline-demo] balances: {token_x}={gateway.balance_of(alice, token_x)} "
        f"{token_y}={gateway.balance_of(alice, token_y)}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
