"""
Deployment configuration.

Values come from (lowest to highest precedence): dataclass defaults, an optional
YAML file, then `PAIRSWAP_*` environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class AmmConfig:
    # Principal that holds pooled reserves at the token gateway.
    custody_principal: str = "pairswap.pool-custody"

    # Declared deployer. Recorded for clients; no operation is gated on it.
    contract_owner: Optional[str] = None

    log_level: str = "INFO"

    # Snapshot loading bound (fail early on oversized inputs).
    max_snapshot_bytes: int = 4_000_000

    def __post_init__(self) -> None:
        if not isinstance(self.custody_principal, str) or not self.custody_principal.strip():
            raise ValueError("custody_principal must be a non-empty string")
        if self.contract_owner is not None and (not isinstance(self.contract_owner, str) or not self.contract_owner):
            raise ValueError("contract_owner must be a non-empty string or null")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        v = self.max_snapshot_bytes
        if not isinstance(v, int) or isinstance(v, bool) or v <= 0:
            raise ValueError("max_snapshot_bytes must be a positive int")


def _env_int(env: Mapping[str, str], name: str, default: int, *, lo: int, hi: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_str(env: Mapping[str, str], name: str, default: Optional[str]) -> Optional[str]:
    raw = env.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    known = {f.name for f in fields(AmmConfig)}
    unknown = sorted(str(k) for k in obj if k not in known)
    if unknown:
        raise ValueError(f"unknown config keys in {path}: {', '.join(unknown)}")
    return obj


def load_config(
    path: Optional[Union[str, Path]] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> AmmConfig:
    env = os.environ if env is None else env
    config = AmmConfig()
    if path is not None:
        config = replace(config, **_load_yaml_mapping(Path(path)))

    return replace(
        config,
        custody_principal=_env_str(env, "PAIRSWAP_CUSTODY", config.custody_principal),
        contract_owner=_env_str(env, "PAIRSWAP_OWNER", config.contract_owner),
        log_level=(_env_str(env, "PAIRSWAP_LOG_LEVEL", config.log_level) or config.log_level).upper(),
        max_snapshot_bytes=_env_int(
            env, "PAIRSWAP_MAX_SNAPSHOT_BYTES", config.max_snapshot_bytes, lo=1_024, hi=1_000_000_000
        ),
    )


def configure_logging(config: AmmConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
