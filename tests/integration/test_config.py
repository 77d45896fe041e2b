# [TESTER] v1

from __future__ import annotations

from pathlib import Path

import pytest

from pairswap.config import AmmConfig, load_config


def test_defaults_without_file_or_env() -> None:
    cfg = load_config(env={})
    assert cfg == AmmConfig()
    assert cfg.custody_principal == "pairswap.pool-custody"
    assert cfg.contract_owner is None


def test_yaml_file_then_env_override(tmp_path: Path) -> None:
    path = tmp_path / "pairswap.yaml"
    path.write_text("custody_principal: vault\ncontract_owner: deployer\nlog_level: debug\n", encoding="utf-8")

    cfg = load_config(path, env={})
    assert (cfg.custody_principal, cfg.contract_owner, cfg.log_level) == ("vault", "deployer", "DEBUG")

    cfg = load_config(path, env={"PAIRSWAP_CUSTODY": "other-vault", "PAIRSWAP_OWNER": "  "})
    assert cfg.custody_principal == "other-vault"
    assert cfg.contract_owner == "deployer"


def test_empty_yaml_file_is_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path, env={}) == AmmConfig()


def test_yaml_rejects_unknown_keys_and_non_mappings(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("custody_principal: vault\nfee_bps: 30\n", encoding="utf-8")
    with pytest.raises(ValueError, match="fee_bps"):
        load_config(path, env={})

    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_config(path, env={})


def test_env_int_is_clamped_and_validated() -> None:
    assert load_config(env={"PAIRSWAP_MAX_SNAPSHOT_BYTES": "10"}).max_snapshot_bytes == 1_024
    assert load_config(env={"PAIRSWAP_MAX_SNAPSHOT_BYTES": " 2048 "}).max_snapshot_bytes == 2_048
    with pytest.raises(ValueError, match="PAIRSWAP_MAX_SNAPSHOT_BYTES"):
        load_config(env={"PAIRSWAP_MAX_SNAPSHOT_BYTES": "lots"})


def test_config_validation() -> None:
    with pytest.raises(ValueError):
        AmmConfig(custody_principal=" ")
    with pytest.raises(ValueError):
        AmmConfig(log_level="LOUD")
    with pytest.raises(ValueError):
        AmmConfig(max_snapshot_bytes=0)
    with pytest.raises(ValueError):
        load_config(env={"PAIRSWAP_LOG_LEVEL": "chatty"})
