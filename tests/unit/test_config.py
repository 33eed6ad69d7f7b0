"""Unit tests for config loading, env interpolation, and validation."""
from __future__ import annotations

from pathlib import Path

import pytest

from hive_db.config import AppConfig, NodeConfig, _interpolate_env, load_config, validate


class TestInterpolateEnv:
    def test_simple_substitution(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_VAR", "hello")
        assert _interpolate_env("${MY_VAR}") == "hello"

    def test_missing_var_becomes_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NONEXISTENT_VAR_XYZ", raising=False)
        assert _interpolate_env("${NONEXISTENT_VAR_XYZ}") == ""

    def test_nested_dict(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NODE", "https://node.example.com")
        result = _interpolate_env({"node": {"rpc_endpoints": ["${NODE}"]}})
        assert result == {"node": {"rpc_endpoints": ["https://node.example.com"]}}

    def test_non_string_passthrough(self) -> None:
        assert _interpolate_env(42) == 42
        assert _interpolate_env(True) is True


class TestLoadConfig:
    def test_loads_valid_yaml(self, sample_yaml_path: Path) -> None:
        cfg = load_config(sample_yaml_path)
        assert isinstance(cfg, AppConfig)
        assert cfg.node.rpc_endpoints == (
            "https://api.example.com",
            "https://backup.example.com",
        )
        assert cfg.node.rpc_timeout == 10

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.yaml")

    def test_default_timeout(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text('node:\n  rpc_endpoints: ["https://a.example.com"]\n')
        assert load_config(cfg_file).node.rpc_timeout == 30

    def test_unset_env_endpoint_dropped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("HIVE_TEST_FALLBACK", raising=False)
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(
            'node:\n  rpc_endpoints: ["https://a.example.com", "${HIVE_TEST_FALLBACK}"]\n'
        )
        assert load_config(cfg_file).node.rpc_endpoints == ("https://a.example.com",)

    def test_comma_separated_env_endpoints(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HIVE_TEST_NODES", "https://a.example.com, https://b.example.com")
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text('node:\n  rpc_endpoints: "${HIVE_TEST_NODES}"\n')
        assert load_config(cfg_file).node.rpc_endpoints == (
            "https://a.example.com",
            "https://b.example.com",
        )


class TestValidation:
    def test_no_endpoints_raises(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("node:\n  rpc_endpoints: []\n")
        with pytest.raises(ValueError, match="At least one RPC endpoint"):
            load_config(cfg_file)

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("")
        with pytest.raises(ValueError, match="At least one RPC endpoint"):
            load_config(cfg_file)

    def test_non_http_endpoint_raises(self) -> None:
        cfg = AppConfig(node=NodeConfig(rpc_endpoints=("wss://api.example.com",)))
        with pytest.raises(ValueError, match="not an http"):
            validate(cfg)

    def test_timeout_must_be_positive(self) -> None:
        cfg = AppConfig(node=NodeConfig(rpc_endpoints=("https://a.example.com",), rpc_timeout=0))
        with pytest.raises(ValueError, match="rpc_timeout"):
            validate(cfg)


class TestFrozenConfigs:
    def test_node_config_immutable(self) -> None:
        c = NodeConfig(rpc_endpoints=("https://a.example.com",))
        with pytest.raises(AttributeError):
            c.rpc_timeout = 999  # type: ignore[misc]
