"""Tests for configuration module."""

import json
import os
import pytest
from unittest.mock import patch

from rewind.infrastructure.config import (
    KubeConfig,
    RewindConfig,
    RollbackDefaults,
    StoreConfig,
    load_config,
)


class TestDefaultConfig:
    def test_defaults(self):
        config = load_config(path="/nonexistent/rewind.json")
        assert config.log_level == "WARNING"
        assert config.log_json is False
        assert config.kube.kubectl_path == "kubectl"
        assert config.kube.namespace == "default"
        assert config.kube.control_plane == ""
        assert config.store.backend == "sqlite"
        assert config.store.db_path == "rewind.db"
        assert config.rollback.timeout_seconds == 300.0
        assert config.rollback.max_history == 10

    def test_all_sections_present(self):
        config = load_config(path="/nonexistent/rewind.json")
        assert isinstance(config, RewindConfig)
        assert isinstance(config.kube, KubeConfig)
        assert isinstance(config.store, StoreConfig)
        assert isinstance(config.rollback, RollbackDefaults)


class TestFileConfig:
    def test_load_from_file(self, tmp_path):
        config_file = tmp_path / "rewind.json"
        config_file.write_text(json.dumps({
            "log_level": "DEBUG",
            "kube": {"context": "prod", "control_plane": "ops@10.0.0.5"},
            "store": {"backend": "memory"},
            "rollback": {"wait": True, "timeout_seconds": 120},
        }))

        config = load_config(path=str(config_file))
        assert config.log_level == "DEBUG"
        assert config.kube.context == "prod"
        assert config.kube.control_plane == "ops@10.0.0.5"
        assert config.store.backend == "memory"
        assert config.rollback.wait is True
        assert config.rollback.timeout_seconds == 120

    def test_partial_config(self, tmp_path):
        config_file = tmp_path / "rewind.json"
        config_file.write_text(json.dumps({"store": {"db_path": "/var/lib/rewind.db"}}))

        config = load_config(path=str(config_file))
        assert config.store.db_path == "/var/lib/rewind.db"
        assert config.store.backend == "sqlite"  # default preserved
        assert config.kube.namespace == "default"  # default preserved

    def test_invalid_json_returns_defaults(self, tmp_path):
        config_file = tmp_path / "rewind.json"
        config_file.write_text("not valid json{{{")

        config = load_config(path=str(config_file))
        assert config == RewindConfig()

    def test_non_object_returns_defaults(self, tmp_path):
        config_file = tmp_path / "rewind.json"
        config_file.write_text("[1, 2, 3]")

        assert load_config(path=str(config_file)) == RewindConfig()

    def test_unknown_keys_ignored(self, tmp_path):
        config_file = tmp_path / "rewind.json"
        config_file.write_text(json.dumps({
            "kube": {"context": "dev", "unknown_key": "ignored"},
        }))

        config = load_config(path=str(config_file))
        assert config.kube.context == "dev"


class TestEnvOverride:
    def test_env_overrides_file(self, tmp_path):
        config_file = tmp_path / "rewind.json"
        config_file.write_text(json.dumps({"kube": {"context": "dev"}}))

        with patch.dict(os.environ, {"REWIND_KUBE_CONTEXT": "prod"}):
            config = load_config(path=str(config_file))

        assert config.kube.context == "prod"

    def test_numbers_are_coerced(self):
        with patch.dict(os.environ, {
            "REWIND_ROLLBACK_TIMEOUT_SECONDS": "600",
            "REWIND_ROLLBACK_MAX_HISTORY": "3",
        }):
            config = load_config(path="/nonexistent/rewind.json")

        assert config.rollback.timeout_seconds == 600.0
        assert config.rollback.max_history == 3

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("no", False)])
    def test_bool_conversion(self, value, expected):
        with patch.dict(os.environ, {"REWIND_ROLLBACK_CLEANUP_ON_FAIL": value}):
            config = load_config(path="/nonexistent/rewind.json")

        assert config.rollback.cleanup_on_fail is expected

    def test_top_level_keys(self):
        with patch.dict(os.environ, {"REWIND_LOG_LEVEL": "INFO", "REWIND_LOG_JSON": "yes"}):
            config = load_config(path="/nonexistent/rewind.json")

        assert config.log_level == "INFO"
        assert config.log_json is True

    def test_custom_prefix(self):
        with patch.dict(os.environ, {"MYAPP_STORE_BACKEND": "memory"}):
            config = load_config(path="/nonexistent/rewind.json", env_prefix="MYAPP")

        assert config.store.backend == "memory"


class TestConfigImmutability:
    def test_frozen(self):
        config = load_config(path="/nonexistent/rewind.json")
        with pytest.raises(AttributeError):
            config.log_level = "DEBUG"

    def test_sub_config_frozen(self):
        config = load_config(path="/nonexistent/rewind.json")
        with pytest.raises(AttributeError):
            config.store.backend = "memory"
