"""
Configuration Module

Architectural Intent:
- Centralized configuration loading from a JSON file
- Typed, frozen access to cluster, store and rollback defaults
- Falls back to defaults when the config file is absent
- Environment variables override file-based config

Design Decisions:
- Nested sections map to frozen sub-dataclasses
- Unknown keys are ignored so older files keep loading
- String values from the environment are coerced by field type
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional
import json
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "rewind.json"
ENV_PREFIX = "REWIND"

_TRUE_VALUES = ("true", "1", "yes", "on")


@dataclass(frozen=True)
class KubeConfig:
    """How kubectl is located and invoked."""
    kubectl_path: str = "kubectl"
    kubeconfig: str = ""
    context: str = ""
    namespace: str = "default"
    # user@host[:port] of a node to run kubectl on over SSH; empty runs locally
    control_plane: str = ""


@dataclass(frozen=True)
class StoreConfig:
    """Release store backend."""
    backend: str = "sqlite"  # "sqlite" or "memory"
    db_path: str = "rewind.db"


@dataclass(frozen=True)
class RollbackDefaults:
    """Defaults for rollback flags not given on the command line."""
    timeout_seconds: float = 300.0
    wait: bool = False
    wait_for_jobs: bool = False
    cleanup_on_fail: bool = False
    max_history: int = 10


@dataclass(frozen=True)
class RewindConfig:
    """Root configuration."""
    kube: KubeConfig = field(default_factory=KubeConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    rollback: RollbackDefaults = field(default_factory=RollbackDefaults)
    log_level: str = "WARNING"
    log_json: bool = False


_SECTIONS = {
    "kube": KubeConfig,
    "store": StoreConfig,
    "rollback": RollbackDefaults,
}


def _env_override(data: dict, prefix: str = ENV_PREFIX) -> dict:
    """Override config values with environment variables.

    Variables follow REWIND_<SECTION>_<KEY>, e.g. REWIND_KUBE_CONTEXT=prod or
    REWIND_ROLLBACK_TIMEOUT_SECONDS=600. Top-level keys use REWIND_<KEY>.
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}_"):
            continue
        name = key[len(prefix) + 1:].lower()
        section, _, field_name = name.partition("_")
        if section in _SECTIONS and field_name:
            data.setdefault(section, {})[field_name] = value
        else:
            data[name] = value
    return data


def _parse_config_file(path: Path) -> dict:
    """Parse a JSON config file. Returns an empty dict if it does not exist."""
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return {}
    except json.JSONDecodeError as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s must contain a JSON object", path)
        return {}
    return data


def _coerce(value: Any, type_name: str) -> Any:
    if not isinstance(value, str):
        return value
    if type_name == "bool":
        return value.strip().lower() in _TRUE_VALUES
    if type_name == "int":
        return int(value)
    if type_name == "float":
        return float(value)
    return value


def _build_section(cls, data: dict):
    """Build a section dataclass from a dict, ignoring unknown keys."""
    if not isinstance(data, dict):
        return cls()
    kwargs = {}
    for f in fields(cls):
        if f.name in data:
            kwargs[f.name] = _coerce(data[f.name], str(f.type))
    return cls(**kwargs)


def load_config(
    path: Optional[str] = None,
    env_prefix: str = ENV_PREFIX,
) -> RewindConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (REWIND_SECTION_KEY)
    2. Config file values
    3. Defaults

    Args:
        path: Path to the JSON config file. Defaults to rewind.json in CWD.
        env_prefix: Environment variable prefix. Defaults to REWIND.
    """
    config_path = Path(path) if path else Path(DEFAULT_CONFIG_FILE)
    data = _parse_config_file(config_path)
    data = _env_override(data, env_prefix)

    return RewindConfig(
        kube=_build_section(KubeConfig, data.get("kube", {})),
        store=_build_section(StoreConfig, data.get("store", {})),
        rollback=_build_section(RollbackDefaults, data.get("rollback", {})),
        log_level=str(data.get("log_level", "WARNING")),
        log_json=_coerce(data.get("log_json", False), "bool"),
    )
