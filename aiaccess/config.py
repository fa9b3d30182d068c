# aiaccess/config.py
"""
@file config.py
@brief Limits and timing configuration for the tracking core.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

import yaml
from jsonschema import Draft202012Validator

from .exceptions import ConfigError

SCHEMA_DIR = os.path.join(os.path.dirname(__file__), "schemas")
CONFIG_SCHEMA_PATH = os.path.join(SCHEMA_DIR, "config.schema.json")

DEFAULT_SENSITIVE_TERMS: Tuple[str, ...] = ("password", "token", "secret", "key", "credential")


@dataclass(frozen=True)
class TrackerConfig:
    """
    Limits and timings shared by the registry, validation policy and
    navigation service.

    Instances are immutable; use with_overrides() or a preset to derive
    a new one.
    """
    max_tracked_elements: int = 10000
    max_identifier_length: int = 200
    max_context_size: int = 5000
    max_coordinate: float = 1_000_000.0
    sensitive_terms: Tuple[str, ...] = field(default=DEFAULT_SENSITIVE_TERMS)
    wait_timeout: float = 5.0
    poll_interval: float = 0.1

    def with_overrides(self, **overrides: Any) -> TrackerConfig:
        """Create a new config with overrides applied."""
        unknown = set(overrides) - set(asdict(self))
        if unknown:
            raise ConfigError(f"Unknown TrackerConfig field(s): {sorted(unknown)}")
        if "sensitive_terms" in overrides:
            overrides["sensitive_terms"] = tuple(overrides["sensitive_terms"])
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict of every setting."""
        data = asdict(self)
        data["sensitive_terms"] = list(self.sensitive_terms)
        return data


PRESET_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "default": {},
    "fast": {"wait_timeout": 2.0, "poll_interval": 0.05},
    "ci": {"wait_timeout": 15.0, "poll_interval": 0.2},
    "slow": {"wait_timeout": 30.0, "poll_interval": 0.25},
}


def list_presets() -> Dict[str, Dict[str, Any]]:
    """Settings of every named preset keyed by name."""
    return {name: dict(values) for name, values in PRESET_OVERRIDES.items()}


def from_preset(preset: str = "default", base: Optional[TrackerConfig] = None) -> TrackerConfig:
    """Build a config from a named preset on top of base (or the defaults)."""
    if preset not in PRESET_OVERRIDES:
        raise ConfigError(f"Unknown preset '{preset}'. Available: {sorted(PRESET_OVERRIDES)}")
    return (base or TrackerConfig()).with_overrides(**PRESET_OVERRIDES[preset])


def _load_schema(path: str = CONFIG_SCHEMA_PATH) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate_config_data(data: Dict[str, Any]) -> None:
    """Validate raw config data against the packaged JSON schema."""
    validator = Draft202012Validator(_load_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        lines = ["Config schema validation failed:"]
        for e in errors:
            lines.append(f"- {list(e.path)}: {e.message}")
        raise ConfigError("\n".join(lines))


def config_from_dict(data: Dict[str, Any]) -> TrackerConfig:
    """
    Build a TrackerConfig from a mapping.

    An optional "preset" key is applied first; the remaining keys override it.
    """
    validate_config_data(data)
    values = dict(data)
    preset = values.pop("preset", "default")
    return from_preset(preset).with_overrides(**values)


def load_config(path: str) -> TrackerConfig:
    """Load a YAML config file."""
    path = os.path.abspath(path)
    if not os.path.exists(path):
        raise ConfigError(f"Config YAML not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Config YAML must be a mapping at root.")
    return config_from_dict(data)
