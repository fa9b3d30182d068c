# aiaccess/persistence.py
"""
@file persistence.py
@brief YAML dump/load of tracking snapshots for diagnostics and replay.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict

import yaml
from jsonschema import Draft202012Validator

from .config import SCHEMA_DIR
from .exceptions import ConfigError
from .models import TrackingSnapshot

log = logging.getLogger(__name__)

SNAPSHOT_SCHEMA_PATH = os.path.join(SCHEMA_DIR, "snapshot.schema.json")


def _validator() -> Draft202012Validator:
    with open(SNAPSHOT_SCHEMA_PATH, "r", encoding="utf-8") as f:
        return Draft202012Validator(json.load(f))


def validate_snapshot_data(data: Dict[str, Any]) -> None:
    """Check data against the snapshot schema."""
    errors = sorted(_validator().iter_errors(data), key=lambda e: list(e.path))
    if errors:
        lines = ["Snapshot schema validation failed:"]
        for e in errors:
            lines.append(f"- {list(e.path)}: {e.message}")
        raise ConfigError("\n".join(lines))


def dump_snapshot(snapshot: TrackingSnapshot, path: str) -> str:
    """Write snapshot as YAML. Returns the absolute path written."""
    path = os.path.abspath(path)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(snapshot.to_dict(), f, sort_keys=False, allow_unicode=True)
    log.info("Snapshot with %d elements written to %s", len(snapshot), path)
    return path


def load_snapshot(path: str) -> TrackingSnapshot:
    """Read and validate a snapshot written by dump_snapshot()."""
    path = os.path.abspath(path)
    if not os.path.exists(path):
        raise ConfigError(f"Snapshot file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Snapshot YAML must be a mapping at root.")

    validate_snapshot_data(data)
    return TrackingSnapshot.from_dict(data)
