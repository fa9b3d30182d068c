# aiaccess/actionlogger.py
"""
@file actionlogger.py
@brief Structured interaction/navigation logging for automation agents.

Events are rendered either as a human-readable line

    12:00:01 | INFO | [interaction] tap interaction: button_primary_save | element='button_primary_save' | x=60

or as one JSON object per line (jsonl) for machine consumption.
"""

from __future__ import annotations

import json
import os
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .logsink import LogSink, env_flag


class Category(str, Enum):
    INTERACTION = "interaction"
    NAVIGATION = "navigation"
    STATE = "state"
    PERFORMANCE = "performance"
    DEBUG = "debug"


LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}
FORMATS = ("line", "jsonl")

REDACTED_KEYS = frozenset({"password", "passwd", "secret", "token"})
MASK_VISIBLE_CHARS = 10


def mask_text(text: str, max_visible: int = MASK_VISIBLE_CHARS) -> str:
    """Truncate text longer than max_visible characters."""
    return text if len(text) <= max_visible else f"{text[:max_visible]}..."


def redact(action: str, metadata: Mapping[str, Any]) -> Dict[str, Any]:
    """Hide credential-like keys; shorten text typed into fields."""
    out: Dict[str, Any] = {}
    for key, value in metadata.items():
        if key.lower() in REDACTED_KEYS:
            out[key] = "***"
        elif action == "type" and key == "text":
            out[key] = mask_text(str(value))
        else:
            out[key] = value
    return out


class ActionLogger(LogSink):
    """Thread-safe event logger; disabled until enable() is called."""

    def __init__(self) -> None:
        super().__init__()
        self._level = "INFO"
        self._format = "line"

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "INFO",
        format: str = "line",
    ) -> None:
        """Set output targets and the minimum level."""
        fmt = (format or "line").lower()
        if fmt not in FORMATS:
            raise ValueError(f"ActionLogger format must be one of {FORMATS}")
        lvl = (level or "INFO").upper()
        if lvl not in LEVELS:
            raise ValueError(f"ActionLogger level must be one of {sorted(LEVELS)}")

        self.configure_output(console=console, file_path=file_path)
        self._level = lvl
        self._format = fmt

    # ------------------------------------------------------------------
    # Event API
    # ------------------------------------------------------------------

    def log_interaction(
        self,
        identifier: str,
        action: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Log a user interaction with an element."""
        self._emit(
            Category.INTERACTION,
            f"{action} interaction: {identifier}",
            action=action,
            element=identifier,
            metadata=context,
        )

    def log_navigation(
        self,
        to: str,
        from_: Optional[str] = None,
        method: str = "unknown",
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Log a navigation between views."""
        meta = dict(context or {})
        meta.update({"to": to, "method": method})
        if from_:
            meta["from"] = from_
        origin = f" from {from_}" if from_ else ""
        self._emit(
            Category.NAVIGATION,
            f"Navigation{origin} to {to} via {method}",
            action="navigate",
            metadata=meta,
        )

    def log_state_change(
        self,
        component: str,
        from_: str,
        to: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Log a component state transition."""
        self._emit(
            Category.STATE,
            f"State change in {component}: {from_} -> {to}",
            action="state_change",
            element=component,
            metadata=context,
        )

    def log_performance(
        self,
        operation: str,
        duration: float,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """duration is in seconds; it is reported in whole milliseconds."""
        duration_ms = int(duration * 1000)
        self._emit(
            Category.PERFORMANCE,
            f"Performance: {operation} completed in {duration_ms}ms",
            action=operation,
            metadata=context,
            duration_ms=duration_ms,
        )

    def debug(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        """Only emitted when configured with level DEBUG."""
        if LEVELS[self._level] > LEVELS["DEBUG"]:
            return
        self._emit(Category.DEBUG, message, action="debug", metadata=context, level="DEBUG")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _emit(
        self,
        category: Category,
        message: str,
        *,
        action: str,
        element: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
        duration_ms: Optional[int] = None,
        level: str = "INFO",
    ) -> None:
        if not self._enabled:
            return

        event = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": level,
            "category": category.value,
            "action": action,
            "element": element,
            "message": message,
            "duration_ms": duration_ms,
            "metadata": redact(action, metadata or {}),
        }
        self.write_line(self.render(event))

    def render(self, event: Dict[str, Any]) -> str:
        """Format an event as a single output line."""
        if self._format == "jsonl":
            return json.dumps(event, ensure_ascii=False, separators=(",", ":"))

        fields = [time.strftime("%H:%M:%S"), event["level"], f"[{event['category']}] {event['message']}"]
        if event.get("element"):
            fields.append(f"element='{event['element']}'")
        if event.get("duration_ms") is not None:
            fields.append(f"duration_ms={event['duration_ms']}")
        fields.extend(f"{k}={v}" for k, v in (event.get("metadata") or {}).items())
        return " | ".join(fields)


def configure_from_env(logger: Optional[ActionLogger] = None) -> ActionLogger:
    """
    Configure an action logger (the process default if none given) from:

      AIACCESS_ACTION_LOGGING     truthy to enable
      AIACCESS_ACTION_LOG_FILE    optional append-only file
      AIACCESS_ACTION_LOG_LEVEL   INFO (default) or DEBUG
      AIACCESS_ACTION_LOG_FORMAT  line (default) or jsonl
    """
    logger = logger or ACTION_LOGGER
    if not env_flag("AIACCESS_ACTION_LOGGING"):
        logger.disable()
        return logger

    logger.configure(
        file_path=os.getenv("AIACCESS_ACTION_LOG_FILE"),
        level=os.getenv("AIACCESS_ACTION_LOG_LEVEL", "INFO"),
        format=os.getenv("AIACCESS_ACTION_LOG_FORMAT", "line"),
    )
    logger.enable()
    return logger


ACTION_LOGGER = ActionLogger()
