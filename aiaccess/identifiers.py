# aiaccess/identifiers.py
"""
@file identifiers.py
@brief Canonical identifier builders for common UI components.

Identifiers follow `{context_}{category}_{variant_}{label}`, e.g.
`profile_button_secondary_cancel`. Labels are normalized so that the
result always passes the registry's identifier validation.
"""

from __future__ import annotations

import re
from typing import Optional

_DROPPED = re.compile(r"[,'\"?!]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize(text: str) -> str:
    """
    Lower-case, spell out '&', drop quotes and punctuation, collapse any other
    run of non-alphanumerics to one underscore and trim underscores.

    >>> normalize("Save & Continue!")
    'save_and_continue'
    """
    value = text.lower().replace("&", "and")
    value = _DROPPED.sub("", value)
    value = _NON_ALNUM.sub("_", value)
    return value.strip("_")


def _with_context(base: str, context: Optional[str]) -> str:
    return f"{context}_{base}" if context else base


def button(variant: str, title: str, context: Optional[str] = None) -> str:
    """Identifier for a button."""
    return _with_context(f"button_{variant}_{normalize(title)}", context)


def text_field(placeholder: str, context: Optional[str] = None) -> str:
    """Identifier for a text field."""
    return _with_context(f"textfield_{normalize(placeholder)}", context)


def navigation(destination: str, context: Optional[str] = None) -> str:
    """Identifier for a navigation link."""
    return _with_context(f"navigation_{normalize(destination)}", context)


def list_item(title: str, index: Optional[int] = None, context: Optional[str] = None) -> str:
    """Identifier for a list row, optionally with its index."""
    base = f"list_item_{normalize(title)}"
    if index is not None:
        base += f"_{index}"
    return _with_context(base, context)


def card(title: str, context: Optional[str] = None) -> str:
    """Identifier for a card."""
    return _with_context(f"card_{normalize(title)}", context)


def toggle(setting: str, context: Optional[str] = None) -> str:
    """Identifier for a settings toggle."""
    return _with_context(f"toggle_{normalize(setting)}", context)


def tab(name: str, context: Optional[str] = None) -> str:
    """Identifier for a tab."""
    return _with_context(f"tab_{normalize(name)}", context)


def modal(name: str, context: Optional[str] = None) -> str:
    """Identifier for a modal."""
    return _with_context(f"modal_{normalize(name)}", context)


def alert(kind: str, message: str, context: Optional[str] = None) -> str:
    """Identifier for an alert."""
    return _with_context(f"alert_{kind}_{normalize(message)}", context)


def badge(kind: str, value: str, context: Optional[str] = None) -> str:
    """Identifier for a badge."""
    return _with_context(f"badge_{kind}_{normalize(value)}", context)


BUILDERS = {
    "button": button,
    "textfield": text_field,
    "navigation": navigation,
    "list_item": list_item,
    "card": card,
    "toggle": toggle,
    "tab": tab,
    "modal": modal,
    "alert": alert,
    "badge": badge,
}
