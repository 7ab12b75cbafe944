"""
Coercions for fields whose stored shape changed over time.
Relationship lists show up as arrays, semicolon-joined strings or JSON text
depending on when the row was written.
"""

import json
import logging
from typing import Any, List

logger = logging.getLogger(__name__)

SEMICOLON = ";"

_TRUTHY = {"true", "1", "yes"}


def to_text(value: Any) -> str:
    """Zero value for missing text fields is the empty string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def to_string_array(value: Any) -> List[str]:
    """
    Coerce a stored list-ish value into a list of strings.
    Accepts a real list, a JSON array literal, or a single bare string.
    """
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str)]

    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return []
        if trimmed.startswith("["):
            try:
                parsed = json.loads(trimmed)
            except ValueError:
                logger.debug("Treating unparseable list literal as a single value: %r", trimmed)
                return [trimmed]
            if isinstance(parsed, list):
                return [item for item in parsed if isinstance(item, str)]
        return [trimmed]

    return []


def join_semicolon_list(value: Any) -> str:
    """Canonical editing form of a relationship list: one ';'-joined string."""
    if isinstance(value, (list, tuple)):
        return SEMICOLON.join(item for item in value if isinstance(item, str))
    if isinstance(value, str):
        return value
    return ""


def semicolon_to_array(value: Any) -> List[str]:
    """Split an edited relationship list back into its stored array form."""
    if isinstance(value, str):
        return [item.strip() for item in value.split(SEMICOLON) if item.strip()]
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str)]
    return []


def to_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return False
