"""
Display-side cleanup of legacy text fields.

Older rows store SQL as a JSON array of string fragments with HTML <br> tags
and a leading "sql" marker, and data-layer mappings as JSON text with <br>
tags or a leading "json" marker. These helpers turn both back into clean
multi-line text. They never raise: anything that fails to parse falls back
to the plain textual cleanup.
"""

import json
import logging
import re
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

SQL = "sql"
JSON = "json"

# Fields that hold SQL / JSON mapping text on every entity kind
SQL_FIELDS = ("sql_query",)
JSON_MAPPING_FIELDS = (
    "w3_data_layer",
    "ga4_data_layer",
    "adobe_client_data_layer",
    "xdm_mapping",
)

_BR_TAG = re.compile(r"<br\s*/?>", re.IGNORECASE)
_SQL_MARKER = re.compile(r"^\s*sql\s*", re.IGNORECASE)
_JSON_MARKER = re.compile(r"^\s*json\s*", re.IGNORECASE)


def _fragment_text(fragment: Any) -> str:
    """
    Render one array element the way a string join would. Numbers and
    objects use their JSON text, so 1e20 gives "1e+20" and a dict gives JSON
    rather than a JavaScript-style join.
    """
    if fragment is None:
        return ""
    if isinstance(fragment, str):
        return fragment
    if isinstance(fragment, bool):
        return "true" if fragment else "false"
    return json.dumps(fragment, ensure_ascii=False)


def _looks_like(text: str, *brackets: str) -> bool:
    return any(text.startswith(pair[0]) and text.endswith(pair[1]) for pair in brackets)


def normalize_sql_query(raw: Optional[str]) -> Optional[str]:
    """Clean a stored SQL query into multi-line text."""
    if not raw:
        return raw
    text = raw

    # ["sql<br>SELECT ...", "<br> FROM ..."]
    trimmed = text.strip()
    if _looks_like(trimmed, "[]"):
        try:
            parsed = json.loads(trimmed)
        except ValueError:
            logger.debug("SQL field looked like a JSON array but did not parse")
        else:
            if isinstance(parsed, list):
                text = "".join(_fragment_text(fragment) for fragment in parsed)

    text = _BR_TAG.sub("\n", text)
    return _SQL_MARKER.sub("", text, count=1)


def normalize_json_mapping(raw: Optional[str]) -> Optional[str]:
    """Clean a stored data-layer mapping, pretty-printing it when it is valid JSON."""
    if not raw:
        return raw

    trimmed = raw.strip()
    if _looks_like(trimmed, "{}", "[]"):
        try:
            parsed = json.loads(trimmed)
        except ValueError:
            logger.debug("Mapping field looked like JSON but did not parse")
        else:
            return json.dumps(parsed, indent=2, ensure_ascii=False)

    text = _BR_TAG.sub("\n", raw)
    return _JSON_MARKER.sub("", text, count=1)


_NORMALIZERS = {
    SQL: normalize_sql_query,
    JSON: normalize_json_mapping,
}


def normalize(raw: Optional[str], kind: str) -> Optional[str]:
    """Normalize a legacy field of the given kind ("sql" or "json")."""
    if kind not in _NORMALIZERS:
        raise ValueError(f"Unknown legacy field kind '{kind}', expected 'sql' or 'json'")
    return _NORMALIZERS[kind](raw)


def normalize_entity_for_display(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of a record with its SQL and mapping fields cleaned for read-only rendering."""
    cleaned = dict(record)
    for field in SQL_FIELDS:
        if isinstance(cleaned.get(field), str):
            cleaned[field] = normalize_sql_query(cleaned[field])
    for field in JSON_MAPPING_FIELDS:
        if isinstance(cleaned.get(field), str):
            cleaned[field] = normalize_json_mapping(cleaned[field])
    return cleaned
