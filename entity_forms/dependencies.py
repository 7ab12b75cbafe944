"""
Dependency graph codec.

Every catalog entity carries a ``dependencies`` text column holding a JSON
object with four lists of referenced names: Events, Metrics, Dimensions and
KPIs. Stored values predate any schema, so decoding is forgiving and always
hands back the full four-key structure.
"""

import json
import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEPENDENCY_CATEGORIES = ("Events", "Metrics", "Dimensions", "KPIs")

DependencyGraph = Dict[str, List[Any]]


def empty_graph() -> DependencyGraph:
    return {category: [] for category in DEPENDENCY_CATEGORIES}


def _parse(raw: Optional[str]) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Ignoring malformed dependencies JSON: %r", raw)
        return None


def decode(raw: Optional[str]) -> DependencyGraph:
    """Decode a stored dependencies string. Never raises."""
    parsed = _parse(raw)
    if not isinstance(parsed, dict):
        return empty_graph()

    return {
        category: list(parsed[category]) if isinstance(parsed.get(category), list) else []
        for category in DEPENDENCY_CATEGORIES
    }


def encode(graph: DependencyGraph) -> str:
    """
    Serialize the four categories, in fixed order, as compact JSON.
    A category that is not a list is written empty.
    """
    payload = {
        category: list(graph[category]) if isinstance(graph.get(category), list) else []
        for category in DEPENDENCY_CATEGORIES
    }
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def is_well_formed(raw: Optional[str]) -> bool:
    """True when the stored string already holds all four categories as lists."""
    parsed = _parse(raw)
    return isinstance(parsed, dict) and all(
        isinstance(parsed.get(category), list) for category in DEPENDENCY_CATEGORIES
    )


def _check_category(category: str) -> None:
    if category not in DEPENDENCY_CATEGORIES:
        raise ValueError(
            f"Unknown dependency category '{category}', "
            f"expected one of {', '.join(DEPENDENCY_CATEGORIES)}"
        )


def add_item(graph: DependencyGraph, category: str, value: str) -> DependencyGraph:
    """
    Return a copy of ``graph`` with ``value`` appended to ``category``.
    Blank values and values already listed (exact match) leave it unchanged.
    """
    _check_category(category)
    updated = {key: list(graph.get(key) or []) for key in DEPENDENCY_CATEGORIES}

    item = (value or "").strip()
    if not item or item in updated[category]:
        return updated

    updated[category].append(item)
    return updated


def remove_item(graph: DependencyGraph, category: str, value: str) -> DependencyGraph:
    """Return a copy of ``graph`` without ``value`` in ``category``."""
    _check_category(category)
    updated = {key: list(graph.get(key) or []) for key in DEPENDENCY_CATEGORIES}
    updated[category] = [item for item in updated[category] if item != value]
    return updated
