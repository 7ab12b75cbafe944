"""
Legacy field package - cleanup and coercion of values stored before the
catalog had a strict schema. Nothing in here raises on bad data.
"""

from legacy_fields.text_normalizer import (
    normalize,
    normalize_sql_query,
    normalize_json_mapping,
    normalize_entity_for_display
)

from legacy_fields.string_lists import (
    to_text,
    to_string_array,
    join_semicolon_list,
    semicolon_to_array,
    to_boolean
)

__all__ = [
    'normalize',
    'normalize_sql_query',
    'normalize_json_mapping',
    'normalize_entity_for_display',
    'to_text',
    'to_string_array',
    'join_semicolon_list',
    'semicolon_to_array',
    'to_boolean'
]

__version__ = "1.0.0"
