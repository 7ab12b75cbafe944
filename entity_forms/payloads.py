"""
Build the update payload written to storage from an edited form patch.
Every save turns the entity back into a draft and stamps the editor.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union

from kpi_catalog.models import EntityKind, EntityStatus
from entity_forms.field_configs import FieldType, get_entity_form_config
from legacy_fields.string_lists import join_semicolon_list, semicolon_to_array, to_boolean, to_string_array, to_text

# Select fields stored as arrays for some kinds
ARRAY_SELECT_FIELDS = {
    (EntityKind.KPI, "industry"),
}

# Relationship lists stored as their joined text for some kinds
TEXT_LIST_FIELDS = {
    (EntityKind.KPI, "dashboard_usage"),
}


def _coerce(kind: EntityKind, field_name: str, field_type: FieldType, value: Any) -> Any:
    if field_type == FieldType.TAGS:
        return to_string_array(value)
    if (kind, field_name) in TEXT_LIST_FIELDS:
        return join_semicolon_list(value)
    if field_type == FieldType.SEMICOLON_LIST:
        return semicolon_to_array(value)
    if field_type == FieldType.CHECKBOX:
        return to_boolean(value)
    if (kind, field_name) in ARRAY_SELECT_FIELDS:
        return to_string_array(value)
    return to_text(value)


def build_update_payload(
    kind: Union[EntityKind, str],
    data: Mapping[str, Any],
    user_handle: str,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Coerce the fields of ``data`` that the kind's form knows about into their
    stored shape. Fields absent from ``data`` are left out so a partial patch
    never blanks stored values.
    """
    kind = EntityKind.coerce(kind)
    config = get_entity_form_config(kind)
    now = now or datetime.now(timezone.utc)

    payload: Dict[str, Any] = {}
    for field in config.fields:
        if field.name in data:
            payload[field.name] = _coerce(kind, field.name, field.type, data[field.name])

    payload["status"] = EntityStatus.DRAFT.value
    payload["last_modified_by"] = user_handle
    payload["last_modified_at"] = now.isoformat()
    return payload
