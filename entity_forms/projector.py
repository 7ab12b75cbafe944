"""
Projection between stored catalog records and flat edit-form records.

Read path: a stored record (any kind) becomes a flat dict of editable values
with every field in its canonical editing shape, plus the decoded dependency
graph. Write path: the edited dict becomes a patch for the storage layer with
the dependency graph serialized back to JSON.

Neither direction raises on bad data; missing or malformed values become the
zero value for their field type.
"""

import json
import logging
from typing import Any, Dict, Mapping, Union

from kpi_catalog.models import CatalogEntity, EntityKind
from entity_forms.dependencies import decode, encode, is_well_formed
from entity_forms.field_configs import FieldConfig, FieldType, get_entity_form_config
from legacy_fields.string_lists import join_semicolon_list, to_boolean, to_string_array, to_text

logger = logging.getLogger(__name__)

DEPENDENCIES = "dependencies"
DEPENDENCIES_DATA = "dependencies_data"

SHARED_FIELDS = ("name", "description", "category", "tags")


def _as_mapping(entity: Union[CatalogEntity, Mapping[str, Any], None]) -> Mapping[str, Any]:
    if entity is None:
        return {}
    if isinstance(entity, CatalogEntity):
        return entity.to_record()
    return entity


def _first_text(value: Any) -> str:
    """Select inputs hold one value; legacy rows sometimes stored a list."""
    if isinstance(value, (list, tuple)):
        return next((item for item in value if isinstance(item, str)), "")
    return to_text(value)


def _raw_dependencies(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        # JSONB columns can come back already parsed
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return ""


def _project_field(field: FieldConfig, value: Any) -> Dict[str, Any]:
    if field.type == FieldType.TAGS:
        return {field.name: to_string_array(value)}
    if field.type == FieldType.SEMICOLON_LIST:
        return {field.name: join_semicolon_list(value)}
    if field.type == FieldType.CHECKBOX:
        return {field.name: to_boolean(value)}
    if field.type == FieldType.SELECT:
        return {field.name: _first_text(value)}
    if field.type == FieldType.DEPENDENCIES:
        raw = _raw_dependencies(value)
        return {field.name: raw, DEPENDENCIES_DATA: decode(raw)}
    return {field.name: to_text(value)}


def to_form_data(entity: Union[CatalogEntity, Mapping[str, Any], None],
                 kind: Union[EntityKind, str]) -> Dict[str, Any]:
    """Project a stored record into the flat form record for ``kind``."""
    config = get_entity_form_config(kind)
    record = _as_mapping(entity)

    form: Dict[str, Any] = {
        "name": to_text(record.get("name")),
        "description": to_text(record.get("description")),
        "category": _first_text(record.get("category")),
        "tags": to_string_array(record.get("tags")),
    }

    for field in config.fields:
        if field.name in SHARED_FIELDS:
            continue
        form.update(_project_field(field, record.get(field.name)))

    # Editorial status is carried along untouched
    if "status" in record:
        form["status"] = record["status"]

    return form


def _dependencies_json(raw: Any, graph: Any) -> str:
    """
    Serialize the working graph. An unedited graph keeps the stored string
    so that a save without edits does not rewrite it.
    """
    if isinstance(raw, str) and is_well_formed(raw) and decode(raw) == graph:
        return raw
    if not isinstance(graph, Mapping):
        logger.debug("Working dependency graph is not a mapping, saving it empty")
        graph = {}
    return encode(graph)


def to_persisted_patch(form: Mapping[str, Any], kind: Union[EntityKind, str]) -> Dict[str, Any]:
    """Turn an edited form record back into a patch for the storage layer."""
    config = get_entity_form_config(kind)

    patch = {key: value for key, value in form.items() if key != DEPENDENCIES_DATA}

    if DEPENDENCIES in config.field_names:
        if DEPENDENCIES_DATA in form:
            patch[DEPENDENCIES] = _dependencies_json(form.get(DEPENDENCIES), form[DEPENDENCIES_DATA])
    else:
        patch.pop(DEPENDENCIES, None)

    return patch
