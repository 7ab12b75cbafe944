"""
Entity form package - schema-driven edit forms for every catalog kind.
Form configuration, record/form projection and the dependency graph codec.
"""

from entity_forms.dependencies import (
    DEPENDENCY_CATEGORIES,
    empty_graph,
    decode,
    encode,
    add_item,
    remove_item
)

from entity_forms.field_configs import (
    FieldType,
    FieldConfig,
    EntityFormConfig,
    FIELD_DEFINITIONS,
    ENTITY_FORM_CONFIGS,
    should_show_field,
    get_entity_form_config,
    find_field,
    fields_for_tab
)

from entity_forms.projector import to_form_data, to_persisted_patch
from entity_forms.payloads import build_update_payload

__all__ = [
    'DEPENDENCY_CATEGORIES',
    'empty_graph',
    'decode',
    'encode',
    'add_item',
    'remove_item',
    'FieldType',
    'FieldConfig',
    'EntityFormConfig',
    'FIELD_DEFINITIONS',
    'ENTITY_FORM_CONFIGS',
    'should_show_field',
    'get_entity_form_config',
    'find_field',
    'fields_for_tab',
    'to_form_data',
    'to_persisted_patch',
    'build_update_payload'
]

__version__ = "1.0.0"
