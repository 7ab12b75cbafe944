"""
Entity form field configuration.
One table drives the edit form of every entity kind: which fields exist,
which tab they live on, what input they use and which kinds they apply to.
Per-kind configs are resolved once, at import.
"""

from typing import Dict, FrozenSet, List, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum

from kpi_catalog.models import EntityKind
from kpi_catalog.options import (
    CATEGORIES, INDUSTRIES, PRIORITIES, KPI_TYPES, DATA_TYPES,
    EVENT_TYPES, SCOPES, DATA_SENSITIVITY,
)


class FieldType(str, Enum):
    """Input widget used to edit a field."""
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    TAGS = "tags"
    DEPENDENCIES = "dependencies"
    SEMICOLON_LIST = "semicolon-list"


TAB_TITLES = (
    "Basic Info",
    "Business Context",
    "Technical",
    "Platform Events",
    "Data Mappings",
    "SQL",
    "Documentation",
)


class FieldConfig(BaseModel):
    """A single editable field."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Record attribute edited by this field")
    type: FieldType = Field(..., description="Input widget")
    label: str = Field(..., description="Form label")
    tab: int = Field(0, ge=0, description="Index of the tab the field is shown on")
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[Tuple[str, ...]] = None
    rows: Optional[int] = None
    monospace: bool = False

    # Kinds this field applies to; None means every kind
    kinds: Optional[FrozenSet[EntityKind]] = None


def should_show_field(field: FieldConfig, kind: Union[EntityKind, str]) -> bool:
    """A field without an applicability set is always shown."""
    if field.kinds is None:
        return True
    return EntityKind.coerce(kind) in field.kinds


def _kinds(*kinds: EntityKind) -> FrozenSet[EntityKind]:
    return frozenset(kinds)


_K = EntityKind
_CATALOG_KINDS = _kinds(_K.KPI, _K.METRIC, _K.DIMENSION, _K.EVENT)


FIELD_DEFINITIONS: Tuple[FieldConfig, ...] = (
    # Tab 0: Basic Info
    FieldConfig(name="name", type=FieldType.TEXT, label="Name", tab=0, required=True,
                placeholder="Name"),
    FieldConfig(name="description", type=FieldType.TEXTAREA, label="Description", tab=0,
                placeholder="Short definition and context", rows=4),
    FieldConfig(name="formula", type=FieldType.TEXT, label="Formula", tab=0,
                placeholder="Calculation logic in plain text", monospace=True,
                kinds=_kinds(_K.KPI, _K.METRIC, _K.DIMENSION)),
    FieldConfig(name="event_serialization", type=FieldType.TEXT, label="Event Serialization", tab=0,
                placeholder="Event serialization format", kinds=_kinds(_K.EVENT)),
    FieldConfig(name="category", type=FieldType.SELECT, label="Category", tab=0,
                options=CATEGORIES),
    FieldConfig(name="tags", type=FieldType.TAGS, label="Tags", tab=0,
                placeholder="Free-form labels (e.g., Engagement, Retail, Checkout)"),

    # Tab 1: Business Context
    FieldConfig(name="industry", type=FieldType.SELECT, label="Industry", tab=1, options=INDUSTRIES),
    FieldConfig(name="priority", type=FieldType.SELECT, label="Priority", tab=1, options=PRIORITIES),
    FieldConfig(name="core_area", type=FieldType.TEXT, label="Core Area", tab=1,
                placeholder="e.g. Digital Analytics, Business Intelligence, Data Science & AI"),
    FieldConfig(name="scope", type=FieldType.SELECT, label="Scope", tab=1, options=SCOPES),
    FieldConfig(name="related_kpis", type=FieldType.SEMICOLON_LIST, label="Related KPIs", tab=1,
                placeholder="Enter KPIs separated by semicolons (e.g., add-to-cart;order;revenue)",
                kinds=_kinds(_K.KPI)),
    FieldConfig(name="related_metrics", type=FieldType.SEMICOLON_LIST, label="Related Metrics", tab=1,
                placeholder="Enter metrics separated by semicolons", kinds=_kinds(_K.METRIC)),
    FieldConfig(name="related_dimensions", type=FieldType.SEMICOLON_LIST, label="Related Dimensions", tab=1,
                placeholder="Enter dimensions separated by semicolons",
                kinds=_kinds(_K.DIMENSION, _K.EVENT)),
    FieldConfig(name="derived_dimensions", type=FieldType.SEMICOLON_LIST, label="Derived Dimensions", tab=1,
                placeholder="Enter dimensions separated by semicolons",
                kinds=_kinds(_K.DIMENSION, _K.EVENT)),
    FieldConfig(name="derived_metrics", type=FieldType.SEMICOLON_LIST, label="Derived Metrics", tab=1,
                placeholder="Enter metrics separated by semicolons", kinds=_kinds(_K.EVENT)),
    FieldConfig(name="derived_kpis", type=FieldType.SEMICOLON_LIST, label="Derived KPIs", tab=1,
                placeholder="Enter KPIs separated by semicolons", kinds=_kinds(_K.METRIC, _K.EVENT)),
    FieldConfig(name="source_data", type=FieldType.TEXT, label="Source Data", tab=1,
                placeholder="Digital Analytics, Business Intelligence, ERP, CRM etc."),
    FieldConfig(name="dependencies", type=FieldType.DEPENDENCIES, label="Dependencies", tab=1),
    FieldConfig(name="report_attributes", type=FieldType.TEXTAREA, label="Report Attributes", tab=1,
                placeholder="Attributes in GA4/Adobe reports (Dimensions, Metrics, KPIs etc.)", rows=4),
    FieldConfig(name="dashboard_usage", type=FieldType.SEMICOLON_LIST, label="Dashboard Usage", tab=1,
                placeholder="Enter dashboards separated by semicolons (e.g., C-Suite;Merchandising)"),
    FieldConfig(name="segment_eligibility", type=FieldType.TEXTAREA, label="Segment Eligibility", tab=1,
                placeholder="Whether entity can be used in segmentation (True/False)", rows=4),
    FieldConfig(name="data_sensitivity", type=FieldType.SELECT, label="Data Sensitivity", tab=1,
                options=DATA_SENSITIVITY),
    FieldConfig(name="pii_flag", type=FieldType.CHECKBOX,
                label="Contains PII (Personally Identifiable Information)", tab=1),

    # Tab 2: Technical
    FieldConfig(name="measure_type", type=FieldType.SELECT, label="Measure Type", tab=2,
                options=KPI_TYPES, kinds=_kinds(_K.KPI, _K.METRIC)),
    FieldConfig(name="data_type", type=FieldType.SELECT, label="Data Type", tab=2,
                options=DATA_TYPES, kinds=_kinds(_K.DIMENSION)),
    FieldConfig(name="event_type", type=FieldType.SELECT, label="Event Type", tab=2,
                options=EVENT_TYPES, kinds=_kinds(_K.EVENT)),
    FieldConfig(name="aggregation_window", type=FieldType.TEXT, label="Aggregation Window", tab=2,
                placeholder="Event, Session, User, or time based (Hourly/Daily/Monthly/Yearly)"),

    # Tab 3: Platform Events
    FieldConfig(name="ga4_event", type=FieldType.TEXTAREA, label="GA4 Event", tab=3,
                placeholder="Google Analytics 4 event name", rows=6, monospace=True),
    FieldConfig(name="adobe_event", type=FieldType.TEXTAREA, label="Adobe Event", tab=3,
                placeholder="Adobe Analytics event name", rows=6, monospace=True),
    FieldConfig(name="parameters", type=FieldType.TEXTAREA, label="Parameters", tab=3,
                placeholder="key/value attributes expected with the event (e.g., item_id, currency, value)",
                rows=8, kinds=_kinds(_K.EVENT)),

    # Tab 4: Data Mappings
    FieldConfig(name="w3_data_layer", type=FieldType.TEXTAREA, label="W3 Data Layer", tab=4,
                placeholder="W3C Data Layer mapping (JSON format)", rows=8, monospace=True),
    FieldConfig(name="ga4_data_layer", type=FieldType.TEXTAREA, label="GA4 Data Layer", tab=4,
                placeholder="GA4 Data Layer mapping (JSON format)", rows=8, monospace=True),
    FieldConfig(name="adobe_client_data_layer", type=FieldType.TEXTAREA, label="Adobe Client Data Layer", tab=4,
                placeholder="Adobe Client Data Layer mapping (JSON format)", rows=8, monospace=True),
    FieldConfig(name="xdm_mapping", type=FieldType.TEXTAREA, label="XDM Mapping", tab=4,
                placeholder="AEP XDM schema", rows=8, monospace=True),

    # Tab 5: SQL (Events have none)
    FieldConfig(name="sql_query", type=FieldType.TEXTAREA, label="SQL Query", tab=5,
                placeholder="Standard SQL query", rows=15, monospace=True,
                kinds=_kinds(_K.KPI, _K.METRIC, _K.DIMENSION)),

    # Tab 6: Documentation
    FieldConfig(name="calculation_notes", type=FieldType.TEXTAREA, label="Calculation Notes", tab=6,
                placeholder="Specific caveats, or special considerations", rows=8, kinds=_CATALOG_KINDS),
    FieldConfig(name="business_use_case", type=FieldType.TEXTAREA, label="Business Use Case", tab=6,
                placeholder="Describe the business use case", rows=10, kinds=_CATALOG_KINDS),
)

# Dashboards only carry the basic fields
DASHBOARD_FIELDS: Tuple[FieldConfig, ...] = (
    FieldConfig(name="name", type=FieldType.TEXT, label="Name", tab=0, required=True,
                placeholder="Dashboard Name"),
    FieldConfig(name="description", type=FieldType.TEXTAREA, label="Description", tab=0,
                placeholder="Brief description of the Dashboard...", rows=4),
    FieldConfig(name="category", type=FieldType.SELECT, label="Category", tab=0, options=CATEGORIES),
    FieldConfig(name="tags", type=FieldType.TAGS, label="Tags", tab=0, placeholder="Free-form labels"),
)


class EntityFormConfig(BaseModel):
    """Resolved edit form for one entity kind."""
    model_config = ConfigDict(frozen=True)

    entity_kind: EntityKind
    entity_name: str = Field(..., description='Display name: "KPI", "Metric", etc.')
    tabs: Tuple[str, ...]
    fields: Tuple[FieldConfig, ...]

    def api_endpoint(self, entity_id: str) -> str:
        return f"/api/items/{self.entity_kind.value}/{entity_id}"

    def redirect_path(self, slug: str) -> str:
        return f"/{self.entity_kind.table_name}/{slug}"

    def back_path(self, slug: str) -> str:
        return f"/{self.entity_kind.table_name}/{slug}"

    @property
    def field_names(self) -> List[str]:
        return [field.name for field in self.fields]


def _build_config(kind: EntityKind, fields: Tuple[FieldConfig, ...]) -> EntityFormConfig:
    """
    Keep only the fields that apply to ``kind`` and renumber tabs so that
    empty sections (e.g. SQL for Events) disappear.
    """
    visible = [field for field in fields if should_show_field(field, kind)]
    used_tabs = sorted({field.tab for field in visible})
    renumber = {old: new for new, old in enumerate(used_tabs)}

    return EntityFormConfig(
        entity_kind=kind,
        entity_name=kind.display_name,
        tabs=tuple(TAB_TITLES[tab] for tab in used_tabs),
        fields=tuple(field.model_copy(update={"tab": renumber[field.tab]}) for field in visible),
    )


ENTITY_FORM_CONFIGS: Dict[EntityKind, EntityFormConfig] = {
    EntityKind.KPI: _build_config(EntityKind.KPI, FIELD_DEFINITIONS),
    EntityKind.METRIC: _build_config(EntityKind.METRIC, FIELD_DEFINITIONS),
    EntityKind.DIMENSION: _build_config(EntityKind.DIMENSION, FIELD_DEFINITIONS),
    EntityKind.EVENT: _build_config(EntityKind.EVENT, FIELD_DEFINITIONS),
    EntityKind.DASHBOARD: _build_config(EntityKind.DASHBOARD, DASHBOARD_FIELDS),
}


def get_entity_form_config(kind: Union[EntityKind, str]) -> EntityFormConfig:
    """Get the resolved form configuration for an entity kind."""
    return ENTITY_FORM_CONFIGS[EntityKind.coerce(kind)]


def find_field(name: str) -> FieldConfig:
    """Look up a field in the master table by name."""
    for field in FIELD_DEFINITIONS:
        if field.name == name:
            return field
    raise ValueError(f"Field '{name}' not found in form configuration")


def fields_for_tab(config: EntityFormConfig, tab: int) -> List[FieldConfig]:
    """Fields rendered on one tab of a resolved form."""
    return [field for field in config.fields if field.tab == tab]
