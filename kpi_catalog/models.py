"""
Catalog Models
Defines the catalog entities (KPIs, Metrics, Dimensions, Events, Dashboards)
as the storage layer hands them to us.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum

from legacy_fields.string_lists import to_string_array


class EntityKind(str, Enum):
    """The five catalog record types."""
    KPI = "kpi"
    METRIC = "metric"
    DIMENSION = "dimension"
    EVENT = "event"
    DASHBOARD = "dashboard"

    @classmethod
    def coerce(cls, kind: Any) -> "EntityKind":
        """Resolve a kind tag, rejecting anything outside the closed set."""
        if isinstance(kind, cls):
            return kind
        try:
            return cls(str(kind).lower())
        except ValueError:
            raise ValueError(f"Unsupported entity kind: {kind}") from None

    @property
    def table_name(self) -> str:
        """Plural table name used by the storage layer."""
        return f"{self.value}s"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    EntityKind.KPI: "KPI",
    EntityKind.METRIC: "Metric",
    EntityKind.DIMENSION: "Dimension",
    EntityKind.EVENT: "Event",
    EntityKind.DASHBOARD: "Dashboard",
}


class EntityStatus(str, Enum):
    """Editorial visibility status."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
    REJECTED = "rejected"


class CatalogUser(BaseModel):
    """An authenticated contributor, as supplied by the auth provider."""
    id: str = Field(..., description="Auth principal id")
    user_name: Optional[str] = Field(None, description="GitHub login, if known")
    email: Optional[str] = Field(None, description="Primary email")

    @property
    def handle(self) -> str:
        """Name recorded in created_by / last_modified_by."""
        return self.user_name or self.email or self.id


class CatalogEntity(BaseModel):
    """
    A catalog record of any kind.
    Only identity, lifecycle and the shared fields are declared here; every
    other attribute (platform mappings, SQL, governance flags, relationship
    lists) is kept as an extra field exactly as the storage layer sent it.
    """
    model_config = ConfigDict(extra="allow", use_enum_values=True)

    id: str = Field(..., description="Stable identifier")
    slug: str = Field(..., description="URL-facing name, unique per kind")
    name: Optional[str] = Field(None, description="Human-readable name")
    description: Optional[str] = Field(None, description="Short definition")
    category: Optional[str] = Field(None, description="One of the catalog categories")
    tags: List[str] = Field(default_factory=list)

    status: EntityStatus = Field(EntityStatus.DRAFT, validate_default=True, description="Editorial status")
    created_by: Optional[str] = Field(None, description="Handle of the contributor")
    created_at: Optional[str] = Field(None, description="ISO-8601 creation time")
    last_modified_by: Optional[str] = Field(None)
    last_modified_at: Optional[str] = Field(None)

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v):
        """Legacy rows store tags as a bare string or a JSON string."""
        return to_string_array(v)

    def to_record(self) -> Dict[str, Any]:
        """Flat dict including the extra fields."""
        return self.model_dump()
