"""
Allowed option values for catalog select fields.
Loaded once at import; every consumer references these tuples by value.
"""

from types import MappingProxyType


CATEGORIES = (
    "Conversion", "Revenue", "Engagement", "Retention", "Acquisition",
    "Performance", "Quality", "Efficiency", "Satisfaction", "Growth", "Other",
)
INDUSTRIES = (
    "Retail", "E-commerce", "SaaS", "Healthcare", "Education", "Finance",
    "Media", "Technology", "Manufacturing", "Other",
)
PRIORITIES = ("High", "Medium", "Low")
KPI_TYPES = ("Counter", "Rate", "Ratio", "Percentage", "Average", "Sum")
DATA_TYPES = ("string", "number", "counter", "boolean", "datetime", "array", "list")
EVENT_TYPES = ("standard", "custom")
SCOPES = ("User", "Session", "Event", "Global")
DATA_SENSITIVITY = ("Public", "Internal", "Restricted")


OPTION_TABLE = MappingProxyType({
    "categories": CATEGORIES,
    "industries": INDUSTRIES,
    "priorities": PRIORITIES,
    "kpi_types": KPI_TYPES,
    "data_types": DATA_TYPES,
    "event_types": EVENT_TYPES,
    "scopes": SCOPES,
    "data_sensitivity": DATA_SENSITIVITY,
})
