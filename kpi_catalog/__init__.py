"""
Catalog package - entity kinds, records and the allowed option values.
"""

from kpi_catalog.models import (
    EntityKind,
    EntityStatus,
    CatalogUser,
    CatalogEntity
)

from kpi_catalog.options import (
    CATEGORIES,
    INDUSTRIES,
    PRIORITIES,
    KPI_TYPES,
    DATA_TYPES,
    EVENT_TYPES,
    SCOPES,
    DATA_SENSITIVITY,
    OPTION_TABLE
)

from kpi_catalog.catalog import create_sample_entities, seed_store

__all__ = [
    'EntityKind',
    'EntityStatus',
    'CatalogUser',
    'CatalogEntity',
    'CATEGORIES',
    'INDUSTRIES',
    'PRIORITIES',
    'KPI_TYPES',
    'DATA_TYPES',
    'EVENT_TYPES',
    'SCOPES',
    'DATA_SENSITIVITY',
    'OPTION_TABLE',
    'create_sample_entities',
    'seed_store'
]

__version__ = "1.0.0"
