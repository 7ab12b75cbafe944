"""
Database package - in-memory entity storage and edit authorization.
"""

from database.store import (
    CatalogError,
    EntityNotFoundError,
    EditNotAllowedError,
    EntityStateError,
    EntityStore,
    can_edit,
    generate_slug
)

__all__ = [
    'CatalogError',
    'EntityNotFoundError',
    'EditNotAllowedError',
    'EntityStateError',
    'EntityStore',
    'can_edit',
    'generate_slug'
]

__version__ = "1.0.0"
