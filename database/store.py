"""
In-memory entity store.
Stands in for the hosted Postgres tables: one table per entity kind, rows
keyed by id. All access goes through a lock because API requests are served
concurrently.
"""

import copy
import logging
import re
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from kpi_catalog.models import CatalogEntity, CatalogUser, EntityKind, EntityStatus
from entity_forms.payloads import build_update_payload
from legacy_fields.string_lists import to_text


class CatalogError(Exception):
    """Base class for store errors."""


class EntityNotFoundError(CatalogError):
    pass


class EditNotAllowedError(CatalogError):
    pass


class EntityStateError(CatalogError):
    """The entity is not in a status that allows the operation."""


# Cleared whenever a published entity is copied into a new draft
_DRAFT_RESET_FIELDS = (
    "github_commit_sha",
    "github_pr_number",
    "github_pr_url",
    "github_file_path",
)

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def generate_slug(name: str) -> str:
    """'Add to Cart Rate' -> 'add-to-cart-rate'"""
    return _NON_SLUG_CHARS.sub("-", (name or "").lower()).strip("-")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def can_edit(
    entity: Mapping[str, Any],
    user: Optional[CatalogUser],
    admin_ids: Iterable[str] = (),
    editor_ids: Iterable[str] = (),
) -> bool:
    """
    Admins and editors may edit anything. Everyone else may only edit
    entities they created.
    """
    if user is None:
        return False

    privileged = set(admin_ids) | set(editor_ids)
    if user.handle in privileged or user.id in privileged:
        return True

    owner = entity.get("created_by")
    return bool(owner) and owner == user.handle


class EntityStore:
    """Keyed record storage for every catalog kind."""

    def __init__(self, admin_ids: Iterable[str] = (), editor_ids: Iterable[str] = ()):
        self.admin_ids = list(admin_ids)
        self.editor_ids = list(editor_ids)
        self._tables: Dict[EntityKind, Dict[str, Dict[str, Any]]] = {kind: {} for kind in EntityKind}
        self._lock = threading.RLock()
        self.logger = logging.getLogger(__name__)

    def _table(self, kind: Union[EntityKind, str]) -> Dict[str, Dict[str, Any]]:
        return self._tables[EntityKind.coerce(kind)]

    def _unique_slug(self, kind: EntityKind, base: str) -> str:
        taken = {row.get("slug") for row in self._tables[kind].values()}
        slug = base or "item"
        suffix = 2
        while slug in taken:
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    def can_edit(self, entity: Mapping[str, Any], user: Optional[CatalogUser]) -> bool:
        return can_edit(entity, user, self.admin_ids, self.editor_ids)

    def insert(self, kind: Union[EntityKind, str], record: Mapping[str, Any]) -> Dict[str, Any]:
        """Store a complete record as-is (used for seeding and imports)."""
        kind = EntityKind.coerce(kind)
        row = CatalogEntity(**record).to_record()
        with self._lock:
            self._tables[kind][row["id"]] = row
        return copy.deepcopy(row)

    def create(self, kind: Union[EntityKind, str], data: Mapping[str, Any], user: CatalogUser) -> Dict[str, Any]:
        """Create a new draft owned by ``user``."""
        kind = EntityKind.coerce(kind)
        name = to_text(data.get("name")).strip()
        if not name:
            raise ValueError("Name is required")

        timestamp = _now()
        with self._lock:
            record = build_update_payload(kind, data, user.handle)
            record.update({
                "id": str(uuid.uuid4()),
                "name": name,
                "slug": self._unique_slug(kind, generate_slug(to_text(data.get("slug")) or name)),
                "status": EntityStatus.DRAFT.value,
                "created_by": user.handle,
                "created_at": timestamp,
                "last_modified_by": user.handle,
                "last_modified_at": timestamp,
            })
            row = self.insert(kind, record)

        self.logger.info(f"Created {kind.value} draft '{row['slug']}' for {user.handle}")
        return row

    def get(self, kind: Union[EntityKind, str], entity_id: str) -> Dict[str, Any]:
        with self._lock:
            row = self._table(kind).get(entity_id)
            if row is None:
                raise EntityNotFoundError(f"{EntityKind.coerce(kind).display_name} '{entity_id}' not found")
            return copy.deepcopy(row)

    def get_by_slug(self, kind: Union[EntityKind, str], slug: str,
                    status: Optional[EntityStatus] = None) -> Dict[str, Any]:
        """
        A published entity and its draft copy share a slug; without a status
        filter the published one wins.
        """
        with self._lock:
            matches = [row for row in self._table(kind).values() if row.get("slug") == slug]
        if status is not None:
            matches = [row for row in matches if row.get("status") == EntityStatus(status).value]
        if not matches:
            raise EntityNotFoundError(f"{EntityKind.coerce(kind).display_name} with slug '{slug}' not found")

        matches.sort(key=lambda row: row.get("status") != EntityStatus.PUBLISHED.value)
        return copy.deepcopy(matches[0])

    def list(self, kind: Union[EntityKind, str], status: Optional[EntityStatus] = None) -> List[Dict[str, Any]]:
        with self._lock:
            rows = [copy.deepcopy(row) for row in self._table(kind).values()]
        if status is not None:
            rows = [row for row in rows if row.get("status") == EntityStatus(status).value]
        return sorted(rows, key=lambda row: row.get("slug") or "")

    def update(self, kind: Union[EntityKind, str], entity_id: str,
               patch: Mapping[str, Any], user: CatalogUser) -> Dict[str, Any]:
        """Apply an edited form patch; the entity becomes a draft again."""
        kind = EntityKind.coerce(kind)
        with self._lock:
            current = self.get(kind, entity_id)
            if not self.can_edit(current, user):
                raise EditNotAllowedError(
                    f"{user.handle} is not allowed to edit {kind.display_name} '{current.get('slug')}'"
                )

            payload = build_update_payload(kind, patch, user.handle)
            current.update(payload)
            self._tables[kind][entity_id] = current

        self.logger.info(f"Updated {kind.value} '{current.get('slug')}' ({len(payload)} fields) by {user.handle}")
        return copy.deepcopy(current)

    def create_draft_from_published(self, kind: Union[EntityKind, str], entity_id: str,
                                    user: CatalogUser) -> Tuple[Dict[str, Any], bool]:
        """
        Copy a published entity into a new draft owned by ``user``.
        Returns the draft and whether it was newly created; an existing draft
        for the same slug is returned instead of making a second one.
        """
        kind = EntityKind.coerce(kind)
        with self._lock:
            published = self.get(kind, entity_id)
            if published.get("status") != EntityStatus.PUBLISHED.value:
                raise EntityStateError(
                    "Item is not published. Only published items can be copied into a draft."
                )

            for row in self._tables[kind].values():
                if row.get("slug") == published.get("slug") and row.get("status") == EntityStatus.DRAFT.value:
                    self.logger.info(f"Draft already exists for {kind.value} '{row['slug']}'")
                    return copy.deepcopy(row), False

            timestamp = _now()
            draft = dict(published)
            draft.update({field: None for field in _DRAFT_RESET_FIELDS})
            draft.update({
                "id": str(uuid.uuid4()),
                "status": EntityStatus.DRAFT.value,
                "created_by": user.handle,
                "created_at": timestamp,
                "last_modified_by": user.handle,
                "last_modified_at": timestamp,
            })
            row = self.insert(kind, draft)

        self.logger.info(f"Created draft copy of {kind.value} '{row['slug']}' for {user.handle}")
        return row, True

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {kind.table_name: len(rows) for kind, rows in self._tables.items()}
