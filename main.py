"""
FastAPI application for the OpenKPIs catalog core.
Exposes the edit-form projection, legacy field cleanup and draft editing
over a small REST API.
"""

from fastapi import FastAPI, HTTPException, Depends, Header
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, Literal
import uvicorn
import logging
import time
from datetime import datetime

from kpi_catalog.models import CatalogUser, EntityKind
from kpi_catalog.catalog import seed_store
from kpi_catalog.options import OPTION_TABLE
from entity_forms.field_configs import ENTITY_FORM_CONFIGS, get_entity_form_config
from entity_forms.projector import to_form_data, to_persisted_patch
from legacy_fields.text_normalizer import normalize, normalize_entity_for_display
from database.store import (
    CatalogError, EditNotAllowedError, EntityNotFoundError, EntityStateError, EntityStore
)
from config import APP_CONFIG, CATALOG_CONFIG, FEATURE_FLAGS, LOG_CONFIG


# Configure logging
_handlers = [logging.StreamHandler()]
if LOG_CONFIG["file"]:
    _handlers.append(logging.FileHandler(LOG_CONFIG["file"]))

logging.basicConfig(
    level=LOG_CONFIG["level"],
    format=LOG_CONFIG["format"],
    handlers=_handlers
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=APP_CONFIG["name"],
    description="Catalog core for KPIs, Metrics, Dimensions, Events and Dashboards",
    version=APP_CONFIG["version"],
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if APP_CONFIG["debug"] else APP_CONFIG["allowed_origins"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Execution-Time"]
)

# Initialize services
entity_store = EntityStore(
    admin_ids=CATALOG_CONFIG["admin_user_ids"],
    editor_ids=CATALOG_CONFIG["editor_user_ids"]
)
if CATALOG_CONFIG["seed_sample_data"]:
    seed_store(entity_store)


class ItemWriteRequest(BaseModel):
    """Body of create/update calls: the flat form record."""
    data: Dict[str, Any] = Field(default_factory=dict, description="Form record")


class NormalizeRequest(BaseModel):
    raw: Optional[str] = Field(None, description="Stored field value")
    kind: Literal["sql", "json"] = Field(..., description="Legacy field kind")


def get_store() -> EntityStore:
    return entity_store


async def current_user(x_user: Optional[str] = Header(None, alias="X-User")) -> Optional[CatalogUser]:
    """The auth layer in front of us forwards the contributor handle."""
    if not x_user or not x_user.strip():
        return None
    handle = x_user.strip()
    return CatalogUser(id=handle, user_name=handle)


async def require_user(user: Optional[CatalogUser] = Depends(current_user)) -> CatalogUser:
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required. Use X-User header.")
    return user


def _resolve_kind(kind: str) -> EntityKind:
    try:
        return EntityKind.coerce(kind)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _store_error(exc: CatalogError) -> HTTPException:
    if isinstance(exc, EntityNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, EditNotAllowedError):
        return HTTPException(status_code=403, detail=str(exc))
    if isinstance(exc, EntityStateError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


# Middleware to add request ID and timing
@app.middleware("http")
async def add_process_time_header(request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Execution-Time"] = str(round(process_time * 1000, 2))
    response.headers["X-Request-ID"] = f"req_{int(start_time * 1000)}"
    return response


@app.get("/health")
async def health_check(store: EntityStore = Depends(get_store)):
    """Health check with catalog stats."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": APP_CONFIG["version"],
        "components": {
            "store": {"status": "healthy", "tables": store.stats()},
            "form_configs": {"status": "healthy", "kinds": len(ENTITY_FORM_CONFIGS)},
        }
    }


@app.get("/options")
async def list_options():
    """Allowed values of every select field."""
    return {"success": True, "options": {name: list(values) for name, values in OPTION_TABLE.items()}}


@app.get("/form-configs/{kind}")
async def get_form_config(kind: str):
    """Tabs and visible fields of one entity kind's edit form."""
    config = get_entity_form_config(_resolve_kind(kind))
    return {
        "success": True,
        "entity_kind": config.entity_kind.value,
        "entity_name": config.entity_name,
        "tabs": list(config.tabs),
        "fields": [field.model_dump(mode="json", exclude={"kinds"}) for field in config.fields],
    }


@app.get("/items/{kind}/{entity_id}/form")
async def get_item_form(kind: str, entity_id: str, store: EntityStore = Depends(get_store)):
    """Stored record projected into its edit form."""
    entity_kind = _resolve_kind(kind)
    try:
        record = store.get(entity_kind, entity_id)
    except CatalogError as e:
        raise _store_error(e)

    return {
        "success": True,
        "id": record["id"],
        "slug": record.get("slug"),
        "form": to_form_data(record, entity_kind),
    }


@app.get("/items/{kind}/{entity_id}/display")
async def get_item_display(
    kind: str,
    entity_id: str,
    store: EntityStore = Depends(get_store),
    user: Optional[CatalogUser] = Depends(current_user)
):
    """Stored record with legacy SQL and mapping fields cleaned for reading."""
    entity_kind = _resolve_kind(kind)
    try:
        record = store.get(entity_kind, entity_id)
    except CatalogError as e:
        raise _store_error(e)

    return {
        "success": True,
        "item": normalize_entity_for_display(record),
        "can_edit": store.can_edit(record, user),
    }


@app.post("/items/{kind}")
async def create_item(
    kind: str,
    request: ItemWriteRequest,
    store: EntityStore = Depends(get_store),
    user: CatalogUser = Depends(require_user)
):
    """Create a new draft from a form record."""
    entity_kind = _resolve_kind(kind)
    patch = to_persisted_patch(request.data, entity_kind)
    try:
        record = store.create(entity_kind, patch, user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "item": record}


@app.put("/items/{kind}/{entity_id}")
async def update_item(
    kind: str,
    entity_id: str,
    request: ItemWriteRequest,
    store: EntityStore = Depends(get_store),
    user: CatalogUser = Depends(require_user)
):
    """Save an edited form record. The entity goes back to draft."""
    entity_kind = _resolve_kind(kind)
    patch = to_persisted_patch(request.data, entity_kind)
    try:
        record = store.update(entity_kind, entity_id, patch, user)
    except CatalogError as e:
        raise _store_error(e)

    return {"success": True, "item": record}


@app.post("/items/{kind}/{entity_id}/create-draft")
async def create_draft(
    kind: str,
    entity_id: str,
    store: EntityStore = Depends(get_store),
    user: CatalogUser = Depends(require_user)
):
    """Copy a published entity into a draft the caller can edit."""
    if not FEATURE_FLAGS["enable_draft_copies"]:
        raise HTTPException(status_code=404, detail="Draft copies are disabled")

    entity_kind = _resolve_kind(kind)
    try:
        draft, is_new = store.create_draft_from_published(entity_kind, entity_id, user)
    except CatalogError as e:
        raise _store_error(e)

    return {
        "success": True,
        "draft_id": draft["id"],
        "slug": draft.get("slug"),
        "is_new": is_new,
        "message": "Draft created successfully" if is_new else "Draft already exists for this item",
    }


@app.post("/normalize")
async def normalize_field(request: NormalizeRequest):
    """Preview the display cleanup of a legacy SQL or JSON field."""
    return {
        "success": True,
        "kind": request.kind,
        "normalized": normalize(request.raw, request.kind),
    }


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "path": request.url.path,
            "method": request.method,
            "request_id": request.headers.get("X-Request-ID", "unknown")
        }
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request, exc):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    error_detail = str(exc) if APP_CONFIG["debug"] else "Internal server error"

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": error_detail,
            "path": request.url.path,
            "method": request.method,
            "request_id": request.headers.get("X-Request-ID", "unknown")
        }
    )


@app.on_event("startup")
async def startup_event():
    """Log catalog stats on startup."""
    logger.info(f"Starting {APP_CONFIG['name']} v{APP_CONFIG['version']}...")
    logger.info(f"Catalog loaded: {entity_store.stats()}")


# Main entry point
if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=APP_CONFIG["host"],
        port=APP_CONFIG["port"],
        reload=APP_CONFIG["debug"],
        log_level="debug" if APP_CONFIG["debug"] else "info",
        access_log=True
    )
