"""
Sample catalog content.
A handful of entities of every kind, including rows written in the older
storage shapes (semicolon strings, JSON-fragment SQL, <br> markup).
"""

from typing import Any, Dict, List, Tuple

from kpi_catalog.models import EntityKind, EntityStatus


SAMPLE_OWNER = "openkpis-bot"


def create_sample_entities() -> List[Tuple[EntityKind, Dict[str, Any]]]:
    """Build the sample rows, one (kind, record) pair per entity."""
    entities: List[Tuple[EntityKind, Dict[str, Any]]] = []

    # ========== KPIs ==========
    entities.append((EntityKind.KPI, {
        "id": "kpi-conversion-rate",
        "slug": "conversion-rate",
        "name": "Conversion Rate",
        "description": "Share of sessions that end in an order",
        "formula": "orders / sessions",
        "category": "Conversion",
        "tags": ["Checkout", "E-commerce"],
        "industry": ["Retail", "E-commerce"],
        "priority": "High",
        "scope": "Session",
        "measure_type": "Rate",
        "related_kpis": ["add-to-cart-rate", "average-order-value"],
        "dashboard_usage": ["C-Suite", "Merchandising"],
        "dependencies": '{"Events":["purchase"],"Metrics":["orders","sessions"],"Dimensions":[],"KPIs":[]}',
        # Legacy SQL stored as JSON fragments
        "sql_query": '["sql<br>SELECT COUNT(DISTINCT order_id)", "<br>  / COUNT(DISTINCT session_id)", "<br>FROM events"]',
        "w3_data_layer": '{"event": "purchase", "transaction": {"id": "T-1"}}',
        "pii_flag": False,
        "status": EntityStatus.PUBLISHED.value,
        "created_by": SAMPLE_OWNER,
    }))

    entities.append((EntityKind.KPI, {
        "id": "kpi-add-to-cart-rate",
        "slug": "add-to-cart-rate",
        "name": "Add to Cart Rate",
        "category": "Engagement",
        "tags": "Checkout",
        "industry": "Retail",
        "related_kpis": "conversion-rate",
        "dependencies": "not json",
        "status": EntityStatus.DRAFT.value,
        "created_by": SAMPLE_OWNER,
    }))

    # ========== METRICS ==========
    entities.append((EntityKind.METRIC, {
        "id": "metric-orders",
        "slug": "orders",
        "name": "Orders",
        "description": "Count of completed orders",
        "formula": "count(order_id)",
        "category": "Revenue",
        "measure_type": "Counter",
        "related_metrics": "revenue;sessions",
        "derived_kpis": ["conversion-rate"],
        "ga4_data_layer": "json<br>{ event: 'purchase' }",
        "status": EntityStatus.PUBLISHED.value,
        "created_by": SAMPLE_OWNER,
    }))

    # ========== DIMENSIONS ==========
    entities.append((EntityKind.DIMENSION, {
        "id": "dimension-device-category",
        "slug": "device-category",
        "name": "Device Category",
        "category": "Performance",
        "data_type": "string",
        "related_dimensions": ["browser", "operating-system"],
        "derived_dimensions": "device-model",
        "sql_query": "SQL SELECT device_category<br/>FROM sessions",
        "status": EntityStatus.PUBLISHED.value,
        "created_by": SAMPLE_OWNER,
    }))

    # ========== EVENTS ==========
    entities.append((EntityKind.EVENT, {
        "id": "event-purchase",
        "slug": "purchase",
        "name": "Purchase",
        "category": "Conversion",
        "event_type": "standard",
        "event_serialization": "transaction_id",
        "parameters": "transaction_id, value, currency, items",
        "related_dimensions": "currency;payment-type",
        "derived_metrics": ["orders", "revenue"],
        "derived_kpis": "conversion-rate",
        "dependencies": {"Events": [], "Metrics": ["revenue"], "Dimensions": ["currency"], "KPIs": []},
        "status": EntityStatus.PUBLISHED.value,
        "created_by": SAMPLE_OWNER,
    }))

    # ========== DASHBOARDS ==========
    entities.append((EntityKind.DASHBOARD, {
        "id": "dashboard-ecommerce-overview",
        "slug": "ecommerce-overview",
        "name": "E-commerce Overview",
        "description": "Daily trading view for the merchandising team",
        "category": "Revenue",
        "tags": ["Merchandising"],
        "status": EntityStatus.PUBLISHED.value,
        "created_by": SAMPLE_OWNER,
    }))

    return entities


def seed_store(store) -> int:
    """Load the sample entities into a store. Returns how many were inserted."""
    entities = create_sample_entities()
    for kind, record in entities:
        store.insert(kind, record)
    return len(entities)
