"""
Tests for record <-> form projection.
"""

import pytest
from kpi_catalog.models import CatalogEntity, EntityKind
from entity_forms.dependencies import add_item
from entity_forms.projector import to_form_data, to_persisted_patch, DEPENDENCIES_DATA


EMPTY = {"Events": [], "Metrics": [], "Dimensions": [], "KPIs": []}


class TestToFormData:
    """Test the read path."""

    def test_kpi_defaults(self):
        """Missing fields become zero values, never None."""
        form = to_form_data({"id": "k1", "slug": "ctr", "name": "CTR"}, "kpi")

        assert form["tags"] == []
        assert form["name"] == "CTR"
        assert form["description"] == ""
        assert form["formula"] == ""
        assert form["sql_query"] == ""
        assert form["related_kpis"] == ""
        assert form["pii_flag"] is False
        assert form["dependencies"] == ""
        assert form[DEPENDENCIES_DATA] == EMPTY

    def test_semicolon_list_shapes_agree(self):
        """String and array storage project to the same joined value."""
        as_string = to_form_data({"related_dimensions": "a;b"}, "event")
        as_array = to_form_data({"related_dimensions": ["a", "b"]}, "event")

        assert as_string["related_dimensions"] == "a;b"
        assert as_array["related_dimensions"] == "a;b"

    def test_event_subset(self):
        form = to_form_data({"event_type": "custom", "parameters": "item_id", "formula": "x"}, "event")

        assert form["event_type"] == "custom"
        assert form["parameters"] == "item_id"
        assert form["event_serialization"] == ""
        assert "formula" not in form
        assert "sql_query" not in form
        assert "measure_type" not in form

    def test_dimension_subset(self):
        form = to_form_data({"data_type": "string", "derived_dimensions": ["model"]}, EntityKind.DIMENSION)

        assert form["data_type"] == "string"
        assert form["derived_dimensions"] == "model"
        assert "event_type" not in form

    def test_dashboard_has_only_shared_fields(self):
        form = to_form_data({"name": "Overview", "sql_query": "SELECT 1", "tags": ["a"]}, "dashboard")
        assert form == {"name": "Overview", "description": "", "category": "", "tags": ["a"]}

    def test_legacy_shapes(self):
        """Bare-string tags and list-valued selects."""
        form = to_form_data({"tags": "Checkout", "industry": ["Retail", "SaaS"], "pii_flag": "yes"}, "kpi")

        assert form["tags"] == ["Checkout"]
        assert form["industry"] == "Retail"
        assert form["pii_flag"] is True

    def test_dependencies_decoded(self):
        raw = '{"Events":["purchase"],"Metrics":[],"Dimensions":[],"KPIs":[]}'
        form = to_form_data({"dependencies": raw}, "metric")

        assert form["dependencies"] == raw
        assert form[DEPENDENCIES_DATA]["Events"] == ["purchase"]

    def test_dependencies_already_parsed(self):
        form = to_form_data({"dependencies": {"Metrics": ["revenue"]}}, "event")
        assert form[DEPENDENCIES_DATA] == {"Events": [], "Metrics": ["revenue"], "Dimensions": [], "KPIs": []}

    def test_malformed_dependencies(self):
        form = to_form_data({"dependencies": "not json"}, "kpi")
        assert form[DEPENDENCIES_DATA] == EMPTY

    def test_accepts_catalog_entity(self):
        entity = CatalogEntity(id="m1", slug="orders", name="Orders", related_metrics=["revenue", "sessions"])
        form = to_form_data(entity, "metric")

        assert form["name"] == "Orders"
        assert form["related_metrics"] == "revenue;sessions"

    def test_status_passed_through(self):
        assert to_form_data({"status": "published"}, "kpi")["status"] == "published"

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            to_form_data({}, "report")


class TestToPersistedPatch:
    """Test the write path."""

    def test_no_edit_round_trip_is_identical(self):
        """Stored dependencies and semicolon strings survive unchanged."""
        raw = '{"Events": ["purchase"], "Metrics": [], "Dimensions": [], "KPIs": []}'
        record = {"name": "CTR", "dependencies": raw, "related_kpis": "a;b", "dashboard_usage": ["x", "y"]}

        patch = to_persisted_patch(to_form_data(record, "kpi"), "kpi")

        assert patch["dependencies"] == raw
        assert patch["related_kpis"] == "a;b"
        assert patch["dashboard_usage"] == "x;y"
        assert DEPENDENCIES_DATA not in patch

    def test_edited_graph_is_reencoded(self):
        form = to_form_data({"dependencies": '{"Events":[],"Metrics":[],"Dimensions":[],"KPIs":[]}'}, "kpi")
        form[DEPENDENCIES_DATA] = add_item(form[DEPENDENCIES_DATA], "KPIs", "conversion-rate")

        patch = to_persisted_patch(form, "kpi")
        assert patch["dependencies"] == '{"Events":[],"Metrics":[],"Dimensions":[],"KPIs":["conversion-rate"]}'

    def test_malformed_dependencies_saved_as_empty_graph(self):
        form = to_form_data({"dependencies": "not json"}, "event")
        patch = to_persisted_patch(form, "event")
        assert patch["dependencies"] == '{"Events":[],"Metrics":[],"Dimensions":[],"KPIs":[]}'

    def test_other_fields_pass_through(self):
        form = {"name": "X", "tags": ["a"], "custom": 1, "pii_flag": True}
        assert to_persisted_patch(form, "kpi") == form

    def test_dashboard_never_gets_dependencies(self):
        form = {"name": "Overview", "dependencies": "{}", DEPENDENCIES_DATA: EMPTY}
        assert to_persisted_patch(form, "dashboard") == {"name": "Overview"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
