"""
Tests for the dependency graph codec.
"""

import pytest
from entity_forms.dependencies import (
    DEPENDENCY_CATEGORIES, empty_graph, decode, encode, add_item, remove_item, is_well_formed
)


EMPTY = {"Events": [], "Metrics": [], "Dimensions": [], "KPIs": []}


class TestDecode:
    """Test decoding stored dependency strings."""

    @pytest.mark.parametrize("raw", [None, "", "not json", "[1, 2]", '"Events"', "null", "{bad"])
    def test_bad_input_yields_empty_graph(self, raw):
        assert decode(raw) == EMPTY

    def test_non_array_values_become_empty(self):
        """Keys present with the wrong type are kept, but empty."""
        graph = decode('{"Events": "purchase", "Metrics": ["orders"], "KPIs": null}')
        assert graph == {"Events": [], "Metrics": ["orders"], "Dimensions": [], "KPIs": []}

    def test_extra_keys_dropped(self):
        graph = decode('{"Events": ["purchase"], "Reports": ["x"]}')
        assert set(graph) == set(DEPENDENCY_CATEGORIES)
        assert graph["Events"] == ["purchase"]

    def test_empty_graph_is_fresh(self):
        first = empty_graph()
        first["Events"].append("x")
        assert empty_graph() == EMPTY


class TestEncode:
    """Test serialization."""

    def test_compact_fixed_order(self):
        graph = {"KPIs": ["conversion-rate"], "Events": ["purchase"], "Metrics": [], "Dimensions": []}
        assert encode(graph) == (
            '{"Events":["purchase"],"Metrics":[],"Dimensions":[],"KPIs":["conversion-rate"]}'
        )

    def test_round_trip(self):
        graph = {
            "Events": ["purchase", "add_to_cart"],
            "Metrics": ["orders"],
            "Dimensions": ["device-category"],
            "KPIs": [],
        }
        assert decode(encode(graph)) == graph

    def test_non_list_categories_written_empty(self):
        graph = {"Events": "purchase", "Metrics": 5, "Dimensions": None, "KPIs": ["aov"]}
        assert encode(graph) == '{"Events":[],"Metrics":[],"Dimensions":[],"KPIs":["aov"]}'

    def test_missing_categories_written_empty(self):
        assert encode({}) == encode(EMPTY)

    def test_well_formed_detection(self):
        assert is_well_formed(encode(EMPTY))
        assert not is_well_formed('{"Events": []}')
        assert not is_well_formed("not json")


class TestMutation:
    """Test add_item / remove_item."""

    def test_add_is_idempotent(self):
        once = add_item(EMPTY, "Metrics", "orders")
        twice = add_item(once, "Metrics", "orders")
        assert once == twice == {"Events": [], "Metrics": ["orders"], "Dimensions": [], "KPIs": []}

    def test_add_trims_and_ignores_blank(self):
        graph = add_item(EMPTY, "Events", "  purchase ")
        assert graph["Events"] == ["purchase"]
        assert add_item(graph, "Events", "   ") == graph
        assert add_item(graph, "Events", "") == graph

    def test_add_is_case_sensitive(self):
        graph = add_item(add_item(EMPTY, "KPIs", "ctr"), "KPIs", "CTR")
        assert graph["KPIs"] == ["ctr", "CTR"]

    def test_add_returns_new_graph(self):
        original = {"Events": ["purchase"], "Metrics": [], "Dimensions": [], "KPIs": []}
        updated = add_item(original, "Events", "refund")

        assert original["Events"] == ["purchase"]
        assert updated["Events"] == ["purchase", "refund"]
        assert updated["Metrics"] == []

    def test_remove(self):
        graph = {"Events": ["purchase", "refund"], "Metrics": ["orders"], "Dimensions": [], "KPIs": []}
        updated = remove_item(graph, "Events", "purchase")

        assert updated["Events"] == ["refund"]
        assert updated["Metrics"] == ["orders"]
        assert graph["Events"] == ["purchase", "refund"]

    def test_remove_missing_value_is_noop(self):
        assert remove_item(EMPTY, "Dimensions", "browser") == EMPTY

    def test_unknown_category_rejected(self):
        with pytest.raises(ValueError):
            add_item(EMPTY, "Reports", "x")
        with pytest.raises(ValueError):
            remove_item(EMPTY, "events", "x")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
