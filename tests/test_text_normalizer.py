"""
Tests for legacy SQL / JSON mapping cleanup.
"""

import pytest
from legacy_fields.text_normalizer import (
    normalize, normalize_sql_query, normalize_json_mapping, normalize_entity_for_display
)


class TestNormalizeSqlQuery:
    """Test SQL field cleanup."""

    def test_array_fragments_are_joined(self):
        """Single fragment with marker and <br>."""
        assert normalize('["sql<br>SELECT 1"]', "sql") == "SELECT 1"

    def test_multiple_fragments(self):
        """Fragments are concatenated before <br> replacement."""
        raw = '["sql<br>SELECT a", "<br>FROM t"]'
        assert normalize_sql_query(raw) == "SELECT a\nFROM t"

    def test_null_fragments_join_as_empty(self):
        raw = '["SELECT 1", null, " FROM t"]'
        assert normalize_sql_query(raw) == "SELECT 1 FROM t"

    def test_non_string_fragments_use_json_text(self):
        assert normalize_sql_query('["LIMIT ", 10, " -- ", true, {"a": 1}]') == 'LIMIT 10 -- true{"a": 1}'

    def test_br_variants(self):
        """<br>, <BR/> and <br /> all become newlines."""
        raw = "SELECT 1<BR/>FROM t<br />WHERE x<br>LIMIT 1"
        assert normalize_sql_query(raw) == "SELECT 1\nFROM t\nWHERE x\nLIMIT 1"

    def test_marker_is_case_insensitive(self):
        assert normalize_sql_query("SQL SELECT 1") == "SELECT 1"
        assert normalize_sql_query("  sqlSELECT 1") == "SELECT 1"

    def test_only_one_marker_stripped(self):
        assert normalize_sql_query("sql sql x") == "sql x"

    def test_malformed_array_falls_back_to_text(self):
        """Looks like an array but is not valid JSON."""
        raw = '["SELECT 1",<br>]'
        assert normalize_sql_query(raw) == '["SELECT 1",\n]'

    def test_plain_sql_unchanged(self):
        assert normalize_sql_query("SELECT * FROM orders") == "SELECT * FROM orders"

    def test_empty_values_pass_through(self):
        assert normalize_sql_query(None) is None
        assert normalize_sql_query("") == ""


class TestNormalizeJsonMapping:
    """Test data-layer mapping cleanup."""

    def test_object_is_pretty_printed(self):
        assert normalize('{"a":1}', "json") == '{\n  "a": 1\n}'

    def test_array_is_pretty_printed(self):
        assert normalize_json_mapping("  [1,2]  ") == "[\n  1,\n  2\n]"

    def test_unicode_kept(self):
        assert normalize_json_mapping('{"name":"caf\\u00e9"}') == '{\n  "name": "café"\n}'

    def test_marker_and_br_stripped(self):
        raw = "json<br>{ event: 'purchase' }"
        assert normalize_json_mapping(raw) == "{ event: 'purchase' }"

    def test_invalid_json_gets_text_cleanup(self):
        assert normalize_json_mapping("{bad<br>json}") == "{bad\njson}"

    def test_text_cleanup_is_idempotent(self):
        """Once the marker is gone, normalizing again changes nothing."""
        once = normalize_json_mapping("JSON dataLayer.push<br/>(event)")
        assert once == "dataLayer.push\n(event)"
        assert normalize_json_mapping(once) == once

    def test_empty_values_pass_through(self):
        assert normalize_json_mapping(None) is None
        assert normalize_json_mapping("") == ""


class TestNormalize:
    """Test the dispatching entry points."""

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            normalize("SELECT 1", "yaml")

    def test_entity_display_cleanup(self):
        """SQL and mapping fields are cleaned, other fields untouched."""
        record = {
            "name": "Orders<br>",
            "sql_query": "sql<br>SELECT 1",
            "w3_data_layer": '{"event":"purchase"}',
            "xdm_mapping": None,
        }
        cleaned = normalize_entity_for_display(record)

        assert cleaned["name"] == "Orders<br>"
        assert cleaned["sql_query"] == "SELECT 1"
        assert cleaned["w3_data_layer"] == '{\n  "event": "purchase"\n}'
        assert cleaned["xdm_mapping"] is None
        # Source record not modified
        assert record["sql_query"] == "sql<br>SELECT 1"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
