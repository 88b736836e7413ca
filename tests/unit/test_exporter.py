"""Tests for mysqldiff.schema.exporter module."""

import json

import yaml

from mysqldiff.schema.diff import compare_tables
from mysqldiff.schema.exporter import (
    definition_to_dict,
    diffs_to_dict,
    export_json,
    export_yaml,
    table_diff_to_dict,
    table_to_dict,
)
from mysqldiff.schema.models import Column, DataType
from tests.helpers import make_index, make_table, parse_sql

OLD_SQL = "CREATE TABLE t (id INT, name VARCHAR(100))"
NEW_SQL = "CREATE TABLE t (id INT AUTO_INCREMENT, name VARCHAR(255), email VARCHAR(255))"


class TestDefinitionToDict:
    """Tests for definition serialization."""

    def test_absent_fields_are_omitted(self):
        """None attributes are dropped, False and empty values are kept."""
        column = Column(name="c", data_type=DataType("INT"))
        data = definition_to_dict(column)

        assert data["name"] == "c"
        assert data["data_type"] == {
            "name": "INT",
            "parameters": [],
            "unsigned": False,
            "zerofill": False,
        }
        assert data["auto_increment"] is False
        assert "nullable" not in data
        assert "default" not in data

    def test_explicit_values_are_kept(self):
        """Present-but-falsy optionals survive."""
        column = Column(name="c", data_type=DataType("INT"), nullable=False, default="0")
        data = definition_to_dict(column)
        assert data["nullable"] is False
        assert data["default"] == "0"

    def test_table_to_dict_converts_enums(self):
        """Index kinds are exported as their values."""
        table = parse_sql("CREATE TABLE t (a INT, UNIQUE KEY uq (a))")
        data = table_to_dict(table)
        assert data["indexes"][0]["kind"] == "UNIQUE"
        assert data["indexes"][0]["columns"] == [{"name": "a"}]


class TestTableDiffToDict:
    """Tests for change-set serialization."""

    def test_concrete_scenario(self):
        """Field changes export as old/new pairs."""
        diff = compare_tables(parse_sql(OLD_SQL), parse_sql(NEW_SQL))
        data = table_diff_to_dict(diff)

        assert data["table"] == "t"
        assert data["change_type"] == "modified"
        assert data["summary"]["columns"] == {"added": 1, "removed": 0, "modified": 2}

        id_entry, name_entry, email_entry = data["column_diffs"]
        assert id_entry["changes"] == {"auto_increment": {"old": False, "new": True}}
        assert name_entry["changes"] == {
            "data_type": {"old": "VARCHAR(100)", "new": "VARCHAR(255)"}
        }
        assert email_entry["change_type"] == "added"
        assert "old" not in email_entry
        assert email_entry["new"]["name"] == "email"

    def test_null_side_is_kept_in_field_change(self):
        """An absent side of a field change serializes as None."""
        old = parse_sql("CREATE TABLE t (c INT)")
        new = parse_sql("CREATE TABLE t (c INT NULL)")
        data = table_diff_to_dict(compare_tables(old, new))
        assert data["column_diffs"][0]["changes"]["nullable"] == {"old": None, "new": True}

    def test_rename_exports_names(self):
        """Renamed tables include both names."""
        data = table_diff_to_dict(compare_tables(make_table("a"), make_table("b")))
        assert data["table_name_changed"] is True
        assert (data["old_name"], data["new_name"]) == ("a", "b")

    def test_index_entry_has_name(self):
        """Index entries carry their name."""
        old = make_table("t", indexes=(make_index("idx_a", "a"),))
        new = make_table("t", indexes=(make_index("idx_b", "a"),))
        data = table_diff_to_dict(compare_tables(old, new))
        (entry,) = data["index_diffs"]
        assert entry["name"] == "idx_a"
        assert entry["changes"] == {"name": {"old": "idx_a", "new": "idx_b"}}


class TestExportFormats:
    """Tests for JSON and YAML output."""

    def test_export_json_is_keyed_by_table(self):
        """JSON output maps table name to diff."""
        diff = compare_tables(parse_sql(OLD_SQL), parse_sql(NEW_SQL))
        document = json.loads(export_json([diff]))
        assert list(document) == ["t"]
        assert document["t"]["summary"]["columns"]["added"] == 1

    def test_export_yaml_round_trips(self):
        """YAML output loads back to the same structure."""
        diff = compare_tables(parse_sql(OLD_SQL), parse_sql(NEW_SQL))
        assert yaml.safe_load(export_yaml([diff])) == diffs_to_dict([diff])

    def test_export_empty(self):
        """No diffs export as an empty mapping."""
        assert json.loads(export_json([])) == {}
