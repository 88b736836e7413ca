"""Export change-sets to JSON and YAML."""

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Iterable

import yaml

from mysqldiff.schema.changes import FieldChange, TableDiff
from mysqldiff.schema.models import Table

__all__ = [
    "definition_to_dict",
    "table_to_dict",
    "table_diff_to_dict",
    "diffs_to_dict",
    "export_json",
    "export_yaml",
]


def _to_plain(value: Any) -> Any:
    if isinstance(value, FieldChange):
        return {"old": _to_plain(value.old), "new": _to_plain(value.new)}
    if is_dataclass(value):
        return definition_to_dict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


def definition_to_dict(definition: Any) -> dict[str, Any]:
    """Convert a model dataclass to a dictionary.

    Absent (None) attributes are omitted; False, 0 and empty lists are kept.
    """
    data: dict[str, Any] = {}
    for f in fields(definition):
        value = getattr(definition, f.name)
        if value is None:
            continue
        data[f.name] = _to_plain(value)
    return data


def table_to_dict(table: Table) -> dict[str, Any]:
    """Convert a Table model to a dictionary."""
    return definition_to_dict(table)


def _entry_to_dict(entry: Any) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if hasattr(entry, "name"):
        data["name"] = entry.name
    data["change_type"] = entry.change_type.value
    if entry.old is not None:
        data["old"] = _to_plain(entry.old)
    if entry.new is not None:
        data["new"] = _to_plain(entry.new)
    if entry.changes is not None:
        data["changes"] = {
            name: _to_plain(change)
            for name, change in entry.changes.changed_fields().items()
        }
    return data


def table_diff_to_dict(diff: TableDiff) -> dict[str, Any]:
    """Convert a TableDiff to a dictionary suitable for JSON/YAML export."""
    summary = diff.summary()
    data: dict[str, Any] = {
        "table": diff.name,
        "change_type": diff.change_type.value,
        "table_name_changed": diff.table_name_changed,
        "table_options_changed": diff.table_options_changed,
        "summary": definition_to_dict(summary),
    }
    if diff.table_name_changed:
        data["old_name"] = diff.old_table.name
        data["new_name"] = diff.new_table.name

    data["column_diffs"] = [_entry_to_dict(entry) for entry in diff.column_diffs]
    if diff.primary_key_diff is not None:
        data["primary_key_diff"] = _entry_to_dict(diff.primary_key_diff)
    data["index_diffs"] = [_entry_to_dict(entry) for entry in diff.index_diffs]
    data["foreign_key_diffs"] = [
        _entry_to_dict(entry) for entry in diff.foreign_key_diffs
    ]
    if diff.table_options_diff is not None:
        data["table_options_diff"] = _entry_to_dict(diff.table_options_diff)
    if diff.partition_diff is not None:
        data["partition_diff"] = _entry_to_dict(diff.partition_diff)
    return data


def diffs_to_dict(diffs: Iterable[TableDiff]) -> dict[str, Any]:
    """Map table name to exported diff."""
    return {diff.name: table_diff_to_dict(diff) for diff in diffs}


def export_json(diffs: Iterable[TableDiff]) -> str:
    """Export table diffs as a JSON document keyed by table name."""
    return json.dumps(diffs_to_dict(diffs), indent=2, ensure_ascii=False)


def export_yaml(diffs: Iterable[TableDiff]) -> str:
    """Export table diffs as a YAML document keyed by table name."""
    return yaml.dump(
        diffs_to_dict(diffs),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
