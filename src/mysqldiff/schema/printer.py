"""Human-readable rendering of table diffs."""

from typing import Any, Optional

from mysqldiff.schema.changes import TableDiff
from mysqldiff.schema.models import (
    Column,
    ForeignKey,
    ForeignKeyReference,
    GeneratedColumn,
    Index,
    PrimaryKey,
)
from mysqldiff.types import ChangeType

__all__ = [
    "Palette",
    "format_column",
    "format_diff_summary",
    "format_foreign_key",
    "format_index",
    "format_primary_key",
    "format_table_diff",
    "print_table_diff",
]

BANNER_WIDTH = 60

_RESET = "\033[0m"
_CODES = {
    "bold": "\033[1m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
}

_MARKERS = {
    ChangeType.ADDED: ("+", "green"),
    ChangeType.REMOVED: ("-", "red"),
    ChangeType.MODIFIED: ("~", "yellow"),
}


class Palette:
    """ANSI styling that is a no-op when disabled."""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled

    def style(self, text: str, name: str) -> str:
        if not self.enabled:
            return text
        return f"{_CODES[name]}{text}{_RESET}"

    def bold(self, text: str) -> str:
        return self.style(text, "bold")

    def marker(self, change_type: ChangeType) -> str:
        symbol, name = _MARKERS[change_type]
        return self.style(symbol, name)


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_format_value(item) for item in value) + "]"
    if isinstance(value, GeneratedColumn):
        return f"AS ({value.expression}) {value.storage}"
    if isinstance(value, ForeignKeyReference):
        return _format_reference(value)
    return str(value)


def _format_reference(reference: ForeignKeyReference) -> str:
    result = f"{reference.table}({', '.join(reference.columns)})"
    if reference.on_delete:
        result += f" ON DELETE {reference.on_delete}"
    if reference.on_update:
        result += f" ON UPDATE {reference.on_update}"
    return result


def format_column(column: Column) -> str:
    result = str(column.data_type)
    if column.nullable is False:
        result += " NOT NULL"
    elif column.nullable is True:
        result += " NULL"
    if column.auto_increment:
        result += " AUTO_INCREMENT"
    if column.unique:
        result += " UNIQUE"
    if column.primary_key:
        result += " PRIMARY KEY"
    if column.default is not None:
        result += f" DEFAULT {column.default}"
    if column.comment is not None:
        result += f" COMMENT '{column.comment}'"
    return result


def format_index(index: Index) -> str:
    name = index.name or "UNNAMED"
    return f"{index.kind.value} {name} ({', '.join(index.column_names)})"


def format_foreign_key(fk: ForeignKey) -> str:
    name = fk.name or "UNNAMED"
    return f"FK {name}: ({', '.join(fk.columns)}) -> {_format_reference(fk.reference)}"


def format_primary_key(pk: PrimaryKey) -> str:
    name = f" {pk.name}" if pk.name else ""
    return f"PRIMARY KEY{name} ({', '.join(pk.column_names)})"


def _change_lines(changes: Optional[Any]) -> list[str]:
    if changes is None:
        return []
    lines = []
    for name, change in changes.changed_fields().items():
        lines.append(
            f"      {name}: {_format_value(change.old)} -> {_format_value(change.new)}"
        )
    return lines


def format_diff_summary(diff: TableDiff) -> str:
    """One-line summary such as ``Table users: +1 cols, ~2 cols``."""
    if not diff.has_changes():
        return f"Table {diff.name}: No changes"
    parts = []
    for label, added, removed, modified in (
        ("cols", diff.columns_added, diff.columns_removed, diff.columns_modified),
        ("idx", diff.indexes_added, diff.indexes_removed, diff.indexes_modified),
        (
            "fk",
            diff.foreign_keys_added,
            diff.foreign_keys_removed,
            diff.foreign_keys_modified,
        ),
    ):
        for symbol, count in (("+", added), ("-", removed), ("~", modified)):
            if count:
                parts.append(f"{symbol}{count} {label}")
    if diff.primary_key_diff is not None:
        parts.append("pk changed")
    if diff.table_options_diff is not None:
        parts.append("options changed")
    if diff.partition_diff is not None:
        parts.append("partitions changed")
    return f"Table {diff.name}: {', '.join(parts)}"


def format_table_diff(diff: TableDiff, detailed: bool = True, color: bool = False) -> str:
    """Render a table diff as a multi-line report."""
    palette = Palette(color)
    rule = palette.bold("=" * BANNER_WIDTH)
    name = palette.style(diff.name, "cyan")

    if diff.change_type is ChangeType.ADDED:
        return f"{palette.marker(ChangeType.ADDED)} TABLE ADDED: {name}"
    if diff.change_type is ChangeType.REMOVED:
        return f"{palette.marker(ChangeType.REMOVED)} TABLE REMOVED: {name}"

    old_name = palette.style(diff.old_table.name, "cyan") if diff.old_table else name
    lines = ["", rule, f"TABLE DIFF: {old_name} -> {name}", rule]

    if not diff.has_changes():
        lines.append("No changes detected.")
        return "\n".join(lines)

    if diff.table_name_changed:
        lines.append(f"Table renamed: {old_name} -> {name}")

    summary = diff.summary()
    lines.extend(["", palette.bold("SUMMARY:")])
    for label, counts in (
        ("Columns", summary.columns),
        ("Indexes", summary.indexes),
        ("Foreign Keys", summary.foreign_keys),
    ):
        lines.append(
            f"  {label}: "
            f"{palette.style(f'+{counts.added}', 'green')} "
            f"{palette.style(f'-{counts.removed}', 'red')} "
            f"{palette.style(f'~{counts.modified}', 'yellow')}"
        )
    for label, changed in (
        ("Primary Key", summary.primary_key_changed),
        ("Table Options", summary.table_options_changed),
        ("Partitioning", summary.partitioning_changed),
    ):
        if changed:
            lines.append(f"  {label}: {palette.style('CHANGED', 'yellow')}")

    if not detailed:
        return "\n".join(lines)

    if diff.column_diffs:
        lines.extend(["", palette.bold("COLUMN CHANGES:")])
        for entry in diff.column_diffs:
            marker = palette.marker(entry.change_type)
            column_name = palette.style(entry.name, "blue")
            if entry.change_type is ChangeType.MODIFIED:
                lines.append(f"  {marker} {column_name}:")
                lines.extend(_change_lines(entry.changes))
            else:
                column = entry.new if entry.new is not None else entry.old
                lines.append(f"  {marker} {column_name}: {format_column(column)}")

    sections = (
        ("INDEX CHANGES:", diff.index_diffs, format_index),
        ("FOREIGN KEY CHANGES:", diff.foreign_key_diffs, format_foreign_key),
    )
    for title, entries, formatter in sections:
        if not entries:
            continue
        lines.extend(["", palette.bold(title)])
        for entry in entries:
            marker = palette.marker(entry.change_type)
            definition = entry.old if entry.old is not None else entry.new
            if entry.change_type is ChangeType.MODIFIED:
                lines.append(f"  {marker} {formatter(definition)}:")
                lines.extend(_change_lines(entry.changes))
            else:
                lines.append(f"  {marker} {formatter(definition)}")

    pk_diff = diff.primary_key_diff
    if pk_diff is not None:
        lines.extend(["", palette.bold("PRIMARY KEY CHANGES:")])
        definition = pk_diff.old if pk_diff.old is not None else pk_diff.new
        suffix = ":" if pk_diff.change_type is ChangeType.MODIFIED else ""
        lines.append(
            f"  {palette.marker(pk_diff.change_type)} "
            f"{format_primary_key(definition)}{suffix}"
        )
        lines.extend(_change_lines(pk_diff.changes))

    for title, label, entry in (
        ("TABLE OPTIONS CHANGES:", "Table options", diff.table_options_diff),
        ("PARTITION CHANGES:", "Partitioning", diff.partition_diff),
    ):
        if entry is None:
            continue
        lines.extend(["", palette.bold(title)])
        suffix = ":" if entry.change_type is ChangeType.MODIFIED else ""
        lines.append(
            f"  {palette.marker(entry.change_type)} "
            f"{label} {entry.change_type.value}{suffix}"
        )
        lines.extend(_change_lines(entry.changes))

    return "\n".join(lines)


def print_table_diff(diff: TableDiff, detailed: bool = True, color: bool = False) -> None:
    """Print a table diff report to stdout."""
    print(format_table_diff(diff, detailed=detailed, color=color))
