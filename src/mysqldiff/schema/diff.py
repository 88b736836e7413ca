"""Compare table definitions and build change-sets."""

import logging
from collections import defaultdict, deque
from typing import Any, Callable, Hashable, Optional, Sequence, TypeVar

from mysqldiff.schema.changes import (
    ColumnChanges,
    ColumnDiff,
    FieldChange,
    ForeignKeyChanges,
    ForeignKeyDiff,
    IndexChanges,
    IndexDiff,
    PartitionChanges,
    PartitionDiff,
    PrimaryKeyChanges,
    PrimaryKeyDiff,
    TableDiff,
    TableOptionsChanges,
    TableOptionsDiff,
)
from mysqldiff.schema.models import (
    Column,
    DataType,
    ForeignKey,
    Index,
    IndexColumn,
    PartitionOptions,
    PrimaryKey,
    Schema,
    Table,
    TableOptions,
)
from mysqldiff.types import ChangeType, TableName

__all__ = [
    "SchemaDiffer",
    "TableDiffAnalyzer",
    "compare_tables",
    "format_data_type",
    "format_index_columns",
    "match_tables_by_name",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

_COLUMN_FIELDS = (
    "nullable",
    "default",
    "auto_increment",
    "unique",
    "primary_key",
    "comment",
    "collation",
    "character_set",
    "visible",
    "column_format",
    "storage",
    "generated",
    "on_update",
    "reference",
)

_INDEX_FIELDS = (
    "key_block_size",
    "using",
    "comment",
    "visible",
    "parser",
    "algorithm",
    "lock",
    "engine_attribute",
)


def format_data_type(data_type: DataType) -> str:
    """Render a data type as ``NAME(params) [UNSIGNED] [ZEROFILL]``."""
    return str(data_type)


def format_index_columns(columns: Sequence[IndexColumn]) -> str:
    """Render an index column list as ``(a, b(10) DESC)``."""
    return f"({', '.join(str(col) for col in columns)})"


def _field_change(old: Any, new: Any) -> Optional[FieldChange]:
    if old == new:
        return None
    return FieldChange(old=old, new=new)


def _index_key(index: Index) -> tuple:
    return (index.name or "", index.column_names, index.kind)


def _index_shape(index: Index) -> tuple:
    return (index.column_names, index.kind)


def _foreign_key_key(fk: ForeignKey) -> tuple:
    return (fk.name or "",) + _foreign_key_shape(fk)


def _foreign_key_shape(fk: ForeignKey) -> tuple:
    return (fk.columns, fk.reference.table, fk.reference.columns)


def _pair_entries(
    old_entries: Sequence[T],
    new_entries: Sequence[T],
    key: Callable[[T], Hashable],
    shape: Callable[[T], Hashable],
) -> list[tuple[Optional[T], Optional[T]]]:
    """Pair old and new entries by identity key, then pair leftovers by shape.

    Entries whose full key matches are paired first, in declaration order.
    Unpaired entries sharing the same shape (the key without the name) are
    then paired as renames. Result order: old entries in declaration order,
    followed by unpaired new entries in declaration order.
    """
    new_by_key: dict[Hashable, deque[int]] = defaultdict(deque)
    for position, entry in enumerate(new_entries):
        new_by_key[key(entry)].append(position)

    partner: dict[int, int] = {}
    for old_pos, entry in enumerate(old_entries):
        bucket = new_by_key.get(key(entry))
        if bucket:
            partner[old_pos] = bucket.popleft()

    paired_new = set(partner.values())
    leftover_new: dict[Hashable, deque[int]] = defaultdict(deque)
    for position, entry in enumerate(new_entries):
        if position not in paired_new:
            leftover_new[shape(entry)].append(position)

    for old_pos, entry in enumerate(old_entries):
        if old_pos in partner:
            continue
        bucket = leftover_new.get(shape(entry))
        if bucket:
            partner[old_pos] = bucket.popleft()
            paired_new.add(partner[old_pos])

    pairs: list[tuple[Optional[T], Optional[T]]] = []
    for old_pos, entry in enumerate(old_entries):
        if old_pos in partner:
            pairs.append((entry, new_entries[partner[old_pos]]))
        else:
            pairs.append((entry, None))
    for position, entry in enumerate(new_entries):
        if position not in paired_new:
            pairs.append((None, entry))
    return pairs


class TableDiffAnalyzer:
    """Compare two optional table definitions field by field."""

    def compare_tables(
        self, old_table: Optional[Table], new_table: Optional[Table]
    ) -> TableDiff:
        """Build the change-set turning ``old_table`` into ``new_table``."""
        diff = TableDiff(old_table=old_table, new_table=new_table)

        if old_table is not None and new_table is not None:
            diff.table_name_changed = old_table.name != new_table.name

        diff.column_diffs = self._compare_columns(
            old_table.columns if old_table else (),
            new_table.columns if new_table else (),
        )
        diff.primary_key_diff = self._compare_primary_keys(
            old_table.primary_key if old_table else None,
            new_table.primary_key if new_table else None,
        )
        diff.index_diffs = self._compare_indexes(
            old_table.indexes if old_table else (),
            new_table.indexes if new_table else (),
        )
        diff.foreign_key_diffs = self._compare_foreign_keys(
            old_table.foreign_keys if old_table else (),
            new_table.foreign_keys if new_table else (),
        )
        diff.table_options_diff = self._compare_table_options(
            old_table.options if old_table else None,
            new_table.options if new_table else None,
        )
        diff.partition_diff = self._compare_partitions(
            old_table.partitioning if old_table else None,
            new_table.partitioning if new_table else None,
        )

        self._update_counters(diff)
        logger.debug(
            "Compared table %s: %d column, %d index, %d foreign key change(s)",
            diff.name,
            len(diff.column_diffs),
            len(diff.index_diffs),
            len(diff.foreign_key_diffs),
        )
        return diff

    def _compare_columns(
        self, old_columns: Sequence[Column], new_columns: Sequence[Column]
    ) -> list[ColumnDiff]:
        old_by_name = {col.name: col for col in old_columns}
        new_names = {col.name for col in new_columns}
        diffs: list[ColumnDiff] = []

        for new_col in new_columns:
            old_col = old_by_name.get(new_col.name)
            if old_col is None:
                diffs.append(
                    ColumnDiff(
                        name=new_col.name,
                        change_type=ChangeType.ADDED,
                        new=new_col,
                    )
                )
                continue
            changes = self.compare_column_definitions(old_col, new_col)
            if changes.has_changes():
                diffs.append(
                    ColumnDiff(
                        name=new_col.name,
                        change_type=ChangeType.MODIFIED,
                        old=old_col,
                        new=new_col,
                        changes=changes,
                    )
                )

        for old_col in old_columns:
            if old_col.name not in new_names:
                diffs.append(
                    ColumnDiff(
                        name=old_col.name,
                        change_type=ChangeType.REMOVED,
                        old=old_col,
                    )
                )

        return diffs

    def compare_column_definitions(self, old: Column, new: Column) -> ColumnChanges:
        changes = ColumnChanges()
        if old.data_type != new.data_type:
            changes.data_type = FieldChange(
                old=format_data_type(old.data_type),
                new=format_data_type(new.data_type),
            )
        for name in _COLUMN_FIELDS:
            setattr(changes, name, _field_change(getattr(old, name), getattr(new, name)))
        return changes

    def _compare_primary_keys(
        self, old: Optional[PrimaryKey], new: Optional[PrimaryKey]
    ) -> Optional[PrimaryKeyDiff]:
        if old is None and new is None:
            return None
        if old is None:
            return PrimaryKeyDiff(change_type=ChangeType.ADDED, new=new)
        if new is None:
            return PrimaryKeyDiff(change_type=ChangeType.REMOVED, old=old)

        changes = PrimaryKeyChanges(
            columns=_field_change(old.column_names, new.column_names),
            name=_field_change(old.name, new.name),
            using=_field_change(old.using, new.using),
            comment=_field_change(old.comment, new.comment),
        )
        if not changes.has_changes():
            return None
        return PrimaryKeyDiff(
            change_type=ChangeType.MODIFIED, old=old, new=new, changes=changes
        )

    def _compare_indexes(
        self, old_indexes: Sequence[Index], new_indexes: Sequence[Index]
    ) -> list[IndexDiff]:
        diffs: list[IndexDiff] = []
        for old, new in _pair_entries(old_indexes, new_indexes, _index_key, _index_shape):
            if old is None:
                diffs.append(IndexDiff(name=new.name, change_type=ChangeType.ADDED, new=new))
            elif new is None:
                diffs.append(
                    IndexDiff(name=old.name, change_type=ChangeType.REMOVED, old=old)
                )
            else:
                changes = self.compare_index_definitions(old, new)
                if changes.has_changes():
                    diffs.append(
                        IndexDiff(
                            name=old.name,
                            change_type=ChangeType.MODIFIED,
                            old=old,
                            new=new,
                            changes=changes,
                        )
                    )
        return diffs

    def compare_index_definitions(self, old: Index, new: Index) -> IndexChanges:
        changes = IndexChanges(
            name=_field_change(old.name, new.name),
            kind=_field_change(old.kind.value, new.kind.value),
        )
        if old.columns != new.columns:
            changes.columns = FieldChange(
                old=format_index_columns(old.columns),
                new=format_index_columns(new.columns),
            )
        for name in _INDEX_FIELDS:
            setattr(changes, name, _field_change(getattr(old, name), getattr(new, name)))
        return changes

    def _compare_foreign_keys(
        self, old_fks: Sequence[ForeignKey], new_fks: Sequence[ForeignKey]
    ) -> list[ForeignKeyDiff]:
        diffs: list[ForeignKeyDiff] = []
        pairs = _pair_entries(old_fks, new_fks, _foreign_key_key, _foreign_key_shape)
        for old, new in pairs:
            if old is None:
                diffs.append(
                    ForeignKeyDiff(name=new.name, change_type=ChangeType.ADDED, new=new)
                )
            elif new is None:
                diffs.append(
                    ForeignKeyDiff(name=old.name, change_type=ChangeType.REMOVED, old=old)
                )
            else:
                changes = self.compare_foreign_key_definitions(old, new)
                if changes.has_changes():
                    diffs.append(
                        ForeignKeyDiff(
                            name=old.name,
                            change_type=ChangeType.MODIFIED,
                            old=old,
                            new=new,
                            changes=changes,
                        )
                    )
        return diffs

    def compare_foreign_key_definitions(
        self, old: ForeignKey, new: ForeignKey
    ) -> ForeignKeyChanges:
        return ForeignKeyChanges(
            name=_field_change(old.name, new.name),
            columns=_field_change(old.columns, new.columns),
            reference_table=_field_change(old.reference.table, new.reference.table),
            reference_columns=_field_change(
                old.reference.columns, new.reference.columns
            ),
            on_delete=_field_change(old.reference.on_delete, new.reference.on_delete),
            on_update=_field_change(old.reference.on_update, new.reference.on_update),
        )

    def _compare_table_options(
        self, old: Optional[TableOptions], new: Optional[TableOptions]
    ) -> Optional[TableOptionsDiff]:
        if old is None and new is None:
            return None
        if old is None:
            return TableOptionsDiff(change_type=ChangeType.ADDED, new=new)
        if new is None:
            return TableOptionsDiff(change_type=ChangeType.REMOVED, old=old)

        changes = TableOptionsChanges()
        for name in TableOptions.option_names():
            setattr(changes, name, _field_change(getattr(old, name), getattr(new, name)))
        if not changes.has_changes():
            return None
        return TableOptionsDiff(
            change_type=ChangeType.MODIFIED, old=old, new=new, changes=changes
        )

    def _compare_partitions(
        self, old: Optional[PartitionOptions], new: Optional[PartitionOptions]
    ) -> Optional[PartitionDiff]:
        if old is None and new is None:
            return None
        if old is None:
            return PartitionDiff(change_type=ChangeType.ADDED, new=new)
        if new is None:
            return PartitionDiff(change_type=ChangeType.REMOVED, old=old)

        changes = PartitionChanges(
            method=_field_change(old.method, new.method),
            linear=_field_change(old.linear, new.linear),
            expression=_field_change(old.expression, new.expression),
            columns=_field_change(old.columns, new.columns),
            partition_count=_field_change(old.partition_count, new.partition_count),
            partition_definitions=_field_change(
                len(old.partitions), len(new.partitions)
            ),
        )
        if not changes.has_changes():
            return None
        return PartitionDiff(
            change_type=ChangeType.MODIFIED, old=old, new=new, changes=changes
        )

    def _update_counters(self, diff: TableDiff) -> None:
        for entries, prefix in (
            (diff.column_diffs, "columns"),
            (diff.index_diffs, "indexes"),
            (diff.foreign_key_diffs, "foreign_keys"),
        ):
            for entry in entries:
                attr = f"{prefix}_{entry.change_type.value}"
                setattr(diff, attr, getattr(diff, attr) + 1)
        diff.table_options_changed = diff.table_options_diff is not None


def compare_tables(old_table: Optional[Table], new_table: Optional[Table]) -> TableDiff:
    """Compare two optional table definitions."""
    return TableDiffAnalyzer().compare_tables(old_table, new_table)


def match_tables_by_name(
    old_tables: Sequence[Table], new_tables: Sequence[Table]
) -> list[tuple[TableName, Optional[Table], Optional[Table]]]:
    """Pair tables from two dumps by name, sorted by name."""
    old_by_name = {table.name: table for table in old_tables}
    new_by_name = {table.name: table for table in new_tables}
    names = sorted(set(old_by_name) | set(new_by_name))
    return [(name, old_by_name.get(name), new_by_name.get(name)) for name in names]


class SchemaDiffer:
    """Compare two schemas table by table."""

    def __init__(self, analyzer: Optional[TableDiffAnalyzer] = None):
        self.analyzer = analyzer or TableDiffAnalyzer()

    def diff(
        self,
        source: Schema,
        target: Schema,
        table: Optional[TableName] = None,
    ) -> list[TableDiff]:
        """Compare source (old dump) to target (new dump).

        Returns one TableDiff per table that changed, sorted by table name.
        When ``table`` is given only that table is compared.
        """
        pairs = match_tables_by_name(
            list(source.tables.values()), list(target.tables.values())
        )
        diffs: list[TableDiff] = []
        for name, old_table, new_table in pairs:
            if table is not None and name != table:
                continue
            table_diff = self.analyzer.compare_tables(old_table, new_table)
            if table_diff.has_changes():
                diffs.append(table_diff)
            else:
                logger.debug("Table %s unchanged", name)
        return diffs
