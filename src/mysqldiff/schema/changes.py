"""Change-set records produced by the diff analyzer.

Every ``*Changes`` record holds one optional FieldChange per comparable
attribute: None means the attribute is equal on both sides.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Optional

from mysqldiff.schema.models import (
    Column,
    ForeignKey,
    Index,
    PartitionOptions,
    PrimaryKey,
    Table,
    TableOptions,
)
from mysqldiff.types import ChangeType

__all__ = [
    "FieldChange",
    "ColumnChanges",
    "IndexChanges",
    "PrimaryKeyChanges",
    "ForeignKeyChanges",
    "TableOptionsChanges",
    "PartitionChanges",
    "ColumnDiff",
    "IndexDiff",
    "PrimaryKeyDiff",
    "ForeignKeyDiff",
    "TableOptionsDiff",
    "PartitionDiff",
    "ChangesSummary",
    "TableSummary",
    "TableDiff",
]


@dataclass(frozen=True)
class FieldChange:
    """Raw old and new value of one attribute. None stands for absent."""

    old: Any
    new: Any

    def __post_init__(self):
        if isinstance(self.old, tuple):
            object.__setattr__(self, "old", list(self.old))
        if isinstance(self.new, tuple):
            object.__setattr__(self, "new", list(self.new))


@dataclass
class _FieldChanges:
    def has_changes(self) -> bool:
        return any(getattr(self, f.name) is not None for f in fields(self))

    def changed_fields(self) -> dict[str, FieldChange]:
        """Changed attributes in declaration order."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class ColumnChanges(_FieldChanges):
    data_type: Optional[FieldChange] = None
    nullable: Optional[FieldChange] = None
    default: Optional[FieldChange] = None
    auto_increment: Optional[FieldChange] = None
    unique: Optional[FieldChange] = None
    primary_key: Optional[FieldChange] = None
    comment: Optional[FieldChange] = None
    collation: Optional[FieldChange] = None
    character_set: Optional[FieldChange] = None
    visible: Optional[FieldChange] = None
    column_format: Optional[FieldChange] = None
    storage: Optional[FieldChange] = None
    generated: Optional[FieldChange] = None
    on_update: Optional[FieldChange] = None
    reference: Optional[FieldChange] = None


@dataclass
class IndexChanges(_FieldChanges):
    name: Optional[FieldChange] = None
    kind: Optional[FieldChange] = None
    columns: Optional[FieldChange] = None
    key_block_size: Optional[FieldChange] = None
    using: Optional[FieldChange] = None
    comment: Optional[FieldChange] = None
    visible: Optional[FieldChange] = None
    parser: Optional[FieldChange] = None
    algorithm: Optional[FieldChange] = None
    lock: Optional[FieldChange] = None
    engine_attribute: Optional[FieldChange] = None


@dataclass
class PrimaryKeyChanges(_FieldChanges):
    columns: Optional[FieldChange] = None
    name: Optional[FieldChange] = None
    using: Optional[FieldChange] = None
    comment: Optional[FieldChange] = None


@dataclass
class ForeignKeyChanges(_FieldChanges):
    name: Optional[FieldChange] = None
    columns: Optional[FieldChange] = None
    reference_table: Optional[FieldChange] = None
    reference_columns: Optional[FieldChange] = None
    on_delete: Optional[FieldChange] = None
    on_update: Optional[FieldChange] = None


@dataclass
class TableOptionsChanges(_FieldChanges):
    engine: Optional[FieldChange] = None
    auto_increment: Optional[FieldChange] = None
    character_set: Optional[FieldChange] = None
    collation: Optional[FieldChange] = None
    comment: Optional[FieldChange] = None
    row_format: Optional[FieldChange] = None
    key_block_size: Optional[FieldChange] = None
    max_rows: Optional[FieldChange] = None
    min_rows: Optional[FieldChange] = None
    tablespace: Optional[FieldChange] = None
    data_directory: Optional[FieldChange] = None
    index_directory: Optional[FieldChange] = None
    encryption: Optional[FieldChange] = None
    compression: Optional[FieldChange] = None
    stats_persistent: Optional[FieldChange] = None
    stats_auto_recalc: Optional[FieldChange] = None
    stats_sample_pages: Optional[FieldChange] = None
    pack_keys: Optional[FieldChange] = None
    checksum: Optional[FieldChange] = None
    delay_key_write: Optional[FieldChange] = None
    union: Optional[FieldChange] = None
    insert_method: Optional[FieldChange] = None


@dataclass
class PartitionChanges(_FieldChanges):
    method: Optional[FieldChange] = None
    linear: Optional[FieldChange] = None
    expression: Optional[FieldChange] = None
    columns: Optional[FieldChange] = None
    partition_count: Optional[FieldChange] = None
    partition_definitions: Optional[FieldChange] = None


@dataclass
class ColumnDiff:
    name: str
    change_type: ChangeType
    old: Optional[Column] = None
    new: Optional[Column] = None
    changes: Optional[ColumnChanges] = None


@dataclass
class IndexDiff:
    name: Optional[str]
    change_type: ChangeType
    old: Optional[Index] = None
    new: Optional[Index] = None
    changes: Optional[IndexChanges] = None


@dataclass
class PrimaryKeyDiff:
    change_type: ChangeType
    old: Optional[PrimaryKey] = None
    new: Optional[PrimaryKey] = None
    changes: Optional[PrimaryKeyChanges] = None


@dataclass
class ForeignKeyDiff:
    name: Optional[str]
    change_type: ChangeType
    old: Optional[ForeignKey] = None
    new: Optional[ForeignKey] = None
    changes: Optional[ForeignKeyChanges] = None


@dataclass
class TableOptionsDiff:
    change_type: ChangeType
    old: Optional[TableOptions] = None
    new: Optional[TableOptions] = None
    changes: Optional[TableOptionsChanges] = None


@dataclass
class PartitionDiff:
    change_type: ChangeType
    old: Optional[PartitionOptions] = None
    new: Optional[PartitionOptions] = None
    changes: Optional[PartitionChanges] = None


@dataclass(frozen=True)
class ChangesSummary:
    added: int = 0
    removed: int = 0
    modified: int = 0

    @property
    def total(self) -> int:
        return self.added + self.removed + self.modified


@dataclass(frozen=True)
class TableSummary:
    table_name_changed: bool
    columns: ChangesSummary
    indexes: ChangesSummary
    foreign_keys: ChangesSummary
    primary_key_changed: bool
    table_options_changed: bool
    partitioning_changed: bool


@dataclass
class TableDiff:
    """Complete comparison of one (old, new) table pair.

    Either side may be None for a table that exists in only one dump.
    """

    old_table: Optional[Table] = None
    new_table: Optional[Table] = None
    table_name_changed: bool = False
    table_options_changed: bool = False
    column_diffs: list[ColumnDiff] = field(default_factory=list)
    primary_key_diff: Optional[PrimaryKeyDiff] = None
    index_diffs: list[IndexDiff] = field(default_factory=list)
    foreign_key_diffs: list[ForeignKeyDiff] = field(default_factory=list)
    table_options_diff: Optional[TableOptionsDiff] = None
    partition_diff: Optional[PartitionDiff] = None
    columns_added: int = 0
    columns_removed: int = 0
    columns_modified: int = 0
    indexes_added: int = 0
    indexes_removed: int = 0
    indexes_modified: int = 0
    foreign_keys_added: int = 0
    foreign_keys_removed: int = 0
    foreign_keys_modified: int = 0

    @property
    def name(self) -> str:
        """Table name, preferring the new side."""
        table = self.new_table or self.old_table
        return table.name if table else ""

    @property
    def change_type(self) -> ChangeType:
        if self.old_table is None and self.new_table is not None:
            return ChangeType.ADDED
        if self.new_table is None and self.old_table is not None:
            return ChangeType.REMOVED
        return ChangeType.MODIFIED

    def has_changes(self) -> bool:
        return (
            self.table_name_changed
            or self.table_options_changed
            or bool(self.column_diffs)
            or self.primary_key_diff is not None
            or bool(self.index_diffs)
            or bool(self.foreign_key_diffs)
            or self.table_options_diff is not None
            or self.partition_diff is not None
        )

    def summary(self) -> TableSummary:
        return TableSummary(
            table_name_changed=self.table_name_changed,
            columns=ChangesSummary(
                self.columns_added, self.columns_removed, self.columns_modified
            ),
            indexes=ChangesSummary(
                self.indexes_added, self.indexes_removed, self.indexes_modified
            ),
            foreign_keys=ChangesSummary(
                self.foreign_keys_added,
                self.foreign_keys_removed,
                self.foreign_keys_modified,
            ),
            primary_key_changed=self.primary_key_diff is not None,
            table_options_changed=self.table_options_diff is not None,
            partitioning_changed=self.partition_diff is not None,
        )
