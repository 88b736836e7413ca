"""Table-definition tree produced by the CREATE TABLE parser."""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import ClassVar, Optional

from mysqldiff.types import ColumnName, IndexName, TableName


class IndexKind(Enum):
    """Secondary index flavours."""

    INDEX = "INDEX"
    UNIQUE = "UNIQUE"
    FULLTEXT = "FULLTEXT"
    SPATIAL = "SPATIAL"


@dataclass(frozen=True)
class DataType:
    """Column data type.

    Parameters are kept as raw source strings: precision/scale digits, or
    quoted ENUM/SET members exactly as written.
    """

    name: str
    parameters: tuple[str, ...] = ()
    unsigned: bool = False
    zerofill: bool = False

    def __str__(self) -> str:
        result = self.name
        if self.parameters:
            result += f"({','.join(self.parameters)})"
        if self.unsigned:
            result += " UNSIGNED"
        if self.zerofill:
            result += " ZEROFILL"
        return result


@dataclass(frozen=True)
class GeneratedColumn:
    """GENERATED ALWAYS AS (expression) VIRTUAL|STORED."""

    expression: str
    storage: str = "VIRTUAL"


@dataclass(frozen=True)
class ForeignKeyReference:
    """Target of a foreign key.

    The referenced table is held by name only; it may live in another dump
    or appear later in this one.
    """

    table: str
    columns: tuple[str, ...] = ()
    on_delete: Optional[str] = None
    on_update: Optional[str] = None


@dataclass(frozen=True)
class Column:
    """Column definition.

    ``nullable`` is three-valued: None when no NULL/NOT NULL clause was given,
    True for an explicit NULL, False for NOT NULL. ``default`` is the raw
    source text of the DEFAULT clause, quotes included.
    """

    name: str
    data_type: DataType
    nullable: Optional[bool] = None
    default: Optional[str] = None
    auto_increment: bool = False
    unique: bool = False
    primary_key: bool = False
    comment: Optional[str] = None
    collation: Optional[str] = None
    character_set: Optional[str] = None
    visible: Optional[bool] = None
    generated: Optional[GeneratedColumn] = None
    column_format: Optional[str] = None
    storage: Optional[str] = None
    on_update: Optional[str] = None
    reference: Optional[ForeignKeyReference] = None


@dataclass(frozen=True)
class IndexColumn:
    """One entry of an index or primary key column list."""

    name: str
    length: Optional[int] = None
    direction: Optional[str] = None

    def __str__(self) -> str:
        result = self.name
        if self.length is not None:
            result += f"({self.length})"
        if self.direction is not None:
            result += f" {self.direction}"
        return result


@dataclass(frozen=True)
class Index:
    """Secondary index (INDEX/KEY, UNIQUE, FULLTEXT, SPATIAL)."""

    columns: tuple[IndexColumn, ...]
    kind: IndexKind = IndexKind.INDEX
    name: Optional[IndexName] = None
    key_block_size: Optional[int] = None
    using: Optional[str] = None
    comment: Optional[str] = None
    visible: Optional[bool] = None
    parser: Optional[str] = None
    algorithm: Optional[str] = None
    lock: Optional[str] = None
    engine_attribute: Optional[str] = None

    @property
    def column_names(self) -> tuple[ColumnName, ...]:
        return tuple(col.name for col in self.columns)


@dataclass(frozen=True)
class PrimaryKey:
    """Table-level primary key. At most one per table."""

    columns: tuple[IndexColumn, ...]
    name: Optional[str] = None
    using: Optional[str] = None
    comment: Optional[str] = None

    @property
    def column_names(self) -> tuple[ColumnName, ...]:
        return tuple(col.name for col in self.columns)


@dataclass(frozen=True)
class ForeignKey:
    """FOREIGN KEY (columns) REFERENCES table (columns) [actions]."""

    columns: tuple[ColumnName, ...]
    reference: ForeignKeyReference
    name: Optional[str] = None


@dataclass(frozen=True)
class CheckConstraint:
    """CHECK (expression) [[NOT] ENFORCED]."""

    expression: str
    name: Optional[str] = None
    enforced: Optional[bool] = None


@dataclass(frozen=True)
class TableOptions:
    """Sparse bag of table options; unset options stay None."""

    INTEGER_OPTIONS: ClassVar[frozenset[str]] = frozenset(
        {
            "auto_increment",
            "key_block_size",
            "max_rows",
            "min_rows",
            "stats_persistent",
            "stats_auto_recalc",
            "stats_sample_pages",
            "pack_keys",
            "checksum",
            "delay_key_write",
        }
    )

    engine: Optional[str] = None
    auto_increment: Optional[int] = None
    character_set: Optional[str] = None
    collation: Optional[str] = None
    comment: Optional[str] = None
    row_format: Optional[str] = None
    key_block_size: Optional[int] = None
    max_rows: Optional[int] = None
    min_rows: Optional[int] = None
    tablespace: Optional[str] = None
    data_directory: Optional[str] = None
    index_directory: Optional[str] = None
    encryption: Optional[str] = None
    compression: Optional[str] = None
    stats_persistent: Optional[int] = None
    stats_auto_recalc: Optional[int] = None
    stats_sample_pages: Optional[int] = None
    pack_keys: Optional[int] = None
    checksum: Optional[int] = None
    delay_key_write: Optional[int] = None
    union: Optional[tuple[str, ...]] = None
    insert_method: Optional[str] = None

    @classmethod
    def option_names(cls) -> list[str]:
        """All option field names in declaration order."""
        return [f.name for f in fields(cls)]

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.option_names())


@dataclass(frozen=True)
class PartitionDefinition:
    """A single PARTITION p ... entry."""

    name: str
    values: tuple[str, ...] = ()
    comment: Optional[str] = None
    data_directory: Optional[str] = None
    index_directory: Optional[str] = None
    max_rows: Optional[int] = None
    min_rows: Optional[int] = None
    tablespace: Optional[str] = None


@dataclass(frozen=True)
class PartitionOptions:
    """PARTITION BY clause.

    Partition bodies are not decomposed by the parser, so ``partitions`` is
    only populated when definitions are built programmatically.
    """

    method: str
    linear: bool = False
    expression: Optional[str] = None
    columns: tuple[str, ...] = ()
    partition_count: Optional[int] = None
    partitions: tuple[PartitionDefinition, ...] = ()


@dataclass(frozen=True)
class Table:
    """One parsed CREATE TABLE statement."""

    name: TableName
    columns: tuple[Column, ...] = ()
    primary_key: Optional[PrimaryKey] = None
    indexes: tuple[Index, ...] = ()
    foreign_keys: tuple[ForeignKey, ...] = ()
    check_constraints: tuple[CheckConstraint, ...] = ()
    options: Optional[TableOptions] = None
    partitioning: Optional[PartitionOptions] = None
    temporary: bool = False
    if_not_exists: bool = False

    def get_column(self, name: ColumnName) -> Optional[Column]:
        """Get a column by name."""
        for col in self.columns:
            if col.name == name:
                return col
        return None


@dataclass
class Schema:
    """All tables parsed from one dump, keyed by name in source order."""

    tables: dict[TableName, Table] = field(default_factory=dict)

    def get_table(self, name: TableName) -> Optional[Table]:
        """Get a table by name."""
        return self.tables.get(name)

    def table_names(self) -> set[TableName]:
        """Get all table names."""
        return set(self.tables.keys())
