"""Shared test helpers for mysqldiff tests."""

from mysqldiff.schema.models import (
    Column,
    DataType,
    ForeignKey,
    ForeignKeyReference,
    Index,
    IndexColumn,
    IndexKind,
    Schema,
    Table,
)
from mysqldiff.schema.parser import parse_table_sql


def parse_sql(sql: str) -> Table:
    """Parse a single CREATE TABLE statement."""
    return parse_table_sql(sql)


def make_column(name: str, type_name: str = "INT", *params: str, **kwargs) -> Column:
    """Create a Column with a simple data type."""
    return Column(name=name, data_type=DataType(type_name, tuple(params)), **kwargs)


def make_index(
    name: str | None,
    *columns: str,
    kind: IndexKind = IndexKind.INDEX,
    **kwargs,
) -> Index:
    """Create an Index over plain column names."""
    return Index(
        columns=tuple(IndexColumn(col) for col in columns),
        kind=kind,
        name=name,
        **kwargs,
    )


def make_foreign_key(
    name: str | None,
    columns: tuple[str, ...],
    ref_table: str,
    ref_columns: tuple[str, ...] = ("id",),
    **kwargs,
) -> ForeignKey:
    """Create a ForeignKey; extra kwargs go to the reference (on_delete, on_update)."""
    return ForeignKey(
        columns=columns,
        reference=ForeignKeyReference(table=ref_table, columns=ref_columns, **kwargs),
        name=name,
    )


def make_table(name: str, columns: list[Column] | None = None, **kwargs) -> Table:
    """Create a Table with a single id column by default."""
    if columns is None:
        columns = [make_column("id", "BIGINT", nullable=False)]
    return Table(name=name, columns=tuple(columns), **kwargs)


def make_schema(*tables: Table) -> Schema:
    """Create a Schema from tables."""
    return Schema(tables={t.name: t for t in tables})


def write_dump(path, *statements: str) -> None:
    """Write CREATE TABLE statements to a dump file."""
    path.write_text("\n\n".join(statements) + "\n", encoding="utf-8")
