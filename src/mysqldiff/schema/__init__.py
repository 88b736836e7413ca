"""Table model, dump parsing and schema comparison modules."""

from mysqldiff.schema.changes import TableDiff
from mysqldiff.schema.diff import SchemaDiffer, TableDiffAnalyzer, compare_tables
from mysqldiff.schema.loader import load_dump, parse_dump
from mysqldiff.schema.models import (
    CheckConstraint,
    Column,
    DataType,
    ForeignKey,
    Index,
    PrimaryKey,
    Schema,
    Table,
    TableOptions,
)
from mysqldiff.schema.parser import parse_create_table, parse_table_sql

__all__ = [
    "CheckConstraint",
    "Column",
    "DataType",
    "ForeignKey",
    "Index",
    "PrimaryKey",
    "Schema",
    "SchemaDiffer",
    "Table",
    "TableDiff",
    "TableDiffAnalyzer",
    "TableOptions",
    "compare_tables",
    "load_dump",
    "parse_create_table",
    "parse_dump",
    "parse_table_sql",
]
