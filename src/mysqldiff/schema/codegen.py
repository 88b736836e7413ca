"""Generate ALTER TABLE statements from table change-sets."""

from typing import Optional

from mysqldiff.exceptions import CodegenError
from mysqldiff.schema.changes import PartitionDiff, TableDiff, TableOptionsDiff
from mysqldiff.schema.models import (
    CheckConstraint,
    Column,
    ForeignKey,
    ForeignKeyReference,
    Index,
    IndexColumn,
    IndexKind,
    PartitionOptions,
    PrimaryKey,
    Table,
    TableOptions,
)
from mysqldiff.types import ChangeType

__all__ = [
    "AlterStatementGenerator",
    "format_column_definition",
    "format_create_table",
    "quote_identifier",
]

_OPTION_KEYWORDS = {
    "character_set": "DEFAULT CHARSET",
    "data_directory": "DATA DIRECTORY",
    "index_directory": "INDEX DIRECTORY",
}

_QUOTED_OPTIONS = {
    "comment",
    "data_directory",
    "index_directory",
    "encryption",
    "compression",
}


def quote_identifier(name: str) -> str:
    """Wrap a name in backticks, doubling any embedded backtick."""
    return "`" + name.replace("`", "``") + "`"


def _sql_string(value: str) -> str:
    """Quote a string value captured by the parser.

    Captured values keep their source escaping, so they are not escaped again.
    """
    return f"'{value}'"


def _column_list(names) -> str:
    return ", ".join(quote_identifier(name) for name in names)


def _format_index_column(column: IndexColumn) -> str:
    # functional key parts are stored as expression text
    if "(" in column.name or " " in column.name:
        result = f"({column.name})"
    else:
        result = quote_identifier(column.name)
    if column.length is not None:
        result += f"({column.length})"
    if column.direction:
        result += f" {column.direction}"
    return result


def _format_reference(reference: ForeignKeyReference) -> str:
    result = f"REFERENCES {quote_identifier(reference.table)}"
    if reference.columns:
        result += f" ({_column_list(reference.columns)})"
    if reference.on_delete:
        result += f" ON DELETE {reference.on_delete}"
    if reference.on_update:
        result += f" ON UPDATE {reference.on_update}"
    return result


def format_column_definition(column: Column) -> str:
    """Render a column definition as it appears in CREATE/ALTER TABLE."""
    parts = [quote_identifier(column.name), str(column.data_type)]

    if column.character_set:
        parts.append(f"CHARACTER SET {column.character_set}")
    if column.collation:
        parts.append(f"COLLATE {column.collation}")
    if column.generated is not None:
        parts.append(
            f"GENERATED ALWAYS AS ({column.generated.expression}) "
            f"{column.generated.storage}"
        )
    if column.nullable is not None:
        parts.append("NULL" if column.nullable else "NOT NULL")
    if column.default is not None:
        parts.append(f"DEFAULT {column.default}")
    if column.on_update is not None:
        parts.append(f"ON UPDATE {column.on_update}")
    if column.auto_increment:
        parts.append("AUTO_INCREMENT")
    if column.unique:
        parts.append("UNIQUE")
    if column.primary_key:
        parts.append("PRIMARY KEY")
    if column.visible is not None:
        parts.append("VISIBLE" if column.visible else "INVISIBLE")
    if column.comment is not None:
        parts.append(f"COMMENT {_sql_string(column.comment)}")
    if column.column_format:
        parts.append(f"COLUMN_FORMAT {column.column_format}")
    if column.storage:
        parts.append(f"STORAGE {column.storage}")
    if column.reference is not None:
        parts.append(_format_reference(column.reference))

    return " ".join(parts)


def _format_primary_key(pk: PrimaryKey) -> str:
    columns = ", ".join(_format_index_column(col) for col in pk.columns)
    result = f"PRIMARY KEY ({columns})"
    if pk.name:
        result = f"CONSTRAINT {quote_identifier(pk.name)} {result}"
    if pk.using:
        result += f" USING {pk.using}"
    if pk.comment is not None:
        result += f" COMMENT {_sql_string(pk.comment)}"
    return result


def _format_index(index: Index) -> str:
    prefix = {
        IndexKind.INDEX: "INDEX",
        IndexKind.UNIQUE: "UNIQUE INDEX",
        IndexKind.FULLTEXT: "FULLTEXT INDEX",
        IndexKind.SPATIAL: "SPATIAL INDEX",
    }[index.kind]
    parts = [prefix]
    if index.name:
        parts.append(quote_identifier(index.name))
    parts.append(f"({', '.join(_format_index_column(col) for col in index.columns)})")

    if index.using:
        parts.append(f"USING {index.using}")
    if index.key_block_size is not None:
        parts.append(f"KEY_BLOCK_SIZE={index.key_block_size}")
    if index.parser:
        parts.append(f"WITH PARSER {index.parser}")
    if index.comment is not None:
        parts.append(f"COMMENT {_sql_string(index.comment)}")
    if index.visible is False:
        parts.append("INVISIBLE")
    if index.engine_attribute is not None:
        parts.append(f"ENGINE_ATTRIBUTE={_sql_string(index.engine_attribute)}")
    return " ".join(parts)


def _format_foreign_key(fk: ForeignKey) -> str:
    result = f"FOREIGN KEY ({_column_list(fk.columns)}) {_format_reference(fk.reference)}"
    if fk.name:
        result = f"CONSTRAINT {quote_identifier(fk.name)} {result}"
    return result


def _format_check(check: CheckConstraint) -> str:
    result = f"CHECK ({check.expression})"
    if check.name:
        result = f"CONSTRAINT {quote_identifier(check.name)} {result}"
    if check.enforced is not None:
        result += " ENFORCED" if check.enforced else " NOT ENFORCED"
    return result


def _format_table_options(options: TableOptions) -> list[str]:
    rendered = []
    for name in TableOptions.option_names():
        value = getattr(options, name)
        if value is None:
            continue
        keyword = _OPTION_KEYWORDS.get(name, name.upper())
        if name == "union":
            rendered.append(f"UNION=({_column_list(value)})")
        elif name in _QUOTED_OPTIONS:
            rendered.append(f"{keyword}={_sql_string(value)}")
        else:
            rendered.append(f"{keyword}={value}")
    return rendered


def _format_partitioning(partitioning: PartitionOptions) -> str:
    parts = ["PARTITION BY"]
    if partitioning.linear:
        parts.append("LINEAR")
    parts.append(partitioning.method)

    if partitioning.expression is not None:
        parts.append(f"({partitioning.expression})")
    elif partitioning.method == "KEY":
        parts.append(f"({_column_list(partitioning.columns)})")
    elif partitioning.columns:
        parts.append(f"COLUMNS({_column_list(partitioning.columns)})")
    else:
        raise CodegenError(
            f"Partitioning by {partitioning.method} needs an expression or columns"
        )

    if partitioning.partition_count is not None:
        parts.append(f"PARTITIONS {partitioning.partition_count}")

    if partitioning.partitions:
        definitions = []
        for definition in partitioning.partitions:
            text = f"PARTITION {quote_identifier(definition.name)}"
            if definition.values and partitioning.method == "RANGE":
                text += f" VALUES LESS THAN ({', '.join(definition.values)})"
            elif definition.values and partitioning.method == "LIST":
                text += f" VALUES IN ({', '.join(definition.values)})"
            if definition.comment is not None:
                text += f" COMMENT {_sql_string(definition.comment)}"
            definitions.append(text)
        parts.append(f"({', '.join(definitions)})")

    return " ".join(parts)


def format_create_table(table: Table) -> str:
    """Render a full CREATE TABLE statement for a table definition."""
    elements = [format_column_definition(col) for col in table.columns]
    if table.primary_key is not None:
        elements.append(_format_primary_key(table.primary_key))
    elements.extend(_format_index(index) for index in table.indexes)
    elements.extend(_format_foreign_key(fk) for fk in table.foreign_keys)
    elements.extend(_format_check(check) for check in table.check_constraints)

    header = "CREATE TEMPORARY TABLE" if table.temporary else "CREATE TABLE"
    if table.if_not_exists:
        header += " IF NOT EXISTS"
    body = ",\n".join(f"  {element}" for element in elements)
    sql = f"{header} {quote_identifier(table.name)} (\n{body}\n)"

    if table.options is not None:
        options = _format_table_options(table.options)
        if options:
            sql += " " + " ".join(options)
    if table.partitioning is not None:
        sql += "\n" + _format_partitioning(table.partitioning)
    return sql + ";"


class AlterStatementGenerator:
    """Generate the statements that turn the old table into the new one."""

    def __init__(self, include_drops: bool = False, include_creates: bool = False):
        self.include_drops = include_drops
        self.include_creates = include_creates

    def generate(self, table_diff: TableDiff) -> list[str]:
        """Generate SQL statements for one table diff.

        Raises:
            CodegenError: If a change cannot be expressed as ALTER TABLE
        """
        if table_diff.change_type is ChangeType.ADDED:
            if self.include_creates:
                return [format_create_table(table_diff.new_table)]
            return []
        if table_diff.change_type is ChangeType.REMOVED:
            if self.include_drops:
                return [f"DROP TABLE IF EXISTS {quote_identifier(table_diff.name)};"]
            return []
        if table_diff.old_table is None:
            return []

        statements: list[str] = []
        table_name = table_diff.old_table.name
        if table_diff.table_name_changed:
            new_name = table_diff.new_table.name
            statements.append(
                f"ALTER TABLE {quote_identifier(table_name)} "
                f"RENAME TO {quote_identifier(new_name)};"
            )
            table_name = new_name

        clauses: list[str] = []
        clauses.extend(self._column_clauses(table_diff))
        clauses.extend(self._primary_key_clauses(table_diff))
        clauses.extend(self._index_clauses(table_diff))
        clauses.extend(self._foreign_key_clauses(table_diff))
        if clauses:
            statements.append(
                f"ALTER TABLE {quote_identifier(table_name)}\n  "
                + ",\n  ".join(clauses)
                + ";"
            )

        if table_diff.table_options_diff is not None:
            options_sql = self._table_options_statement(
                table_name, table_diff.table_options_diff
            )
            if options_sql:
                statements.append(options_sql)

        if table_diff.partition_diff is not None:
            statements.extend(
                self._partition_statements(table_name, table_diff.partition_diff)
            )

        return statements

    def _column_clauses(self, table_diff: TableDiff) -> list[str]:
        clauses = []
        for column_diff in table_diff.column_diffs:
            if column_diff.change_type is ChangeType.ADDED:
                clauses.append(f"ADD COLUMN {format_column_definition(column_diff.new)}")
            elif column_diff.change_type is ChangeType.REMOVED:
                clauses.append(f"DROP COLUMN {quote_identifier(column_diff.name)}")
            else:
                clauses.append(
                    f"MODIFY COLUMN {format_column_definition(column_diff.new)}"
                )
        return clauses

    def _primary_key_clauses(self, table_diff: TableDiff) -> list[str]:
        pk_diff = table_diff.primary_key_diff
        if pk_diff is None:
            return []
        clauses = []
        if pk_diff.change_type in (ChangeType.REMOVED, ChangeType.MODIFIED):
            clauses.append("DROP PRIMARY KEY")
        if pk_diff.change_type in (ChangeType.ADDED, ChangeType.MODIFIED):
            clauses.append(f"ADD {_format_primary_key(pk_diff.new)}")
        return clauses

    def _drop_index_clause(self, index: Index) -> str:
        # MySQL names an unnamed index after its first column.
        name = index.name or index.columns[0].name
        return f"DROP INDEX {quote_identifier(name)}"

    def _index_clauses(self, table_diff: TableDiff) -> list[str]:
        clauses = []
        for index_diff in table_diff.index_diffs:
            if index_diff.change_type in (ChangeType.REMOVED, ChangeType.MODIFIED):
                clauses.append(self._drop_index_clause(index_diff.old))
            if index_diff.change_type in (ChangeType.ADDED, ChangeType.MODIFIED):
                clauses.append(f"ADD {_format_index(index_diff.new)}")
        return clauses

    def _foreign_key_clauses(self, table_diff: TableDiff) -> list[str]:
        clauses = []
        for fk_diff in table_diff.foreign_key_diffs:
            if fk_diff.change_type in (ChangeType.REMOVED, ChangeType.MODIFIED):
                if not fk_diff.old.name:
                    raise CodegenError(
                        f"Cannot drop unnamed foreign key on "
                        f"({', '.join(fk_diff.old.columns)}) in table '{table_diff.name}'"
                    )
                clauses.append(f"DROP FOREIGN KEY {quote_identifier(fk_diff.old.name)}")
            if fk_diff.change_type in (ChangeType.ADDED, ChangeType.MODIFIED):
                clauses.append(f"ADD {_format_foreign_key(fk_diff.new)}")
        return clauses

    def _table_options_statement(
        self, table_name: str, options_diff: TableOptionsDiff
    ) -> Optional[str]:
        if options_diff.change_type is ChangeType.REMOVED:
            return None
        options = _format_table_options(options_diff.new)
        if not options:
            return None
        return f"ALTER TABLE {quote_identifier(table_name)} {' '.join(options)};"

    def _partition_statements(
        self, table_name: str, partition_diff: PartitionDiff
    ) -> list[str]:
        quoted = quote_identifier(table_name)
        statements = []
        if partition_diff.change_type in (ChangeType.REMOVED, ChangeType.MODIFIED):
            statements.append(f"ALTER TABLE {quoted} REMOVE PARTITIONING;")
        if partition_diff.change_type in (ChangeType.ADDED, ChangeType.MODIFIED):
            statements.append(
                f"ALTER TABLE {quoted} {_format_partitioning(partition_diff.new)};"
            )
        return statements
