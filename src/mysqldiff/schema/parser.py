"""Recursive-descent parser for MySQL CREATE TABLE statements."""

from typing import Any, Optional, Sequence

from mysqldiff.exceptions import SqlSyntaxError
from mysqldiff.schema.models import (
    CheckConstraint,
    Column,
    DataType,
    ForeignKey,
    ForeignKeyReference,
    GeneratedColumn,
    Index,
    IndexColumn,
    IndexKind,
    PartitionOptions,
    PrimaryKey,
    Table,
    TableOptions,
)
from mysqldiff.schema.scanner import Token, tokenize
from mysqldiff.types import TokenKind

__all__ = [
    "DATA_TYPES",
    "NAME_KEYWORDS",
    "CreateTableParser",
    "parse_create_table",
    "parse_table_sql",
]

DATA_TYPES = frozenset(
    {
        "INT", "INTEGER", "TINYINT", "SMALLINT", "MEDIUMINT", "BIGINT",
        "DECIMAL", "NUMERIC", "DEC", "FLOAT", "DOUBLE", "REAL", "BIT", "BOOL",
        "BOOLEAN", "SERIAL", "DATE", "DATETIME", "TIMESTAMP", "TIME", "YEAR",
        "CHAR", "VARCHAR", "BINARY", "VARBINARY", "TINYTEXT", "TEXT",
        "MEDIUMTEXT", "LONGTEXT", "TINYBLOB", "BLOB", "MEDIUMBLOB", "LONGBLOB",
        "JSON", "ENUM", "SET", "GEOMETRY", "POINT", "LINESTRING", "POLYGON",
        "MULTIPOINT", "MULTILINESTRING", "MULTIPOLYGON", "GEOMETRYCOLLECTION",
    }
)

# Keywords MySQL accepts as unquoted table, column and index names.
NAME_KEYWORDS = frozenset(
    {
        "DATA", "DIRECTORY", "COMPRESSION", "ENCRYPTION", "TABLESPACE",
        "STATS_PERSISTENT", "STATS_AUTO_RECALC", "STATS_SAMPLE_PAGES",
        "PACK_KEYS", "CHECKSUM", "DELAY_KEY_WRITE", "MEMORY", "DISK", "FIXED",
        "DYNAMIC", "COMPRESSED", "FIRST", "LAST", "ACTION", "COMMENT", "ENGINE",
        "STORAGE", "TEXT", "DATE", "TIME", "TIMESTAMP", "YEAR", "BIT", "JSON",
        "POINT", "LIST", "HASH", "NO", "NONE", "ALGORITHM", "PARSER", "VISIBLE",
        "INVISIBLE", "TEMPORARY", "ENFORCED", "SIGNED", "SERIAL", "ENUM",
        "GEOMETRY", "LINESTRING", "POLYGON", "LESS", "THAN", "VALUES",
        "PARTITIONS", "ROW_FORMAT", "KEY_BLOCK_SIZE", "MAX_ROWS", "MIN_ROWS",
        "INSERT_METHOD", "ENGINE_ATTRIBUTE", "INPLACE", "COLUMN_FORMAT",
        "MAXVALUE", "LINEAR", "VIRTUAL", "STORED", "ALWAYS", "BOOL", "BOOLEAN",
    }
)

_TABLE_OPTION_FIELDS = {
    "ENGINE": "engine",
    "AUTO_INCREMENT": "auto_increment",
    "CHARSET": "character_set",
    "COLLATE": "collation",
    "COMMENT": "comment",
    "ROW_FORMAT": "row_format",
    "KEY_BLOCK_SIZE": "key_block_size",
    "MAX_ROWS": "max_rows",
    "MIN_ROWS": "min_rows",
    "TABLESPACE": "tablespace",
    "ENCRYPTION": "encryption",
    "COMPRESSION": "compression",
    "STATS_PERSISTENT": "stats_persistent",
    "STATS_AUTO_RECALC": "stats_auto_recalc",
    "STATS_SAMPLE_PAGES": "stats_sample_pages",
    "PACK_KEYS": "pack_keys",
    "CHECKSUM": "checksum",
    "DELAY_KEY_WRITE": "delay_key_write",
    "INSERT_METHOD": "insert_method",
}

_INDEX_KINDS = {
    "INDEX": IndexKind.INDEX,
    "KEY": IndexKind.INDEX,
    "UNIQUE": IndexKind.UNIQUE,
    "FULLTEXT": IndexKind.FULLTEXT,
    "SPATIAL": IndexKind.SPATIAL,
}

_PARTITION_METHODS = ("HASH", "KEY", "RANGE", "LIST")

# Functions MySQL accepts without parentheses in DEFAULT and ON UPDATE.
_NILADIC_FUNCTIONS = frozenset(
    {
        "CURRENT_TIMESTAMP", "CURRENT_DATE", "CURRENT_TIME", "LOCALTIME",
        "LOCALTIMESTAMP", "UTC_TIMESTAMP", "UTC_DATE", "UTC_TIME",
    }
)

# Words after which "(" opens a sub-expression rather than a call.
_OPERATOR_WORDS = frozenset(
    {
        "AND", "OR", "XOR", "NOT", "IN", "IS", "AS", "LIKE", "BETWEEN",
        "CASE", "WHEN", "THEN", "ELSE", "EXISTS", "REGEXP", "DIV", "MOD",
    }
)


class CreateTableParser:
    """Parse the tokens of one CREATE TABLE statement into a Table.

    When ``source`` (the text the tokens were scanned from) is supplied,
    expressions and function defaults are captured as raw source slices;
    otherwise they are rebuilt from token text.
    """

    def __init__(self, tokens: Sequence[Token], source: Optional[str] = None):
        self._tokens = list(tokens)
        if not self._tokens or self._tokens[-1].kind is not TokenKind.EOF:
            last = self._tokens[-1] if self._tokens else None
            offset = last.offset + len(last.text) if last else 0
            line = last.line if last else 1
            column = last.column + len(last.text) if last else 1
            self._tokens.append(Token(TokenKind.EOF, "", offset, line, column))
        self._source = source
        self._pos = 0
        self._table_name: Optional[str] = None
        self._columns: list[Column] = []
        self._primary_key: Optional[PrimaryKey] = None
        self._indexes: list[Index] = []
        self._foreign_keys: list[ForeignKey] = []
        self._checks: list[CheckConstraint] = []

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        token = self._current
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return token

    def _match(self, *kinds: TokenKind) -> bool:
        return self._current.kind in kinds

    def _match_keyword(self, *words: str) -> bool:
        return self._current.keyword in words

    def _error(self, expected: TokenKind | str) -> SqlSyntaxError:
        token = self._current
        return SqlSyntaxError(
            expected,
            token.kind,
            token.text,
            token.line,
            token.column,
            table=self._table_name,
        )

    def _consume(self, kind: TokenKind) -> Token:
        if not self._match(kind):
            raise self._error(kind)
        return self._advance()

    def _consume_integer(self) -> int:
        if not (self._match(TokenKind.NUMBER) and self._current.text.isdigit()):
            raise self._error("integer")
        return int(self._advance().text)

    def _consume_keyword(self, word: str) -> Token:
        if not self._match_keyword(word):
            raise self._error(word)
        return self._advance()

    def _skip_equals(self) -> None:
        if self._match(TokenKind.EQUALS):
            self._advance()

    def _is_name(self) -> bool:
        if self._match(TokenKind.IDENTIFIER, TokenKind.QUOTED_IDENTIFIER):
            return True
        return self._current.keyword in NAME_KEYWORDS

    def _consume_name(self, expected: str = "identifier") -> str:
        if not self._is_name():
            raise self._error(expected)
        return self._advance().text

    def _consume_qualified_name(self, expected: str) -> str:
        """Consume ``name`` or ``schema.name`` and return the last part."""
        name = self._consume_name(expected)
        while self._match(TokenKind.DOT):
            self._advance()
            name = self._consume_name(expected)
        return name

    def _consume_group(self) -> list[Token]:
        """Consume a balanced parenthesized group, parentheses included."""
        group = [self._consume(TokenKind.LPAREN)]
        depth = 1
        while depth:
            if self._match(TokenKind.EOF):
                raise self._error(TokenKind.RPAREN)
            token = self._advance()
            if token.kind is TokenKind.LPAREN:
                depth += 1
            elif token.kind is TokenKind.RPAREN:
                depth -= 1
            group.append(token)
        return group

    def _span_text(self, tokens: Sequence[Token]) -> str:
        if not tokens:
            return ""
        if self._source is None:
            return _join_tokens(tokens)
        first, last = tokens[0], tokens[-1]
        end = last.offset + _source_length(last)
        return self._source[first.offset : end].strip()

    def _parse_parenthesized_expression(self) -> str:
        group = self._consume_group()
        return self._span_text(group[1:-1])

    def _parse_name_list(self) -> tuple[str, ...]:
        self._consume(TokenKind.LPAREN)
        names = []
        while not self._match(TokenKind.RPAREN):
            names.append(self._consume_name("column name"))
            if not self._match(TokenKind.COMMA):
                break
            self._advance()
        self._consume(TokenKind.RPAREN)
        return tuple(names)

    def parse(self) -> Table:
        """Parse ``CREATE [TEMPORARY] TABLE [IF NOT EXISTS] name (...) ...``."""
        self._consume_keyword("CREATE")
        temporary = False
        if self._match_keyword("TEMPORARY"):
            self._advance()
            temporary = True
        self._consume_keyword("TABLE")

        if_not_exists = False
        if self._match_keyword("IF"):
            self._advance()
            self._consume_keyword("NOT")
            self._consume_keyword("EXISTS")
            if_not_exists = True

        self._table_name = self._consume_qualified_name("table name")

        self._consume(TokenKind.LPAREN)
        self._parse_table_elements()
        self._consume(TokenKind.RPAREN)

        options = None
        if not self._match(TokenKind.EOF, TokenKind.SEMICOLON):
            options = self._parse_table_options()

        partitioning = None
        if self._match_keyword("PARTITION"):
            partitioning = self._parse_partition_options()

        return Table(
            name=self._table_name,
            columns=tuple(self._columns),
            primary_key=self._primary_key,
            indexes=tuple(self._indexes),
            foreign_keys=tuple(self._foreign_keys),
            check_constraints=tuple(self._checks),
            options=options,
            partitioning=partitioning,
            temporary=temporary,
            if_not_exists=if_not_exists,
        )

    def _parse_table_elements(self) -> None:
        while not self._match(TokenKind.RPAREN):
            constraint_name = None
            if self._match_keyword("CONSTRAINT"):
                self._advance()
                if self._is_name():
                    constraint_name = self._advance().text

            keyword = self._current.keyword
            if keyword == "PRIMARY":
                self._primary_key = self._parse_primary_key(constraint_name)
            elif keyword in _INDEX_KINDS:
                self._indexes.append(self._parse_index(constraint_name))
            elif keyword == "FOREIGN":
                self._foreign_keys.append(self._parse_foreign_key(constraint_name))
            elif keyword == "CHECK":
                self._checks.append(self._parse_check(constraint_name))
            elif constraint_name is not None:
                raise self._error("constraint definition")
            else:
                self._columns.append(self._parse_column())

            if not self._match(TokenKind.COMMA):
                break
            self._advance()

    def _parse_column(self) -> Column:
        name = self._consume_name("column name")
        data_type = self._parse_data_type()
        attrs: dict[str, Any] = {}

        while not self._match(TokenKind.COMMA, TokenKind.RPAREN, TokenKind.EOF):
            keyword = self._current.keyword
            if keyword == "NOT":
                self._advance()
                if self._match_keyword("NULL"):
                    self._advance()
                    attrs["nullable"] = False
            elif keyword == "NULL":
                self._advance()
                attrs["nullable"] = True
            elif keyword == "DEFAULT":
                self._advance()
                attrs["default"] = self._parse_value_expression("default value")
            elif keyword == "AUTO_INCREMENT":
                self._advance()
                attrs["auto_increment"] = True
            elif keyword == "UNIQUE":
                self._advance()
                if self._match_keyword("KEY"):
                    self._advance()
                attrs["unique"] = True
            elif keyword in ("PRIMARY", "KEY"):
                self._advance()
                if self._match_keyword("KEY"):
                    self._advance()
                attrs["primary_key"] = True
            elif keyword == "COMMENT":
                self._advance()
                if self._match(TokenKind.STRING):
                    attrs["comment"] = self._advance().value
            elif keyword == "COLLATE":
                self._advance()
                self._skip_equals()
                attrs["collation"] = self._parse_word_value()
            elif keyword in ("CHARACTER", "CHARSET"):
                self._advance()
                if keyword == "CHARACTER":
                    self._consume_keyword("SET")
                attrs["character_set"] = self._parse_word_value()
            elif keyword in ("GENERATED", "AS"):
                attrs["generated"] = self._parse_generated()
            elif keyword in ("VISIBLE", "INVISIBLE"):
                self._advance()
                attrs["visible"] = keyword == "VISIBLE"
            elif keyword == "ON":
                self._advance()
                if self._match_keyword("UPDATE"):
                    self._advance()
                    attrs["on_update"] = self._parse_value_expression("on update value")
            elif keyword == "COLUMN_FORMAT":
                self._advance()
                attrs["column_format"] = self._parse_word_value().upper()
            elif keyword == "STORAGE":
                self._advance()
                attrs["storage"] = self._parse_word_value().upper()
            elif keyword == "REFERENCES":
                attrs["reference"] = self._parse_reference(require_columns=False)
            elif keyword == "CONSTRAINT":
                self._advance()
                check_name = self._advance().text if self._is_name() else None
                if self._match_keyword("CHECK"):
                    self._checks.append(self._parse_check(check_name))
            elif keyword == "CHECK":
                self._checks.append(self._parse_check(None))
            elif self._match(TokenKind.LPAREN):
                self._consume_group()
            else:
                self._advance()

        return Column(name=name, data_type=data_type, **attrs)

    def _parse_data_type(self) -> DataType:
        if self._current.keyword not in DATA_TYPES:
            raise self._error("data type")
        name = self._advance().keyword

        parameters: list[str] = []
        if self._match(TokenKind.LPAREN):
            self._advance()
            while not self._match(TokenKind.RPAREN):
                if self._match(
                    TokenKind.NUMBER,
                    TokenKind.STRING,
                    TokenKind.IDENTIFIER,
                    TokenKind.KEYWORD,
                ):
                    parameters.append(self._advance().text)
                if not self._match(TokenKind.COMMA):
                    break
                self._advance()
            self._consume(TokenKind.RPAREN)

        unsigned = zerofill = False
        while self._match_keyword("UNSIGNED", "SIGNED", "ZEROFILL"):
            keyword = self._advance().keyword
            if keyword == "UNSIGNED":
                unsigned = True
            elif keyword == "ZEROFILL":
                zerofill = True

        return DataType(
            name=name,
            parameters=tuple(parameters),
            unsigned=unsigned,
            zerofill=zerofill,
        )

    def _parse_value_expression(self, expected: str) -> str:
        """Capture a literal, keyword, function call or parenthesized expression."""
        token = self._current
        if self._match(TokenKind.NUMBER):
            self._advance()
            return self._sign_before(token) + token.text
        if self._match(TokenKind.STRING):
            self._advance()
            return token.text
        if self._match(TokenKind.LPAREN):
            return self._span_text(self._consume_group())
        if self._match(TokenKind.KEYWORD, TokenKind.IDENTIFIER):
            self._advance()
            adjacent = self._current.offset == token.offset + len(token.text)
            if self._match(TokenKind.STRING) and adjacent:
                # b'0101', x'ff' and charset introducers such as _utf8mb4'x'
                return token.text + self._advance().text
            if self._match(TokenKind.LPAREN):
                return self._span_text([token] + self._consume_group())
            if token.kind is TokenKind.IDENTIFIER and token.text.upper() in _NILADIC_FUNCTIONS:
                return token.text.upper()
            return token.keyword or token.text
        raise self._error(expected)

    def _sign_before(self, token: Token) -> str:
        """Return the ``-`` or ``+`` written directly before a number, if any."""
        if self._source is None or token.offset == 0:
            return ""
        sign = self._source[token.offset - 1]
        return sign if sign in "-+" else ""

    def _parse_word_value(self) -> str:
        if self._match(
            TokenKind.IDENTIFIER,
            TokenKind.QUOTED_IDENTIFIER,
            TokenKind.KEYWORD,
            TokenKind.STRING,
            TokenKind.NUMBER,
        ):
            return self._advance().value
        raise self._error(TokenKind.IDENTIFIER)

    def _parse_generated(self) -> GeneratedColumn:
        if self._match_keyword("GENERATED"):
            self._advance()
            self._consume_keyword("ALWAYS")
        self._consume_keyword("AS")
        expression = self._parse_parenthesized_expression()
        storage = "VIRTUAL"
        if self._match_keyword("VIRTUAL", "STORED"):
            storage = self._advance().keyword
        return GeneratedColumn(expression=expression, storage=storage)

    def _parse_index_columns(self) -> tuple[IndexColumn, ...]:
        self._consume(TokenKind.LPAREN)
        columns = []
        while not self._match(TokenKind.RPAREN):
            if self._match(TokenKind.LPAREN):
                # functional key part
                name = self._parse_parenthesized_expression()
            else:
                name = self._consume_name("column name")

            length = None
            if self._match(TokenKind.LPAREN):
                self._advance()
                length = self._consume_integer()
                self._consume(TokenKind.RPAREN)

            direction = None
            if self._match_keyword("ASC", "DESC"):
                direction = self._advance().keyword

            columns.append(IndexColumn(name=name, length=length, direction=direction))
            if not self._match(TokenKind.COMMA):
                break
            self._advance()
        self._consume(TokenKind.RPAREN)
        return tuple(columns)

    def _parse_using(self) -> str:
        self._consume_keyword("USING")
        return self._parse_word_value().upper()

    def _parse_index_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {}
        while True:
            keyword = self._current.keyword
            if keyword == "USING":
                options["using"] = self._parse_using()
            elif keyword == "KEY_BLOCK_SIZE":
                self._advance()
                self._skip_equals()
                options["key_block_size"] = self._consume_integer()
            elif keyword == "COMMENT":
                self._advance()
                options["comment"] = self._consume(TokenKind.STRING).value
            elif keyword in ("VISIBLE", "INVISIBLE"):
                self._advance()
                options["visible"] = keyword == "VISIBLE"
            elif keyword == "WITH":
                self._advance()
                self._consume_keyword("PARSER")
                options["parser"] = self._consume_name("parser name")
            elif keyword == "ENGINE_ATTRIBUTE":
                self._advance()
                self._skip_equals()
                options["engine_attribute"] = self._consume(TokenKind.STRING).value
            elif keyword in ("ALGORITHM", "LOCK"):
                self._advance()
                self._skip_equals()
                options[keyword.lower()] = self._parse_word_value().upper()
            else:
                return options

    def _parse_primary_key(self, constraint_name: Optional[str]) -> PrimaryKey:
        self._consume_keyword("PRIMARY")
        self._consume_keyword("KEY")
        options: dict[str, Any] = {}
        if self._match_keyword("USING"):
            options["using"] = self._parse_using()
        columns = self._parse_index_columns()
        options.update(self._parse_index_options())
        return PrimaryKey(
            columns=columns,
            name=constraint_name,
            using=options.get("using"),
            comment=options.get("comment"),
        )

    def _parse_index(self, constraint_name: Optional[str]) -> Index:
        kind = _INDEX_KINDS[self._advance().keyword]
        if kind is not IndexKind.INDEX and self._match_keyword("INDEX", "KEY"):
            self._advance()

        name = None
        if self._is_name():
            name = self._advance().text
        if name is None:
            name = constraint_name

        options: dict[str, Any] = {}
        if self._match_keyword("USING"):
            options["using"] = self._parse_using()
        columns = self._parse_index_columns()
        options.update(self._parse_index_options())
        return Index(columns=columns, kind=kind, name=name, **options)

    def _parse_referential_action(self) -> str:
        keyword = self._current.keyword
        if keyword in ("CASCADE", "RESTRICT"):
            self._advance()
            return keyword
        if keyword == "SET":
            self._advance()
            if self._match_keyword("NULL", "DEFAULT"):
                return f"SET {self._advance().keyword}"
        elif keyword == "NO":
            self._advance()
            if self._match_keyword("ACTION"):
                self._advance()
                return "NO ACTION"
        raise self._error("referential action")

    def _parse_reference(self, require_columns: bool = True) -> ForeignKeyReference:
        self._consume_keyword("REFERENCES")
        table = self._consume_qualified_name("table name")
        columns: tuple[str, ...] = ()
        if require_columns or self._match(TokenKind.LPAREN):
            columns = self._parse_name_list()

        on_delete = on_update = None
        while self._match_keyword("ON"):
            self._advance()
            if self._match_keyword("DELETE"):
                self._advance()
                on_delete = self._parse_referential_action()
            elif self._match_keyword("UPDATE"):
                self._advance()
                on_update = self._parse_referential_action()
            else:
                raise self._error("DELETE or UPDATE")

        return ForeignKeyReference(
            table=table, columns=columns, on_delete=on_delete, on_update=on_update
        )

    def _parse_foreign_key(self, constraint_name: Optional[str]) -> ForeignKey:
        self._consume_keyword("FOREIGN")
        self._consume_keyword("KEY")
        name = None
        if self._is_name():
            name = self._advance().text
        columns = self._parse_name_list()
        reference = self._parse_reference()
        return ForeignKey(
            columns=columns,
            reference=reference,
            name=constraint_name if constraint_name is not None else name,
        )

    def _parse_check(self, constraint_name: Optional[str]) -> CheckConstraint:
        self._consume_keyword("CHECK")
        expression = self._parse_parenthesized_expression()
        enforced = None
        if self._match_keyword("NOT") and self._peek().keyword == "ENFORCED":
            self._advance()
            self._advance()
            enforced = False
        elif self._match_keyword("ENFORCED"):
            self._advance()
            enforced = True
        return CheckConstraint(
            expression=expression, name=constraint_name, enforced=enforced
        )

    def _parse_table_options(self) -> Optional[TableOptions]:
        values: dict[str, Any] = {}
        while not self._match(TokenKind.EOF, TokenKind.SEMICOLON):
            keyword = self._current.keyword
            if keyword == "PARTITION":
                break
            if keyword in ("DEFAULT", "STORAGE") or self._match(TokenKind.COMMA):
                self._advance()
                continue

            if keyword == "CHARACTER":
                self._advance()
                if not self._match_keyword("SET"):
                    continue
                keyword = "CHARSET"
            elif keyword in ("DATA", "INDEX"):
                self._advance()
                if not self._match_keyword("DIRECTORY"):
                    continue
                self._advance()
                self._skip_equals()
                if self._match(TokenKind.STRING):
                    values[f"{keyword.lower()}_directory"] = self._advance().value
                continue
            elif keyword == "UNION":
                self._advance()
                self._skip_equals()
                values["union"] = self._parse_name_list()
                continue

            field_name = _TABLE_OPTION_FIELDS.get(keyword or "")
            if field_name is None:
                self._advance()
                continue

            self._advance()
            self._skip_equals()
            if self._match(TokenKind.EOF, TokenKind.SEMICOLON):
                break
            token = self._advance()
            if field_name in TableOptions.INTEGER_OPTIONS:
                digits = token.value.lstrip("+-")
                if token.kind in (TokenKind.NUMBER, TokenKind.STRING) and digits.isdigit():
                    values[field_name] = int(token.value)
                else:
                    values[field_name] = None
            else:
                values[field_name] = token.value

        options = TableOptions(**values)
        if options.is_empty():
            return None
        return options

    def _parse_partition_options(self) -> PartitionOptions:
        self._consume_keyword("PARTITION")
        self._consume_keyword("BY")

        linear = False
        if self._match_keyword("LINEAR"):
            self._advance()
            linear = True

        if not self._match_keyword(*_PARTITION_METHODS):
            raise self._error("partition method")
        method = self._advance().keyword

        use_columns = method == "KEY"
        if self._match_keyword("COLUMNS"):
            self._advance()
            use_columns = True
        if method == "KEY" and self._match_keyword("ALGORITHM"):
            self._advance()
            self._skip_equals()
            self._consume(TokenKind.NUMBER)

        expression = None
        columns: tuple[str, ...] = ()
        if self._match(TokenKind.LPAREN):
            if use_columns:
                columns = self._parse_name_list()
            else:
                expression = self._parse_parenthesized_expression()

        partition_count = None
        if self._match_keyword("PARTITIONS"):
            self._advance()
            partition_count = self._consume_integer()

        while not self._match(TokenKind.EOF, TokenKind.SEMICOLON):
            self._advance()

        return PartitionOptions(
            method=method,
            linear=linear,
            expression=expression,
            columns=columns,
            partition_count=partition_count,
        )


def parse_create_table(tokens: Sequence[Token], source: Optional[str] = None) -> Table:
    """Parse one CREATE TABLE statement.

    Args:
        tokens: Tokens of a single statement, without the trailing ``;``
        source: Text the tokens were scanned from, used for raw expression text

    Returns:
        The parsed Table

    Raises:
        SqlSyntaxError: If the tokens do not form a CREATE TABLE statement
    """
    return CreateTableParser(tokens, source=source).parse()


def parse_table_sql(sql: str) -> Table:
    """Scan and parse a single CREATE TABLE statement given as text."""
    return parse_create_table(tokenize(sql), source=sql)


def _source_length(token: Token) -> int:
    if token.kind is TokenKind.QUOTED_IDENTIFIER:
        return len(token.text) + 2
    return len(token.text)


def _render_token(token: Token) -> str:
    if token.kind is TokenKind.QUOTED_IDENTIFIER:
        return f"`{token.text}`"
    return token.text


def _join_tokens(tokens: Sequence[Token]) -> str:
    """Rebuild expression text from tokens with conventional spacing."""
    parts: list[str] = []
    previous: Optional[Token] = None
    for token in tokens:
        if previous is not None and _needs_space(previous, token):
            parts.append(" ")
        parts.append(_render_token(token))
        previous = token
    return "".join(parts)


def _needs_space(previous: Token, token: Token) -> bool:
    if previous.kind in (TokenKind.LPAREN, TokenKind.DOT):
        return False
    if token.kind in (TokenKind.RPAREN, TokenKind.COMMA, TokenKind.DOT):
        return False
    if token.kind is TokenKind.LPAREN:
        is_word = previous.kind in (
            TokenKind.IDENTIFIER,
            TokenKind.KEYWORD,
            TokenKind.QUOTED_IDENTIFIER,
        )
        return not is_word or previous.text.upper() in _OPERATOR_WORDS
    return True
