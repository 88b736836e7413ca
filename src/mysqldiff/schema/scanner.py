"""Lexical scanner for MySQL dump text.

The scanner never fails. Characters it cannot classify are dropped, so dumps
containing constructs this tool does not model still tokenize cleanly.

Rules, in priority order:

- whitespace is skipped
- ``--`` and ``#`` start a comment running to the end of the line
- ``/*! ... */`` is a MySQL conditional directive and becomes a DIRECTIVE token
- ``/* ... */`` is a block comment and is skipped
- backtick spans become QUOTED_IDENTIFIER tokens (no escapes inside)
- single/double quoted spans become STRING tokens; ``\\`` consumes the next
  character and a doubled quote continues the literal. The token text is the
  raw source slice including the quotes, nothing is unescaped.
- digit runs (with embedded ``.``) become NUMBER; a sign is dropped like any
  other unclassified character
- letter/underscore runs become KEYWORD or IDENTIFIER tokens
- ``( ) , ; = .`` are single-character tokens
- anything else is dropped
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from mysqldiff.types import TokenKind

__all__ = ["KEYWORDS", "Scanner", "Token", "scan", "tokenize"]

KEYWORDS: frozenset[str] = frozenset(
    {
        # statement
        "CREATE", "TABLE", "TEMPORARY", "IF", "NOT", "EXISTS", "LIKE", "AS",
        "SELECT", "IGNORE", "REPLACE", "DROP", "USE", "DATABASE", "SET",
        # data types
        "INT", "INTEGER", "TINYINT", "SMALLINT", "MEDIUMINT", "BIGINT",
        "DECIMAL", "NUMERIC", "DEC", "FLOAT", "DOUBLE", "REAL", "BIT", "BOOL",
        "BOOLEAN", "SERIAL", "DATE", "DATETIME", "TIMESTAMP", "TIME", "YEAR",
        "CHAR", "VARCHAR", "BINARY", "VARBINARY", "TINYTEXT", "TEXT",
        "MEDIUMTEXT", "LONGTEXT", "TINYBLOB", "BLOB", "MEDIUMBLOB", "LONGBLOB",
        "JSON", "ENUM", "GEOMETRY", "POINT", "LINESTRING", "POLYGON",
        "MULTIPOINT", "MULTILINESTRING", "MULTIPOLYGON", "GEOMETRYCOLLECTION",
        # column attributes
        "NULL", "DEFAULT", "AUTO_INCREMENT", "UNIQUE", "PRIMARY", "KEY",
        "COMMENT", "COLLATE", "CHARACTER", "CHARSET", "VISIBLE", "INVISIBLE",
        "GENERATED", "ALWAYS", "VIRTUAL", "STORED", "UNSIGNED", "SIGNED",
        "ZEROFILL", "TRUE", "FALSE", "ENFORCED",
        # indexes and constraints
        "INDEX", "FULLTEXT", "SPATIAL", "FOREIGN", "REFERENCES", "CHECK",
        "CONSTRAINT", "USING",
        # table options
        "ENGINE", "ROW_FORMAT", "TABLESPACE", "DATA", "DIRECTORY",
        "COMPRESSION", "ENCRYPTION", "KEY_BLOCK_SIZE", "MAX_ROWS", "MIN_ROWS",
        "STATS_PERSISTENT", "STATS_AUTO_RECALC", "STATS_SAMPLE_PAGES",
        "PACK_KEYS", "CHECKSUM", "DELAY_KEY_WRITE", "UNION", "INSERT_METHOD",
        # partitioning
        "PARTITION", "PARTITIONS", "BY", "HASH", "RANGE", "LIST", "COLUMNS",
        "VALUES", "LESS", "THAN", "IN", "MAXVALUE", "LINEAR",
        # referential actions
        "ON", "DELETE", "UPDATE", "CASCADE", "RESTRICT", "NO", "ACTION",
        # index options
        "ASC", "DESC", "WITH", "PARSER", "ALGORITHM", "LOCK",
        "ENGINE_ATTRIBUTE", "INPLACE", "NONE", "FIRST", "LAST",
        # column format and storage
        "COLUMN_FORMAT", "FIXED", "DYNAMIC", "STORAGE", "DISK", "MEMORY",
        "COMPRESSED",
    }
)

_PUNCTUATION = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    "=": TokenKind.EQUALS,
    ".": TokenKind.DOT,
}


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    ``offset`` is the character index of the token start; ``line`` and
    ``column`` are 1-based.
    """

    kind: TokenKind
    text: str
    offset: int
    line: int
    column: int

    @property
    def keyword(self) -> Optional[str]:
        """Upper-cased keyword, or None when the token is not a keyword."""
        if self.kind is TokenKind.KEYWORD:
            return self.text.upper()
        return None

    @property
    def value(self) -> str:
        """Text with surrounding quotes removed for STRING tokens."""
        if self.kind is TokenKind.STRING and len(self.text) >= 2:
            quote = self.text[0]
            if self.text.endswith(quote):
                return self.text[1:-1]
            return self.text[1:]
        return self.text


class Scanner:
    """Restartable token source over a block of dump text.

    Each iteration starts a fresh scan, so one Scanner can be walked any
    number of times. The final token is always EOF.
    """

    def __init__(self, text: str) -> None:
        self._text = text

    def __iter__(self) -> Iterator[Token]:
        return _scan(self._text)


def scan(text: str) -> Iterator[Token]:
    """Lazily tokenize text, ending with an EOF token."""
    return iter(Scanner(text))


def tokenize(text: str) -> list[Token]:
    """Tokenize text eagerly."""
    return list(Scanner(text))


def _scan(text: str) -> Iterator[Token]:
    pos = 0
    line = 1
    column = 1
    length = len(text)

    def advance_to(end: int) -> None:
        nonlocal pos, line, column
        chunk = text[pos:end]
        newlines = chunk.count("\n")
        if newlines:
            line += newlines
            column = len(chunk) - chunk.rfind("\n")
        else:
            column += len(chunk)
        pos = end

    while pos < length:
        ch = text[pos]
        nxt = text[pos + 1] if pos + 1 < length else ""

        if ch.isspace():
            end = pos + 1
            while end < length and text[end].isspace():
                end += 1
            advance_to(end)
            continue

        if (ch == "-" and nxt == "-") or ch == "#":
            end = text.find("\n", pos)
            advance_to(length if end == -1 else end)
            continue

        if ch == "/" and nxt == "*":
            end = text.find("*/", pos + 2)
            end = length if end == -1 else end + 2
            if text.startswith("/*!", pos):
                token = Token(TokenKind.DIRECTIVE, text[pos:end], pos, line, column)
                advance_to(end)
                yield token
            else:
                advance_to(end)
            continue

        if ch == "`":
            end = text.find("`", pos + 1)
            close = length if end == -1 else end + 1
            name = text[pos + 1 : length if end == -1 else end]
            token = Token(TokenKind.QUOTED_IDENTIFIER, name, pos, line, column)
            advance_to(close)
            yield token
            continue

        if ch in ("'", '"'):
            end = _string_end(text, pos)
            token = Token(TokenKind.STRING, text[pos:end], pos, line, column)
            advance_to(end)
            yield token
            continue

        if ch.isdigit():
            end = pos + 1
            while end < length and (text[end].isdigit() or text[end] == "."):
                end += 1
            token = Token(TokenKind.NUMBER, text[pos:end], pos, line, column)
            advance_to(end)
            yield token
            continue

        if ch.isalpha() or ch == "_":
            end = pos + 1
            while end < length and (
                text[end].isalnum() or text[end] in "_$"
            ):
                end += 1
            word = text[pos:end]
            kind = (
                TokenKind.KEYWORD if word.upper() in KEYWORDS else TokenKind.IDENTIFIER
            )
            token = Token(kind, word, pos, line, column)
            advance_to(end)
            yield token
            continue

        kind = _PUNCTUATION.get(ch)
        if kind is not None:
            token = Token(kind, ch, pos, line, column)
            advance_to(pos + 1)
            yield token
            continue

        advance_to(pos + 1)

    yield Token(TokenKind.EOF, "", pos, line, column)


def _string_end(text: str, start: int) -> int:
    """Return the index just past the string literal opening at start."""
    quote = text[start]
    length = len(text)
    pos = start + 1
    while pos < length:
        ch = text[pos]
        if ch == "\\":
            pos += 2
            continue
        if ch == quote:
            if pos + 1 < length and text[pos + 1] == quote:
                pos += 2
                continue
            return pos + 1
        pos += 1
    return length
