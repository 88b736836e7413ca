"""Exception classes for mysqldiff."""

from typing import Optional, Union

from mysqldiff.types import TokenKind

__all__ = [
    "MysqlDiffError",
    "SqlSyntaxError",
    "DumpLoadError",
    "ConfigError",
    "CodegenError",
]


class MysqlDiffError(Exception):
    """Base exception for mysqldiff."""


class SqlSyntaxError(MysqlDiffError):
    """A CREATE TABLE statement did not match the expected grammar.

    Args:
        expected: Token kind, keyword or description of what the parser wanted
        actual: Kind of the token actually found
        text: Source text of the token actually found
        line: 1-based line of the offending token
        column: 1-based column of the offending token
    """

    def __init__(
        self,
        expected: Union[TokenKind, str],
        actual: TokenKind,
        text: str,
        line: int,
        column: int,
        table: Optional[str] = None,
    ):
        self.expected = expected
        self.actual = actual
        self.text = text
        self.line = line
        self.column = column
        self.table = table
        expected_name = expected.value if isinstance(expected, TokenKind) else expected
        message = f"expected {expected_name}, got {actual.value}"
        if text:
            message += f" ({text!r})"
        message += f" at line {line}, column {column}"
        if table:
            message += f" in table '{table}'"
        super().__init__(message)


class DumpLoadError(MysqlDiffError):
    """Error reading or parsing a SQL dump file."""


class ConfigError(MysqlDiffError):
    """Error in configuration."""


class CodegenError(MysqlDiffError):
    """Error rendering ALTER statements from a diff."""
