"""Core type definitions for mysqldiff."""

from enum import Enum
from typing import TypeAlias

TableName: TypeAlias = str
ColumnName: TypeAlias = str
IndexName: TypeAlias = str

__all__ = [
    "TableName",
    "ColumnName",
    "IndexName",
    "ChangeType",
    "TokenKind",
]


class ChangeType(Enum):
    """Kinds of change recorded for a matched (old, new) definition pair."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


class TokenKind(Enum):
    """Lexical categories produced by the scanner."""

    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    QUOTED_IDENTIFIER = "QUOTED_IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    SEMICOLON = ";"
    EQUALS = "="
    DOT = "."
    DIRECTIVE = "DIRECTIVE"
    EOF = "EOF"
