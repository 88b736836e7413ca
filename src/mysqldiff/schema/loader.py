"""Load table definitions from MySQL dump text or files."""

import logging
from pathlib import Path
from typing import Iterable, Iterator

from mysqldiff.exceptions import DumpLoadError, SqlSyntaxError
from mysqldiff.schema.models import Schema, Table
from mysqldiff.schema.parser import parse_create_table
from mysqldiff.schema.scanner import Token, scan
from mysqldiff.types import TokenKind

__all__ = ["iter_statements", "is_create_table", "parse_dump", "load_dump"]

logger = logging.getLogger(__name__)


def iter_statements(tokens: Iterable[Token]) -> Iterator[list[Token]]:
    """Group tokens into statements.

    A statement starts at a CREATE keyword (closing whatever was
    accumulating) and ends at ``;`` or end of input. Directive tokens and
    tokens outside any CREATE statement are dropped.
    """
    current: list[Token] = []
    for token in tokens:
        if token.kind is TokenKind.DIRECTIVE:
            continue
        if token.kind is TokenKind.EOF:
            break
        if token.keyword == "CREATE":
            if current:
                yield current
            current = [token]
        elif token.kind is TokenKind.SEMICOLON:
            if current:
                yield current
            current = []
        elif current:
            current.append(token)
    if current:
        yield current


def is_create_table(statement: list[Token]) -> bool:
    """True for CREATE [TEMPORARY] TABLE statements."""
    words = [token.keyword for token in statement[:3]]
    if words[:1] != ["CREATE"]:
        return False
    if words[1:2] == ["TABLE"]:
        return True
    return words[1:3] == ["TEMPORARY", "TABLE"]


def parse_dump(text: str, strict: bool = False) -> list[Table]:
    """Parse every CREATE TABLE statement in dump text, in source order.

    Args:
        text: Full dump contents
        strict: Re-raise the first SqlSyntaxError instead of skipping the
                failing statement

    Returns:
        List of parsed tables

    Raises:
        SqlSyntaxError: If strict and a CREATE TABLE statement fails to parse
    """
    tables: list[Table] = []
    for statement in iter_statements(scan(text)):
        if not is_create_table(statement):
            logger.debug(
                "Skipping non-table statement at line %d", statement[0].line
            )
            continue
        try:
            tables.append(parse_create_table(statement, source=text))
        except SqlSyntaxError as exc:
            if strict:
                raise
            logger.warning("Skipping unparseable CREATE TABLE statement: %s", exc)
    return tables


def load_dump(dump_path: Path, strict: bool = False) -> Schema:
    """Load a dump file into a Schema keyed by table name."""
    try:
        text = Path(dump_path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DumpLoadError(f"Dump file does not exist: {dump_path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DumpLoadError(f"Failed to read dump file '{dump_path}': {exc}") from exc

    try:
        parsed = parse_dump(text, strict=strict)
    except SqlSyntaxError as exc:
        raise DumpLoadError(f"Failed to parse '{dump_path}': {exc}") from exc

    tables: dict[str, Table] = {}
    for table in parsed:
        if table.name in tables:
            raise DumpLoadError(
                f"Duplicate table name '{table.name}' in dump '{dump_path}'"
            )
        tables[table.name] = table
    logger.debug("Loaded %d table(s) from %s", len(tables), dump_path)
    return Schema(tables=tables)
