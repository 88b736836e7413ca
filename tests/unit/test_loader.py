"""Tests for mysqldiff.schema.loader module."""

import logging

import pytest

from mysqldiff.exceptions import DumpLoadError, SqlSyntaxError
from mysqldiff.schema.loader import (
    is_create_table,
    iter_statements,
    load_dump,
    parse_dump,
)
from mysqldiff.schema.scanner import tokenize
from tests.helpers import write_dump

DUMP = """-- MySQL dump 10.13
/*!40101 SET @OLD_CHARACTER_SET_CLIENT=@@CHARACTER_SET_CLIENT */;
/*!40101 SET NAMES utf8mb4 */;

DROP TABLE IF EXISTS `orgs`;
CREATE TABLE `orgs` (
  `id` int NOT NULL,
  PRIMARY KEY (`id`)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;

CREATE TABLE `users` (
  `id` bigint NOT NULL,
  `age` int DEFAULT NULL,
  CONSTRAINT `chk_age` CHECK ((`age` >= 0))
) ENGINE=InnoDB;

CREATE VIEW `v_users` AS SELECT id FROM users;
INSERT INTO `orgs` VALUES (1);
"""


class TestIterStatements:
    """Tests for statement segmentation."""

    def test_statements_start_at_create(self):
        """Only CREATE statements are produced; directives and other statements are dropped."""
        statements = list(iter_statements(tokenize(DUMP)))
        assert len(statements) == 3
        assert all(stmt[0].keyword == "CREATE" for stmt in statements)

    def test_statement_excludes_semicolon(self):
        """A statement stops before its terminating semicolon."""
        (statement,) = iter_statements(tokenize("CREATE TABLE t (id INT);"))
        assert statement[-1].text == ")"

    def test_unterminated_statement_is_yielded(self):
        """A statement running to end of input is still produced."""
        statements = list(iter_statements(tokenize("CREATE TABLE t (id INT)")))
        assert len(statements) == 1

    def test_create_closes_previous_statement(self):
        """A CREATE keyword starts a new statement even without a semicolon."""
        statements = list(
            iter_statements(tokenize("CREATE TABLE a (id INT) CREATE TABLE b (id INT)"))
        )
        assert len(statements) == 2


class TestIsCreateTable:
    """Tests for CREATE TABLE detection."""

    @pytest.mark.parametrize(
        "sql,expected",
        [
            ("CREATE TABLE t (id INT)", True),
            ("CREATE TEMPORARY TABLE t (id INT)", True),
            ("CREATE VIEW v AS SELECT 1", False),
            ("CREATE INDEX i ON t (a)", False),
        ],
    )
    def test_is_create_table(self, sql, expected):
        """Only CREATE [TEMPORARY] TABLE qualifies."""
        (statement,) = iter_statements(tokenize(sql))
        assert is_create_table(statement) is expected


class TestParseDump:
    """Tests for parse_dump."""

    def test_parses_tables_in_source_order(self):
        """Every CREATE TABLE is parsed; other statements are skipped."""
        tables = parse_dump(DUMP)
        assert [t.name for t in tables] == ["orgs", "users"]

    def test_check_expression_is_source_slice(self):
        """Expressions are captured from the dump text."""
        users = parse_dump(DUMP)[1]
        assert users.check_constraints[0].expression == "(`age` >= 0)"

    def test_bad_statement_is_skipped_with_warning(self, caplog):
        """Non-strict parsing logs a warning and continues."""
        text = "CREATE TABLE bad (id foo);\nCREATE TABLE good (id INT);"
        with caplog.at_level(logging.WARNING, logger="mysqldiff.schema.loader"):
            tables = parse_dump(text)
        assert [t.name for t in tables] == ["good"]
        assert "Skipping unparseable CREATE TABLE statement" in caplog.text

    def test_fractional_prefix_length_skips_only_that_table(self):
        """A non-integer where an integer belongs fails just its own statement."""
        text = (
            "CREATE TABLE bad (a VARCHAR(10), KEY k (a(1.5)));\n"
            "CREATE TABLE good (id INT);\n"
        )
        tables = parse_dump(text)
        assert [t.name for t in tables] == ["good"]

    def test_strict_reraises(self):
        """Strict parsing raises the first syntax error."""
        with pytest.raises(SqlSyntaxError):
            parse_dump("CREATE TABLE bad (id foo);", strict=True)

    def test_set_statements_around_table_are_skipped(self):
        """SET statements before and after a table produce no error."""
        text = (
            "SET FOREIGN_KEY_CHECKS=0;\n"
            "CREATE TABLE t (id INT);\n"
            "SET FOREIGN_KEY_CHECKS=1;\n"
        )
        tables = parse_dump(text, strict=True)
        assert [t.name for t in tables] == ["t"]

    def test_empty_text(self):
        """Empty text yields no tables."""
        assert parse_dump("") == []


class TestLoadDump:
    """Tests for load_dump."""

    def test_load_dump_returns_schema(self, tmp_path):
        """Tables are keyed by name."""
        path = tmp_path / "dump.sql"
        path.write_text(DUMP)

        schema = load_dump(path)

        assert schema.table_names() == {"orgs", "users"}
        assert schema.get_table("orgs").options.engine == "InnoDB"

    def test_missing_file(self, tmp_path):
        """A missing file raises DumpLoadError."""
        with pytest.raises(DumpLoadError, match="does not exist"):
            load_dump(tmp_path / "missing.sql")

    def test_duplicate_table(self, tmp_path):
        """Duplicate table names raise DumpLoadError."""
        path = tmp_path / "dump.sql"
        write_dump(path, "CREATE TABLE t (id INT);", "CREATE TABLE t (id BIGINT);")

        with pytest.raises(DumpLoadError, match="Duplicate table name 't'"):
            load_dump(path)

    def test_strict_parse_error_is_wrapped(self, tmp_path):
        """In strict mode parse failures become DumpLoadError with the cause chained."""
        path = tmp_path / "dump.sql"
        write_dump(path, "CREATE TABLE bad (id foo);")

        with pytest.raises(DumpLoadError) as exc_info:
            load_dump(path, strict=True)
        assert isinstance(exc_info.value.__cause__, SqlSyntaxError)
