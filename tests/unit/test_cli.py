"""Tests for CLI commands."""

import json
import logging
from unittest.mock import patch

import pytest
import yaml

from mysqldiff.cli import build_parser, cmd_diff, main
from tests.helpers import write_dump

OLD_SQL = "CREATE TABLE t (id INT, name VARCHAR(100));"
NEW_SQL = "CREATE TABLE t (id INT AUTO_INCREMENT, name VARCHAR(255), email VARCHAR(255));"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep user configuration out of CLI tests."""
    for name in (
        "MYSQLDIFF_OUTPUT",
        "MYSQLDIFF_INCLUDE_DROPS",
        "MYSQLDIFF_INCLUDE_CREATES",
        "MYSQLDIFF_TABLE",
        "MYSQLDIFF_STRICT",
        "MYSQLDIFF_COLOR",
        "MYSQLDIFF_VERBOSE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MYSQLDIFF_CONFIG", str(tmp_path / "missing.cfg"))


@pytest.fixture
def root_logger():
    """Restore the root log level changed by verbose runs."""
    root = logging.getLogger()
    level = root.level
    yield root
    root.setLevel(level)


@pytest.fixture
def dumps(tmp_path):
    old = tmp_path / "old.sql"
    new = tmp_path / "new.sql"
    write_dump(old, OLD_SQL)
    write_dump(new, NEW_SQL)
    return old, new


class TestCmdDiff:
    """Test the diff subcommand."""

    def test_diff_prints_alter_statements(self, dumps):
        """Default output is ALTER statements."""
        old, new = dumps

        with patch("builtins.print") as mock_print:
            result = main(["diff", str(old), str(new)])

        assert result == 0
        mock_print.assert_any_call(
            "ALTER TABLE `t`\n"
            "  MODIFY COLUMN `id` INT AUTO_INCREMENT,\n"
            "  MODIFY COLUMN `name` VARCHAR(255),\n"
            "  ADD COLUMN `email` VARCHAR(255);"
        )

    def test_diff_no_changes(self, dumps):
        """Identical dumps report no changes."""
        old, _ = dumps

        with patch("builtins.print") as mock_print:
            result = main(["diff", str(old), str(old)])

        assert result == 0
        mock_print.assert_called_with("-- No changes detected")

    def test_diff_json(self, dumps):
        """--json emits a JSON document keyed by table."""
        old, new = dumps

        with patch("builtins.print") as mock_print:
            result = main(["diff", "--json", str(old), str(new)])

        assert result == 0
        document = json.loads(mock_print.call_args.args[0])
        assert document["t"]["summary"]["columns"]["modified"] == 2

    def test_diff_yaml(self, dumps):
        """--yaml emits a YAML document keyed by table."""
        old, new = dumps

        with patch("builtins.print") as mock_print:
            result = main(["diff", "--yaml", str(old), str(new)])

        assert result == 0
        document = yaml.safe_load(mock_print.call_args.args[0])
        assert document["t"]["change_type"] == "modified"

    def test_diff_detailed_without_color(self, dumps):
        """--detailed --no-color prints a plain report."""
        old, new = dumps

        with patch("builtins.print") as mock_print:
            result = main(["diff", "--detailed", "--no-color", str(old), str(new)])

        assert result == 0
        report = mock_print.call_args.args[0]
        assert "COLUMN CHANGES:" in report
        assert "\033[" not in report

    def test_diff_include_creates(self, tmp_path, dumps):
        """--include-creates renders new tables."""
        old, _ = dumps
        new = tmp_path / "with_audit.sql"
        write_dump(new, OLD_SQL, "CREATE TABLE audit (id INT);")

        with patch("builtins.print") as mock_print:
            result = main(["diff", "--include-creates", str(old), str(new)])

        assert result == 0
        mock_print.assert_any_call("CREATE TABLE `audit` (\n  `id` INT\n);")

    def test_diff_table_filter(self, tmp_path, dumps):
        """--table restricts the comparison to one table."""
        old, _ = dumps
        new = tmp_path / "other.sql"
        write_dump(new, OLD_SQL, "CREATE TABLE audit (id INT);")

        with patch("builtins.print") as mock_print:
            result = main(["diff", "--table", "t", "--include-creates", str(old), str(new)])

        assert result == 0
        mock_print.assert_called_with("-- No changes detected")

    def test_diff_missing_file_returns_1(self, tmp_path, dumps):
        """Load failures return exit code 1."""
        old, _ = dumps

        with patch("builtins.print"):
            result = main(["diff", str(old), str(tmp_path / "missing.sql")])

        assert result == 1

    def test_diff_strict_parse_error_returns_1(self, tmp_path, dumps):
        """--strict turns parse failures into errors."""
        old, _ = dumps
        bad = tmp_path / "bad.sql"
        write_dump(bad, "CREATE TABLE t (id foo);")

        with patch("builtins.print"):
            assert main(["diff", str(old), str(bad)]) == 0
            assert main(["diff", "--strict", str(old), str(bad)]) == 1

    def test_diff_invalid_output_env_returns_2(self, dumps, monkeypatch):
        """Configuration errors return exit code 2."""
        old, new = dumps
        monkeypatch.setenv("MYSQLDIFF_OUTPUT", "xml")

        with patch("builtins.print") as mock_print:
            result = cmd_diff(build_parser().parse_args(["diff", str(old), str(new)]))

        assert result == 2
        message = mock_print.call_args.args[0]
        assert message.startswith("Configuration error:")

    def test_verbose_from_env_enables_debug_logging(self, dumps, monkeypatch, root_logger):
        """MYSQLDIFF_VERBOSE raises the log level without -v."""
        old, _ = dumps
        monkeypatch.setenv("MYSQLDIFF_VERBOSE", "1")
        root_logger.setLevel(logging.INFO)

        with patch("builtins.print"):
            result = main(["diff", str(old), str(old)])

        assert result == 0
        assert root_logger.level == logging.DEBUG

    def test_output_flags_are_exclusive(self):
        """--json and --yaml cannot be combined."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["diff", "--json", "--yaml", "a.sql", "b.sql"])


class TestCmdParse:
    """Test the parse subcommand."""

    def test_parse_lists_tables(self, tmp_path):
        """Parsed tables are listed with column counts."""
        dump = tmp_path / "dump.sql"
        write_dump(dump, NEW_SQL, "CREATE TABLE audit (id INT);")

        with patch("builtins.print") as mock_print:
            result = main(["parse", str(dump)])

        assert result == 0
        mock_print.assert_any_call("Parsed 2 tables:")
        mock_print.assert_any_call("  - audit (1 columns)")
        mock_print.assert_any_call("  - t (3 columns)")

    def test_parse_yaml(self, tmp_path):
        """--yaml dumps table definitions."""
        dump = tmp_path / "dump.sql"
        write_dump(dump, OLD_SQL)

        with patch("builtins.print") as mock_print:
            result = main(["parse", "--yaml", str(dump)])

        assert result == 0
        (table,) = yaml.safe_load(mock_print.call_args.args[0])
        assert table["name"] == "t"
        assert [c["name"] for c in table["columns"]] == ["id", "name"]

    def test_parse_missing_file_returns_1(self, tmp_path):
        """A missing dump returns exit code 1."""
        with patch("builtins.print") as mock_print:
            result = main(["parse", str(tmp_path / "missing.sql")])

        assert result == 1
        assert mock_print.call_args.args[0].startswith("Parse error:")
