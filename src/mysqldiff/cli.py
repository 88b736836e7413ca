"""Command-line interface for mysqldiff."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import yaml

from mysqldiff.config import OUTPUT_MODES, Config
from mysqldiff.exceptions import ConfigError
from mysqldiff.schema.codegen import AlterStatementGenerator
from mysqldiff.schema.diff import SchemaDiffer
from mysqldiff.schema.exporter import export_json, export_yaml, table_to_dict
from mysqldiff.schema.loader import load_dump
from mysqldiff.schema.printer import format_table_diff

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mysqldiff",
        description="Compare MySQL schema dumps and generate ALTER statements",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    diff_parser = subparsers.add_parser("diff", help="Diff two schema dumps")
    diff_parser.add_argument("old_dump", type=Path, help="Dump of the current schema")
    diff_parser.add_argument("new_dump", type=Path, help="Dump of the desired schema")
    output_group = diff_parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "--output",
        choices=OUTPUT_MODES,
        default=None,
        help="Output mode (default: alter)",
    )
    output_group.add_argument(
        "--detailed",
        dest="output",
        action="store_const",
        const="detailed",
        help="Print a human-readable report",
    )
    output_group.add_argument(
        "--json", dest="output", action="store_const", const="json", help="Emit JSON"
    )
    output_group.add_argument(
        "--yaml", dest="output", action="store_const", const="yaml", help="Emit YAML"
    )
    diff_parser.add_argument("--table", help="Only compare this table")
    diff_parser.add_argument(
        "--include-drops",
        action="store_true",
        default=None,
        help="Emit DROP TABLE for tables missing from the new dump",
    )
    diff_parser.add_argument(
        "--include-creates",
        action="store_true",
        default=None,
        help="Emit CREATE TABLE for tables missing from the old dump",
    )
    _add_common_arguments(diff_parser)
    diff_parser.add_argument(
        "--color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Colorize the detailed report (default: auto)",
    )

    parse_parser = subparsers.add_parser("parse", help="List tables parsed from a dump")
    parse_parser.add_argument("dump", type=Path, help="Schema dump to parse")
    parse_parser.add_argument(
        "--yaml",
        action="store_true",
        help="Dump the parsed table definitions as YAML",
    )
    _add_common_arguments(parse_parser)
    return parser


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on the first CREATE TABLE statement that does not parse",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Enable debug logging",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")

    if args.command == "diff":
        return cmd_diff(args)
    elif args.command == "parse":
        return cmd_parse(args)
    else:
        print(f"Command '{args.command}' not yet implemented", file=sys.stderr)
        return 1


def _apply_verbosity(config: Config) -> None:
    """Raise the root log level when verbose output is configured."""
    if config.verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def cmd_diff(args: argparse.Namespace) -> int:
    """Diff two dumps and print ALTER statements or a report."""
    try:
        config = Config.from_env(
            output=args.output,
            include_drops=args.include_drops,
            include_creates=args.include_creates,
            table=args.table,
            strict=args.strict,
            color=args.color,
            verbose=args.verbose,
        )
        config.validate()
        _apply_verbosity(config)

        old_schema = load_dump(args.old_dump, strict=config.strict)
        new_schema = load_dump(args.new_dump, strict=config.strict)
        logger.debug(
            "Parsed %d table(s) from %s and %d table(s) from %s",
            len(old_schema.tables),
            args.old_dump,
            len(new_schema.tables),
            args.new_dump,
        )

        diffs = SchemaDiffer().diff(old_schema, new_schema, table=config.table)

        if config.output == "json":
            print(export_json(diffs))
            return 0
        if config.output == "yaml":
            print(export_yaml(diffs), end="")
            return 0

        if not diffs:
            print("-- No changes detected")
            return 0

        if config.output == "detailed":
            color = config.use_color(sys.stdout.isatty())
            for table_diff in diffs:
                print(format_table_diff(table_diff, detailed=True, color=color))
            return 0

        generator = AlterStatementGenerator(
            include_drops=config.include_drops,
            include_creates=config.include_creates,
        )
        for table_diff in diffs:
            logger.debug("Generating statements for table %s", table_diff.name)
            for statement in generator.generate(table_diff):
                print(statement)
        return 0
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        print(f"Diff error: {e}", file=sys.stderr)
        return 1


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse a dump and list its tables."""
    try:
        config = Config.from_env(strict=args.strict, verbose=args.verbose)
        _apply_verbosity(config)
        schema = load_dump(args.dump, strict=config.strict)

        if args.yaml:
            tables = [
                table_to_dict(schema.get_table(name))
                for name in sorted(schema.table_names())
            ]
            print(
                yaml.dump(
                    tables,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                ),
                end="",
            )
            return 0

        print(f"Parsed {len(schema.tables)} tables:")
        for name in sorted(schema.table_names()):
            table = schema.get_table(name)
            print(f"  - {name} ({len(table.columns)} columns)")
        return 0
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        print(f"Parse error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
