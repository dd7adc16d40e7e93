"""
RefData CLI

Command-line interface for inspecting and checking enumeration catalogs.

Usage:
    refdata list
    refdata show State --sorted
    refdata show MaritalStatus --json
    refdata lookup YearsWith 3
    refdata check --dir path/to/catalog

Exit Codes:
    0   OK        - Command succeeded
    1   FAILURE   - Unknown table, value not found, or invalid catalog
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from . import __version__, config
from .catalog import default_catalog, load_catalog
from .exceptions import RefDataError
from .logging_setup import configure_logging
from .models import EnumerationTable, Member

logger = logging.getLogger(__name__)


class ExitCode:
    """Exit codes for scripting."""
    OK = 0
    FAILURE = 1


# =============================================================================
# Output Formatting
# =============================================================================

def print_error(text: str) -> None:
    print(f"[ERROR] {text}", file=sys.stderr)


def print_member(member: Member) -> None:
    print(f"  {str(member.id):<32} {member.name:<32} {member.description}")


def _find_table(name: str) -> Optional[EnumerationTable]:
    table = default_catalog().find(name)
    if table is None:
        print_error(f"Unknown enumeration: {name}")
    return table


# =============================================================================
# Commands
# =============================================================================

def cmd_list(args) -> int:
    """List enumerations with member counts."""
    catalog = default_catalog()
    for accessor in sorted(catalog.accessors()):
        table = catalog[accessor]
        print(f"{accessor:<40} {len(table):>5}  {table.description}")
    return ExitCode.OK


def cmd_show(args) -> int:
    """Show the members of one enumeration."""
    table = _find_table(args.table)
    if table is None:
        return ExitCode.FAILURE

    members = table.sorted_items() if args.sorted else list(table.items)
    if args.json:
        print(json.dumps([member.to_dict() for member in members], indent=2))
        return ExitCode.OK

    print(f"{table.name}: {table.description}")
    for member in members:
        print_member(member)
    return ExitCode.OK


def cmd_lookup(args) -> int:
    """Resolve an ID, alias or alternative key."""
    table = _find_table(args.table)
    if table is None:
        return ExitCode.FAILURE

    member = table.by_id_string(args.value)
    if member is None and table.has_alternative_keys:
        member = table.by_id(table.by_alternative_key(args.value))
    if member is None:
        print_error(f"{args.value!r} is not a member of {table.name}")
        return ExitCode.FAILURE

    print(json.dumps(member.to_dict(), indent=2))
    return ExitCode.OK


def cmd_check(args) -> int:
    """Load and validate a catalog directory."""
    directory = args.dir or config.CATALOG_DIR
    try:
        catalog = load_catalog(directory, strict_version=not args.no_strict_version)
    except RefDataError as e:
        print_error(str(e))
        for error in e.details.get("errors", []):
            print(f"  [X] {error}", file=sys.stderr)
        return ExitCode.FAILURE

    members = sum(len(table) for table in catalog.tables())
    print(f"[OK] {directory}: {len(catalog)} enumerations, {members} members")
    return ExitCode.OK


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="refdata",
        description="Insurance reference-data enumerations",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Log level (default: REFDATA_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List enumerations")
    list_parser.set_defaults(func=cmd_list)

    show_parser = subparsers.add_parser("show", help="Show the members of an enumeration")
    show_parser.add_argument("table", help="Accessor or name (e.g. State, EnumState)")
    show_parser.add_argument("--sorted", action="store_true", help="Order by sort order")
    show_parser.add_argument("--json", action="store_true", help="Print member documents")
    show_parser.set_defaults(func=cmd_show)

    lookup_parser = subparsers.add_parser("lookup", help="Resolve a value to a member")
    lookup_parser.add_argument("table", help="Accessor or name")
    lookup_parser.add_argument("value", help="ID, alias or alternative key")
    lookup_parser.set_defaults(func=cmd_lookup)

    check_parser = subparsers.add_parser("check", help="Validate a catalog directory")
    check_parser.add_argument("--dir", "-d", default=None, help="Catalog directory")
    check_parser.add_argument("--no-strict-version", action="store_true",
                              help="Accept incompatible schema versions")
    check_parser.set_defaults(func=cmd_check)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level)

    if not args.command:
        parser.print_help()
        return ExitCode.FAILURE

    try:
        return args.func(args)
    except RefDataError as e:
        logger.error(f"Command failed: {e}", extra={"enumeration": e.enumeration, "error_code": e.code})
        print_error(str(e))
        return ExitCode.FAILURE


if __name__ == "__main__":
    sys.exit(main())
