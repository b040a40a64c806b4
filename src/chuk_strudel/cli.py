#!/usr/bin/env python3
"""
Inspection CLI for the pattern language.

    chuk-strudel list --table functions
    chuk-strudel query note "c e g" --then gain 0.5 --then fast 2 --cycles 2

Output is JSON with a "status" of "success" or "error".
"""

from __future__ import annotations

import argparse
import json
import logging
from fractions import Fraction
from typing import Any

from chuk_strudel.config import load_config
from chuk_strudel.constants import ErrorMessages, RegistryTable
from chuk_strudel.errors import ChukStrudelError
from chuk_strudel.lang import CallInfo, initialize_registry, normalize, resolve_function, resolve_method
from chuk_strudel.pattern.base import Pattern, PatternEvent

logger = logging.getLogger(__name__)


def _time(value: Fraction) -> str:
    return str(value)


def event_to_dict(event: PatternEvent) -> dict[str, Any]:
    """JSON-friendly view of one event."""
    return {
        "part": [_time(event.part.begin), _time(event.part.end)],
        "whole": None if event.whole is None else [_time(event.whole.begin), _time(event.whole.end)],
        "data": event.data.set_fields(),
    }


def build_pattern(function: str, args: list[str], then: list[list[str]] | None = None) -> Pattern:
    """
    Build a pattern from a function call and a chain of method calls.

    Raises:
        ValueError: If a function or method name is unknown
    """
    handler = resolve_function(function)
    if handler is None:
        raise ValueError(ErrorMessages.UNKNOWN_FUNCTION.format(name=function))
    call_info = CallInfo(function, "cli")
    pattern = handler(normalize(args, call_info), call_info)

    for name, *method_args in then or []:
        method = resolve_method(Pattern, name)
        if method is None:
            raise ValueError(ErrorMessages.UNKNOWN_METHOD.format(name=name, receiver="pattern"))
        call_info = CallInfo(name, "cli")
        pattern = method(pattern, normalize(method_args, call_info), call_info)
    return pattern


def cmd_list(args: argparse.Namespace) -> dict[str, Any]:
    if args.table:
        table = RegistryTable(args.table)
        names = initialize_registry().names(table)
        return {"status": "success", "table": table.value, "names": names, "count": len(names)}
    return {
        "status": "success",
        "tables": {table.value: initialize_registry().names(table) for table in RegistryTable},
    }


def cmd_query(args: argparse.Namespace) -> dict[str, Any]:
    pattern = build_pattern(args.function, args.args, args.then)
    events = pattern.query_arc(Fraction(args.begin), Fraction(args.begin) + Fraction(args.cycles))
    return {
        "status": "success",
        "function": args.function,
        "events": [event_to_dict(e) for e in events],
        "count": len(events),
    }


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chuk-strudel", description="CHUK Strudel pattern inspector")
    parser.add_argument("--config", help="YAML engine configuration file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List registered names")
    list_parser.add_argument(
        "--table",
        choices=[table.value for table in RegistryTable],
        help="Only this table (default: all)",
    )
    list_parser.set_defaults(handler=cmd_list)

    query_parser = subparsers.add_parser("query", help="Build a pattern and print its events")
    query_parser.add_argument("function", help="Function to call, e.g. note")
    query_parser.add_argument("args", nargs="*", help="Function arguments (mini-notation)")
    query_parser.add_argument(
        "--then",
        nargs="+",
        action="append",
        metavar="METHOD",
        help="Chain a method call: --then gain 0.5",
    )
    query_parser.add_argument("--begin", default="0", help="Query start in cycles (default: 0)")
    query_parser.add_argument("--cycles", default="1", help="Number of cycles to query (default: 1)")
    query_parser.set_defaults(handler=cmd_query)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(args.config)
        if not args.debug:
            logging.getLogger().setLevel(config.log_level)
        result = args.handler(args)
    except (ChukStrudelError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        result = {"status": "error", "message": str(e)}
    except Exception as e:
        logger.exception(f"Command '{args.command}' failed")
        result = {"status": "error", "message": str(e)}

    print(json.dumps(result, indent=2))
    return 0 if result["status"] == "success" else 1


if __name__ == "__main__":
    raise SystemExit(main())
