"""Command-line front end for the wordle pattern finder."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from errors import PatternFinderError
from models import FinderConfig, QueryReport
from solver import PatternSolver
from utils import export_report, load_config, setup_logging

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = """
??*??
?XXX?
???X?
?X?X?
???X?
GGGGG
"""

EXIT_OK = 0
EXIT_IMPOSSIBLE = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pattern-finder",
        description="Find which words produce each feedback pattern against a known solution.",
    )
    parser.add_argument("--config", help="JSON file with solution, wordlist_path, patterns and strict")
    parser.add_argument("--solution", help="secret word (default: ideal)")
    parser.add_argument("--wordlist", help="word list, one word per line (default: wordlist.txt)")
    parser.add_argument(
        "-p",
        "--pattern",
        action="append",
        default=[],
        help="query pattern using G, Y, X, ? and *; may be repeated",
    )
    parser.add_argument("--patterns-file", help="file with one query pattern per line")
    parser.add_argument("--strict", action="store_true", help="abort on the first malformed pattern")
    parser.add_argument("--all", action="store_true", help="list every match instead of one example")
    parser.add_argument("--export-json", type=Path, help="write the report as JSON")
    parser.add_argument("--export-csv", type=Path, help="write the report as CSV")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--log-file", help="write logs to this file instead of stderr")
    return parser


def config_from_args(args: argparse.Namespace) -> FinderConfig:
    """Merge defaults, an optional JSON config file, and command-line flags."""
    config = FinderConfig(patterns=DEFAULT_PATTERNS)
    if args.config:
        config = dataclasses.replace(config, **load_config(args.config))

    overrides: dict[str, object] = {}
    if args.solution:
        overrides["solution"] = args.solution
    if args.wordlist:
        overrides["wordlist_path"] = args.wordlist
    if args.patterns_file:
        try:
            overrides["patterns"] = Path(args.patterns_file).read_text(encoding="utf-8")
        except OSError as exc:
            raise PatternFinderError(f"Could not read patterns file {args.patterns_file}: {exc}") from exc
    if args.pattern:
        overrides["patterns"] = "\n".join(args.pattern)
    if args.strict:
        overrides["strict"] = True
    return dataclasses.replace(config, **overrides)


def format_report(report: QueryReport, show_all: bool = False) -> list[str]:
    """Render a report as the lines printed to stdout."""
    lines: list[str] = []
    for result in report.results:
        if result.status == "invalid":
            lines.append(f"Skipped pattern '{result.raw_pattern}': {result.error}")
        elif result.matches:
            lines.append(f"Possible solutions for pattern {result.pattern}:")
            if show_all:
                lines.extend(f"  {word}" for word in result.matches)
            else:
                lines.append(f"  {result.example}")
                if result.additional_matches:
                    lines.append(f"  (and {result.additional_matches} others)")
        else:
            lines.append(f"No possible solutions found for pattern {result.pattern}.")

    if not report.all_possible:
        lines.append("Some patterns have no possible solutions. :(")
    return lines


def run(config: FinderConfig, show_all: bool = False) -> tuple[QueryReport, PatternSolver]:
    solver = PatternSolver()
    solver.build_index(config.wordlist_path, config.solution)
    report = solver.solve(config.patterns, strict=config.strict)
    for line in format_report(report, show_all=show_all):
        print(line)
    return report, solver


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        config = config_from_args(args)
        report, solver = run(config, show_all=args.all)
    except PatternFinderError as exc:
        logger.exception("Run aborted")
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    if args.export_json or args.export_csv:
        try:
            export_report(args.export_json, args.export_csv, report, solver.wordlist_path)
        except OSError as exc:
            logger.exception("Export failed")
            print(f"Could not save results: {exc}", file=sys.stderr)
            return EXIT_ERROR

    return EXIT_OK if report.all_possible else EXIT_IMPOSSIBLE


if __name__ == "__main__":
    sys.exit(main())
