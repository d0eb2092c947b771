"""Utility helpers for normalization, pattern parsing, config, and exports."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

from errors import InvalidSymbolError, PatternFinderError
from models import QueryPattern, QueryReport, QuerySymbol, Signature

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

CONFIG_TYPES: dict[str, type] = {"solution": str, "wordlist_path": str, "patterns": str, "strict": bool}


def setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """Configure logging once per run, to stderr or to a file."""
    level = logging.DEBUG if verbose else logging.WARNING
    if log_file:
        logging.basicConfig(filename=log_file, level=level, format=LOG_FORMAT)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)


def load_config(path: str | Path) -> dict[str, Any]:
    """
    Load run settings from a JSON file.

    Only the known keys are returned. A list of patterns is joined into a block.
    Values of the wrong type raise PatternFinderError.
    """
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise PatternFinderError(f"Could not load config {config_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise PatternFinderError(f"Config {config_path} must contain a JSON object")

    config = {key: raw[key] for key in CONFIG_TYPES if key in raw}
    patterns = config.get("patterns")
    if isinstance(patterns, list) and all(isinstance(line, str) for line in patterns):
        config["patterns"] = "\n".join(patterns)

    for key, expected in CONFIG_TYPES.items():
        if key in config and not isinstance(config[key], expected):
            raise PatternFinderError(
                f"Config {config_path}: {key!r} must be a {expected.__name__}, got {type(config[key]).__name__}"
            )
    return config


def normalize_word(token: str) -> str:
    """Trim surrounding whitespace and lowercase."""
    return token.strip().lower()


def is_candidate_word(word: str, word_length: int) -> bool:
    """True if the normalized word has the right length and only ASCII letters."""
    return len(word) == word_length and word.isascii() and word.isalpha()


def parse_symbol(char: str, position: int = 0) -> QuerySymbol:
    """Parse one pattern character (case-insensitive) into a query symbol."""
    try:
        return QuerySymbol(char.upper())
    except ValueError:
        raise InvalidSymbolError(char, position) from None


def parse_query_line(line: str) -> QueryPattern:
    """Parse a single trimmed pattern line such as ``?XXX?``."""
    try:
        return tuple(parse_symbol(char, pos) for pos, char in enumerate(line))
    except InvalidSymbolError as exc:
        exc.line = line
        raise


def split_pattern_lines(raw_text: str) -> list[str]:
    """Split a pattern block into trimmed, non-blank lines."""
    if not raw_text:
        return []
    return [line.strip() for line in raw_text.splitlines() if line.strip()]


def render_pattern(pattern: QueryPattern | Signature) -> str:
    """Canonical one-character-per-position rendering."""
    return "".join(symbol.value for symbol in pattern)


def export_report(
    json_path: Path | None,
    csv_path: Path | None,
    report: QueryReport,
    wordlist_path: str,
) -> None:
    """Export a query report to JSON and/or CSV."""
    if json_path is not None:
        payload = {
            "generated_at_utc": report.generated_at_utc,
            "wordlist_path": wordlist_path,
            "solution": report.solution,
            "all_possible": report.all_possible,
            "results": [
                {
                    "raw_pattern": r.raw_pattern,
                    "pattern": r.pattern,
                    "status": r.status,
                    "example": r.example,
                    "match_count": len(r.matches),
                    "matches": r.matches,
                    "error": r.error,
                }
                for r in report.results
            ],
        }
        json_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    if csv_path is not None:
        with csv_path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            writer.writerow(["pattern", "status", "example", "match_count", "matches"])
            for row in report.results:
                writer.writerow([row.pattern, row.status, row.example, len(row.matches), "|".join(row.matches)])
