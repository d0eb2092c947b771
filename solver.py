"""Feedback signature index builder and pattern query engine."""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from errors import (
    EmptyCandidateSetError,
    InvalidSolutionError,
    InvalidSymbolError,
    LengthMismatchError,
    SourceUnavailableError,
)
from models import IndexBuildResult, LetterFeedback, PatternResult, QueryPattern, QueryReport, Signature
from utils import is_candidate_word, normalize_word, parse_query_line, render_pattern, split_pattern_lines

logger = logging.getLogger(__name__)


def calculate_signature(guess: str, solution: str) -> Signature:
    """
    Feedback for ``guess`` played against ``solution``.

    Exact matches are taken first. Remaining guess letters, left to right,
    are marked present while unmatched copies of that letter remain in the
    solution, so repeated letters never get more marks than the solution has.
    """
    if len(guess) != len(solution):
        raise LengthMismatchError(len(solution), len(guess), what="guess")

    signature = [LetterFeedback.ABSENT] * len(solution)
    remaining: Counter[str] = Counter()

    for i, (g, s) in enumerate(zip(guess, solution)):
        if g == s:
            signature[i] = LetterFeedback.EXACT
        else:
            remaining[s] += 1

    for i, g in enumerate(guess):
        if signature[i] is LetterFeedback.EXACT:
            continue
        if remaining[g] > 0:
            signature[i] = LetterFeedback.PRESENT
            remaining[g] -= 1

    return tuple(signature)


def expand_query(pattern: QueryPattern) -> list[Signature]:
    """Every concrete signature a query pattern denotes, in a stable order."""
    results: list[Signature] = [()]
    for symbol in pattern:
        results = [partial + (feedback,) for partial in results for feedback in symbol.feedbacks]
    return results


class WordIndex:
    """Read-only mapping of signature -> words that produce it."""

    def __init__(self, solution: str, buckets: Mapping[Signature, Iterable[str]]) -> None:
        self.solution = solution
        self._buckets: Mapping[Signature, tuple[str, ...]] = MappingProxyType(
            {sig: tuple(words) for sig, words in buckets.items()}
        )
        self.word_count = sum(len(words) for words in self._buckets.values())

    def lookup(self, signature: Signature) -> tuple[str, ...]:
        return self._buckets.get(signature, ())

    def __len__(self) -> int:
        return len(self._buckets)


def build_index(words: Iterable[str], solution: str) -> WordIndex:
    """Group words by their signature against ``solution``, keeping input order."""
    index_map: dict[Signature, list[str]] = defaultdict(list)
    for word in words:
        if len(word) != len(solution):
            raise LengthMismatchError(len(solution), len(word), what="word")
        index_map[calculate_signature(word, solution)].append(word)
    return WordIndex(solution, index_map)


def normalize_solution(solution: str) -> str:
    normalized = normalize_word(solution)
    if not normalized or not is_candidate_word(normalized, len(normalized)):
        raise InvalidSolutionError(f"Solution must be a non-empty word of ASCII letters, got {solution!r}")
    return normalized


class PatternSolver:
    """Build a signature index for one solution and answer pattern queries."""

    def __init__(self) -> None:
        self.index: WordIndex | None = None
        self.wordlist_path: str = ""

    def build_index(self, wordlist_path: str, solution: str) -> IndexBuildResult:
        """
        Load a wordlist and index it against the solution.

        Lines are trimmed and lowercased; anything that is not a word of
        ASCII letters with the solution's length is dropped, as is any line
        that is not valid UTF-8.
        """
        solution = normalize_solution(solution)
        path = Path(wordlist_path)

        total_lines = 0
        words: list[str] = []
        try:
            with path.open("rb") as handle:
                for raw_line in handle:
                    total_lines += 1
                    try:
                        candidate = normalize_word(raw_line.decode("utf-8"))
                    except UnicodeDecodeError:
                        logger.debug("Dropping undecodable line %d", total_lines)
                        continue
                    if is_candidate_word(candidate, len(solution)):
                        words.append(candidate)
        except OSError as exc:
            raise SourceUnavailableError(f"Failed to load wordlist {wordlist_path}: {exc}") from exc

        if not words:
            raise EmptyCandidateSetError(
                f"No {len(solution)}-letter words found in wordlist {wordlist_path}"
            )

        self.index = build_index(words, solution)
        self.wordlist_path = str(path)

        result = IndexBuildResult(
            wordlist_path=str(path),
            solution=solution,
            total_lines=total_lines,
            accepted_words=len(words),
            rejected_lines=total_lines - len(words),
            unique_signatures=len(self.index),
        )
        logger.info(
            "Indexed %d of %d lines into %d signatures",
            result.accepted_words,
            result.total_lines,
            result.unique_signatures,
        )
        return result

    def resolve(self, pattern: QueryPattern) -> list[str]:
        """All indexed words matching the pattern, grouped in expansion order."""
        if self.index is None:
            raise RuntimeError("Index has not been built")
        if len(pattern) != len(self.index.solution):
            raise LengthMismatchError(len(self.index.solution), len(pattern))

        signatures = expand_query(pattern)
        matches: list[str] = []
        for sig in signatures:
            # buckets are disjoint, so no word is added twice
            matches.extend(self.index.lookup(sig))
        logger.debug(
            "Pattern %s expanded to %d signatures, %d matches",
            render_pattern(pattern),
            len(signatures),
            len(matches),
        )
        return matches

    def solve(self, raw_patterns: str, strict: bool = False) -> QueryReport:
        """
        Resolve every pattern line in input order.

        Malformed lines are reported and skipped unless ``strict`` is set,
        in which case the first one raises.
        """
        if self.index is None:
            raise RuntimeError("Index has not been built")

        results: list[PatternResult] = []
        for line in split_pattern_lines(raw_patterns):
            try:
                pattern = parse_query_line(line)
                matches = self.resolve(pattern)
            except (InvalidSymbolError, LengthMismatchError) as exc:
                if strict:
                    raise
                logger.warning("Skipping pattern %r: %s", line, exc)
                results.append(PatternResult(raw_pattern=line, pattern=line.upper(), status="invalid", error=str(exc)))
                continue

            results.append(
                PatternResult(
                    raw_pattern=line,
                    pattern=render_pattern(pattern),
                    status="found" if matches else "not found",
                    matches=matches,
                )
            )

        all_possible = all(r.status == "found" for r in results)
        return QueryReport(solution=self.index.solution, results=results, all_possible=all_possible)
