"""Data models for feedback signatures, query patterns, and solve results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class LetterFeedback(str, Enum):
    """Feedback for a single guessed letter."""

    EXACT = "G"
    PRESENT = "Y"
    ABSENT = "X"


class QuerySymbol(str, Enum):
    """A single position of a query pattern."""

    EXACT = "G"
    PRESENT = "Y"
    ABSENT = "X"
    ANY_OF_CORRECT = "?"
    WILDCARD = "*"

    @property
    def feedbacks(self) -> tuple[LetterFeedback, ...]:
        """Feedback values this symbol admits, in expansion order."""
        return _ADMISSIBLE[self]


_ADMISSIBLE: dict[QuerySymbol, tuple[LetterFeedback, ...]] = {
    QuerySymbol.EXACT: (LetterFeedback.EXACT,),
    QuerySymbol.PRESENT: (LetterFeedback.PRESENT,),
    QuerySymbol.ABSENT: (LetterFeedback.ABSENT,),
    QuerySymbol.ANY_OF_CORRECT: (LetterFeedback.EXACT, LetterFeedback.PRESENT),
    QuerySymbol.WILDCARD: (LetterFeedback.EXACT, LetterFeedback.PRESENT, LetterFeedback.ABSENT),
}

Signature = tuple[LetterFeedback, ...]
QueryPattern = tuple[QuerySymbol, ...]


@dataclass(frozen=True, slots=True)
class FinderConfig:
    """Static inputs for one run."""

    solution: str = "ideal"
    wordlist_path: str = "wordlist.txt"
    patterns: str = ""
    strict: bool = False


@dataclass(slots=True)
class PatternResult:
    """Result for a single query pattern line."""

    raw_pattern: str
    pattern: str
    status: str
    matches: list[str] = field(default_factory=list)
    error: str = ""

    @property
    def example(self) -> str:
        return self.matches[0] if self.matches else ""

    @property
    def additional_matches(self) -> int:
        return max(0, len(self.matches) - 1)


@dataclass(slots=True)
class QueryReport:
    """Aggregated results preserving pattern input order."""

    solution: str
    results: list[PatternResult]
    all_possible: bool
    generated_at_utc: str = field(
        default_factory=lambda: datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"
    )


@dataclass(slots=True)
class IndexBuildResult:
    """Summary returned after building an index."""

    wordlist_path: str
    solution: str
    total_lines: int
    accepted_words: int
    rejected_lines: int
    unique_signatures: int
