"""Exceptions raised while loading words and parsing patterns."""

from __future__ import annotations


class PatternFinderError(Exception):
    """Base class for all pattern finder errors."""


class SourceUnavailableError(PatternFinderError):
    """The word list could not be opened or read."""


class EmptyCandidateSetError(PatternFinderError):
    """The word list produced no usable words after filtering."""


class InvalidSolutionError(PatternFinderError):
    """The solution word is empty or contains non-letters."""


class InvalidSymbolError(PatternFinderError):
    """A character outside the feedback alphabet appeared in a pattern."""

    def __init__(self, char: str, position: int, line: str = "") -> None:
        self.char = char
        self.position = position
        self.line = line
        super().__init__(f"Invalid pattern character {char!r} at position {position + 1}")


class LengthMismatchError(PatternFinderError):
    """A word or pattern length differs from the solution length."""

    def __init__(self, expected: int, actual: int, what: str = "pattern") -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {what} of length {expected}, got {actual}")
