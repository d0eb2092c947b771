from collections import Counter
from pathlib import Path

import pytest

from errors import (
    EmptyCandidateSetError,
    InvalidSolutionError,
    InvalidSymbolError,
    LengthMismatchError,
    SourceUnavailableError,
)
from models import LetterFeedback, QuerySymbol
from solver import PatternSolver, build_index, calculate_signature, expand_query
from utils import parse_query_line, render_pattern

G, Y, X = LetterFeedback.EXACT, LetterFeedback.PRESENT, LetterFeedback.ABSENT


def parse_signature(text: str) -> tuple[LetterFeedback, ...]:
    return tuple(LetterFeedback(char) for char in text)


def sample_wordlist_path() -> str:
    return str(Path(__file__).resolve().parent.parent / "sample_data" / "wordlist_small.txt")


def sample_solver() -> PatternSolver:
    solver = PatternSolver()
    solver.build_index(sample_wordlist_path(), "ideal")
    return solver


def test_signature_respects_duplicate_letter_budget() -> None:
    assert calculate_signature("assss", "sassy") == (Y, Y, G, G, X)


@pytest.mark.parametrize(
    "guess,solution",
    [("assss", "sassy"), ("speed", "abide"), ("eerie", "there"), ("lolly", "hello"), ("aaaaa", "banal")],
)
def test_signature_never_over_marks_a_letter(guess: str, solution: str) -> None:
    marked = Counter(letter for letter, fb in zip(guess, calculate_signature(guess, solution)) if fb is not X)
    budget = Counter(solution)
    for letter, count in marked.items():
        assert count <= budget[letter]


def test_signature_is_reflexive() -> None:
    for word in ("ideal", "sassy", "apple", "a"):
        assert calculate_signature(word, word) == (G,) * len(word)


def test_signature_exact_match_takes_priority_over_present() -> None:
    # both l letters of the solution are used by exact matches
    assert calculate_signature("lolly", "hello") == (X, Y, G, G, X)


def test_signature_rejects_unequal_lengths() -> None:
    with pytest.raises(LengthMismatchError):
        calculate_signature("abc", "abcd")


def test_expand_all_wildcards_gives_every_signature() -> None:
    signatures = expand_query((QuerySymbol.WILDCARD,) * 5)
    assert len(signatures) == 3**5
    assert len(set(signatures)) == 3**5
    assert all(len(sig) == 5 for sig in signatures)


def test_expand_literal_pattern_gives_one_signature() -> None:
    assert expand_query(parse_query_line("GYXXG")) == [(G, Y, X, X, G)]


def test_expand_order_is_positional_exact_present_absent() -> None:
    assert expand_query(parse_query_line("?*")) == [(G, G), (G, Y), (G, X), (Y, G), (Y, Y), (Y, X)]


def test_render_then_parse_then_expand_round_trips() -> None:
    for text in ("GGGGG", "XYYGG", "YXYXY"):
        signature = parse_signature(text)
        assert expand_query(parse_query_line(render_pattern(signature))) == [signature]


def test_build_index_preserves_word_order() -> None:
    index = build_index(["dealt", "ideal", "laden"], "ideal")
    assert index.lookup((Y, Y, Y, Y, X)) == ("dealt", "laden")
    assert index.lookup((G,) * 5) == ("ideal",)
    assert index.lookup((X,) * 5) == ()
    assert len(index) == 2
    assert index.word_count == 3


def test_build_index_rejects_wrong_length_word() -> None:
    with pytest.raises(LengthMismatchError):
        build_index(["ideal", "idea"], "ideal")


def test_resolve_exact_pattern() -> None:
    solver = PatternSolver()
    solver.index = build_index(["apple", "angle", "ample"], "apple")
    assert solver.resolve(parse_query_line("GGGGG")) == ["apple"]


def test_resolve_all_absent_has_no_candidates() -> None:
    solver = PatternSolver()
    solver.index = build_index(["apple", "angle"], "apple")
    assert solver.resolve(parse_query_line("XXXXX")) == []


def test_resolve_rejects_wrong_length_pattern() -> None:
    solver = PatternSolver()
    solver.index = build_index(["apple"], "apple")
    with pytest.raises(LengthMismatchError):
        solver.resolve(parse_query_line("GGG"))


def test_build_index_from_wordlist_filters_lines() -> None:
    solver = PatternSolver()
    result = solver.build_index(sample_wordlist_path(), "  IDEAL ")

    assert result.solution == "ideal"
    assert result.total_lines == 14
    assert result.accepted_words == 10
    assert result.rejected_lines == 4
    assert result.unique_signatures == 8
    assert solver.index is not None
    assert solver.index.lookup((X,) * 5) == ("crwth", "nymph")


def test_resolve_orders_matches_by_expansion() -> None:
    solver = sample_solver()
    assert solver.resolve(parse_query_line("XYY??")) == ["medal", "plaid"]
    assert solver.resolve(parse_query_line("yyyy*")) == ["dealt", "laden"]


def test_wrong_length_words_never_match() -> None:
    solver = sample_solver()
    everything = solver.resolve(parse_query_line("*****"))
    assert len(everything) == 10
    assert "lexicon" not in everything
    assert "abc" not in everything
    assert "de-al" not in everything


def test_solve_reports_each_pattern_in_order() -> None:
    solver = sample_solver()
    report = solver.solve("\n  ??*??\n?XXX?\n\nGGGGG\n")

    assert [r.pattern for r in report.results] == ["??*??", "?XXX?", "GGGGG"]
    assert [r.status for r in report.results] == ["found", "not found", "found"]
    assert report.results[0].matches == ["ideal"]
    assert report.solution == "ideal"
    assert report.all_possible is False


def test_solve_skips_malformed_lines_without_affecting_others() -> None:
    solver = sample_solver()
    report = solver.solve("ggggg\nGGZGG\nGGG\nXXXXX")

    statuses = [r.status for r in report.results]
    assert statuses == ["found", "invalid", "invalid", "found"]
    assert report.results[0].pattern == "GGGGG"
    assert report.results[0].matches == ["ideal"]
    assert "'Z'" in report.results[1].error
    assert "length 5" in report.results[2].error
    assert report.results[3].matches == ["crwth", "nymph"]
    assert report.all_possible is False


def test_solve_all_possible_when_every_pattern_matches() -> None:
    report = sample_solver().solve("GGGGG\nYYYYX")
    assert report.all_possible is True
    assert report.results[1].example == "dealt"
    assert report.results[1].additional_matches == 1


def test_solve_strict_raises_on_bad_symbol() -> None:
    solver = sample_solver()
    with pytest.raises(InvalidSymbolError) as excinfo:
        solver.solve("GGGGG\nGG!GG", strict=True)
    assert excinfo.value.char == "!"
    assert excinfo.value.position == 2
    assert excinfo.value.line == "GG!GG"


def test_missing_wordlist_is_source_unavailable(tmp_path: Path) -> None:
    with pytest.raises(SourceUnavailableError) as excinfo:
        PatternSolver().build_index(str(tmp_path / "missing.txt"), "ideal")
    assert "missing.txt" in str(excinfo.value)


def test_wordlist_without_usable_words_is_empty_candidate_set(tmp_path: Path) -> None:
    path = tmp_path / "words.txt"
    path.write_text("cat\nlexicon\nab-cd\n", encoding="utf-8")
    with pytest.raises(EmptyCandidateSetError):
        PatternSolver().build_index(str(path), "ideal")


def test_invalid_solution_is_rejected() -> None:
    with pytest.raises(InvalidSolutionError):
        PatternSolver().build_index(sample_wordlist_path(), "id3al")


def test_solve_requires_index() -> None:
    with pytest.raises(RuntimeError):
        PatternSolver().solve("GGGGG")


def test_undecodable_line_is_dropped_not_repaired(tmp_path: Path) -> None:
    path = tmp_path / "words.txt"
    path.write_bytes(b"ideal\ncr\xffane\n")
    solver = PatternSolver()
    result = solver.build_index(str(path), "ideal")

    assert result.total_lines == 2
    assert result.accepted_words == 1
    assert result.rejected_lines == 1
    assert solver.resolve(parse_query_line("*****")) == ["ideal"]
