# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for offset and line correlation."""

import pytest

from glyph.highlight_index import HighlightIndex
from glyph.model import AnalysisResult, Token, TokenCategory

SOURCE = "MOV AX, 10h\nADD AX, 1"


@pytest.fixture
def index(tokenize_source) -> HighlightIndex:
    return HighlightIndex.from_result(AnalysisResult(tokens=tokenize_source(SOURCE)))


@pytest.mark.parametrize(
    ("offset", "expected"),
    [
        (0, "MOV"),
        (2, "MOV"),
        (3, None),
        (4, "AX"),
        (6, ","),
        (8, "10h"),
        (10, "10h"),
        (11, None),
        (12, "ADD"),
        (len(SOURCE) - 1, "1"),
        (len(SOURCE), None),
        (-1, None),
    ],
)
def test_ph2_index_001_token_at_resolves_half_open_spans(
    index: HighlightIndex, offset: int, expected: str | None
) -> None:
    token = index.token_at(offset)

    if expected is None:
        assert token is None
    else:
        assert token is not None
        assert token.raw_text == expected
        assert token.start <= offset < token.end


def test_ph2_index_002_tokens_on_line_are_grouped_and_ordered(
    index: HighlightIndex,
) -> None:
    second = index.tokens_on_line(2)

    assert [token.raw_text for token in second] == ["ADD", "AX", ",", "1"]
    assert [token.start for token in second] == sorted(token.start for token in second)
    assert index.tokens_on_line(3) == ()
    assert index.lines() == [1, 2]


def test_ph2_index_003_unsorted_input_is_sorted_by_start(tokenize_source) -> None:
    tokens = tokenize_source(SOURCE)

    index = HighlightIndex(tuple(reversed(tokens)))

    assert index.tokens == tokens
    assert index.token_at(13).raw_text == "ADD"
    assert [token.raw_text for token in index.tokens_on_line(1)] == ["MOV", "AX", ",", "10h"]


def test_ph2_index_004_empty_and_missing_results_build_empty_index() -> None:
    for index in (HighlightIndex.from_result(None), HighlightIndex.from_result(AnalysisResult())):
        assert len(index) == 0
        assert index.token_at(0) is None
        assert index.tokens_on_line(1) == ()


def test_ph2_index_005_zero_width_token_never_shadows_neighbour() -> None:
    marker = Token("", TokenCategory.INVALID, "missing operand", 1, 3, 3)
    word = Token("MOV", TokenCategory.INSTRUCTION, "mov", 1, 0, 3)
    operand = Token("AX", TokenCategory.REGISTER, "ax", 1, 3, 5)

    index = HighlightIndex((operand, marker, word))

    assert index.token_at(3) is operand
    assert index.token_at(2) is word
    assert index.tokens_on_line(1) == (word, marker, operand)
