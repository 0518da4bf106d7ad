# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Offset and line correlation index over analysis tokens."""

import bisect
from collections import defaultdict

from glyph.model import AnalysisResult, Token


class HighlightIndex:
    """Map character offsets and line numbers to tokens.

    An index is immutable and built from exactly one ``AnalysisResult``; a new
    result gets a new index.
    """

    def __init__(self, tokens: tuple[Token, ...] = ()) -> None:
        """Build the index.

        Args:
            tokens: Tokens of one analysis result, in any order.
        """
        self._tokens: tuple[Token, ...] = tuple(
            sorted(tokens, key=lambda token: (token.start, token.end))
        )
        self._starts: list[int] = [token.start for token in self._tokens]
        by_line: dict[int, list[Token]] = defaultdict(list)
        for token in self._tokens:
            by_line[token.line].append(token)
        self._by_line: dict[int, tuple[Token, ...]] = {
            line: tuple(line_tokens) for line, line_tokens in by_line.items()
        }

    @classmethod
    def from_result(cls, result: AnalysisResult | None) -> "HighlightIndex":
        if result is None:
            return cls()
        return cls(result.tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._tokens

    def token_at(self, offset: int) -> Token | None:
        """Return the token whose ``[start, end)`` span contains ``offset``.

        Args:
            offset: Character offset into the analyzed source.

        Returns:
            The covering token, or ``None`` when the offset falls between
            tokens or outside the source.
        """
        position = bisect.bisect_right(self._starts, offset) - 1
        if position < 0:
            return None
        # Spans never overlap, so only the last token starting at or before
        # the offset can cover it.
        token = self._tokens[position]
        return token if token.contains(offset) else None

    def tokens_on_line(self, line: int) -> tuple[Token, ...]:
        """Return tokens on ``line`` ordered by start offset."""
        return self._by_line.get(line, ())

    def lines(self) -> list[int]:
        return sorted(self._by_line)
