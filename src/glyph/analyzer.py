# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Analyzer interfaces and DTOs for source analysis."""

import logging
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from glyph.model import (
    DataType,
    LineAnalysis,
    ProgramSummary,
    SymbolKind,
    SymbolRecord,
    Token,
    TokenCategory,
)

logger = logging.getLogger(__name__)

_CATEGORY_ALIASES: dict[str, TokenCategory] = {
    "instruction": TokenCategory.INSTRUCTION,
    "directive": TokenCategory.DIRECTIVE,
    "pseudoinstruction": TokenCategory.DIRECTIVE,
    "register": TokenCategory.REGISTER,
    "constant": TokenCategory.CONSTANT,
    "decimal": TokenCategory.CONSTANT,
    "hexadecimal": TokenCategory.CONSTANT,
    "binary": TokenCategory.CONSTANT,
    "string": TokenCategory.STRING,
    "symbol": TokenCategory.SYMBOL,
    "punctuation": TokenCategory.PUNCTUATION,
    "invalid": TokenCategory.INVALID,
    "error": TokenCategory.INVALID,
}


class AnalyzerFailure(RuntimeError):
    """Represent an analyzer call that raised instead of reporting."""


class MalformedReportError(AnalyzerFailure):
    """Represent an analyzer report that violates the report contract."""


@dataclass(frozen=True)
class AnalyzerReport:
    """Represent the structured outcome of one analyzer call.

    Attributes:
        success: Whether the analyzer accepted the source.
        tokens: Reported tokens, or ``None`` when none were produced.
        errors: Diagnostics describing flaws in the source.
        program: Program-level output, or ``None`` when unavailable.
    """

    success: bool
    tokens: tuple[Token, ...] | None = None
    errors: tuple[str, ...] = ()
    program: ProgramSummary | None = None


class AnalyzerAdapter(Protocol):
    """Source analyzer contract.

    Implementations must be pure functions of ``source_text``. ``analyze`` may
    be a coroutine function; plain functions are run off the event loop, and
    an awaitable they return is awaited on it.
    """

    def analyze(
        self, source_text: str
    ) -> AnalyzerReport | Awaitable[AnalyzerReport]:
        """Analyze source text.

        Args:
            source_text: Full source buffer text.

        Returns:
            Structured analyzer report.

        Raises:
            AnalyzerFailure: If the analyzer cannot produce a report.
        """


def parse_category(name: str) -> TokenCategory:
    """Map an analyzer category name to a token category.

    Unknown names map to ``TokenCategory.INVALID``.
    """
    category = _CATEGORY_ALIASES.get(name.strip().lower())
    if category is None:
        logger.debug(f"Unknown token category mapped to Invalid (category={name!r})")
        return TokenCategory.INVALID
    return category


def report_from_payload(payload: Mapping[str, Any]) -> AnalyzerReport:
    """Build a typed report from a serialized analyzer payload.

    Args:
        payload: Mapping with ``success``, ``tokens``, ``errors`` and ``program``
            keys as emitted by the analysis engine.

    Returns:
        Typed analyzer report.

    Raises:
        MalformedReportError: If a required key is missing or has the wrong type.
    """
    try:
        raw_tokens = payload.get("tokens")
        tokens = (
            None
            if raw_tokens is None
            else tuple(_token_from_payload(item) for item in raw_tokens)
        )
        errors = tuple(str(message) for message in payload.get("errors") or ())
        raw_program = payload.get("program")
        program = None if raw_program is None else _program_from_payload(raw_program)
        return AnalyzerReport(
            success=bool(payload["success"]),
            tokens=tokens,
            errors=errors,
            program=program,
        )
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning(f"Analyzer payload rejected (error={exc!r})")
        raise MalformedReportError(f"malformed analyzer payload: {exc!r}") from exc


def _token_from_payload(item: Mapping[str, Any]) -> Token:
    return Token(
        raw_text=str(item["element"]),
        category=parse_category(str(item["category"])),
        detail=str(item.get("detail") or ""),
        line=int(item["line"]),
        start=int(item["start"]),
        end=int(item["end"]),
    )


def _program_from_payload(raw_program: Mapping[str, Any]) -> ProgramSummary:
    symbols = tuple(
        SymbolRecord(
            name=str(item["name"]),
            kind=SymbolKind(item["type_"]),
            data_type=DataType(item.get("data_type") or "None"),
            value=int(item.get("value") or 0),
            segment=str(item.get("segment") or ""),
        )
        for item in raw_program.get("symbol_table") or ()
    )
    lines = tuple(
        LineAnalysis(
            line_number=int(item["line_number"]),
            is_correct=bool(item["is_correct"]),
            error_message=item.get("error_message"),
            instruction_mnemonic=str(item.get("instruction") or ""),
            address=None if item.get("address") is None else str(item["address"]),
            machine_code=item.get("machine_code"),
        )
        for item in raw_program.get("lines") or ()
    )
    return ProgramSummary(symbol_table=symbols, lines=lines)
