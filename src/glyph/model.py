# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for analysis artifacts."""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

AnalysisState = Literal["idle", "loading", "ready", "error"]
ActiveView = Literal["load", "tokens", "symbols"]


class TokenCategory(str, Enum):
    """Lexical category reported for a token."""

    INSTRUCTION = "Instruction"
    DIRECTIVE = "Directive"
    REGISTER = "Register"
    CONSTANT = "Constant"
    STRING = "String"
    SYMBOL = "Symbol"
    PUNCTUATION = "Punctuation"
    INVALID = "Invalid"


class SymbolKind(str, Enum):
    VARIABLE = "Variable"
    LABEL = "Label"
    CONSTANT = "Constant"


class DataType(str, Enum):
    BYTE = "Byte"
    WORD = "Word"
    DWORD = "Dword"
    NONE = "None"


@dataclass(frozen=True)
class Token:
    """Represent one lexical unit of analyzed source.

    Attributes:
        raw_text: Exact source text covered by the token.
        category: Lexical category.
        detail: Analyzer-provided classification detail.
        line: Source line (1-based).
        start: Span start offset (inclusive).
        end: Span end offset (exclusive).
    """

    raw_text: str
    category: TokenCategory
    detail: str
    line: int
    start: int
    end: int

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end


@dataclass(frozen=True)
class SymbolRecord:
    """Represent one declared name and its attributes.

    Attributes:
        name: Declared identifier.
        kind: Declaration kind.
        data_type: Storage width for variables; ``NONE`` otherwise.
        value: Offset for variables/labels, value for constants.
        segment: Owning segment name.
    """

    name: str
    kind: SymbolKind
    data_type: DataType
    value: int
    segment: str


@dataclass(frozen=True)
class LineAnalysis:
    """Represent the analysis verdict for one source line.

    Attributes:
        line_number: Source line (1-based).
        is_correct: Whether the line passed validation.
        error_message: Diagnostic for incorrect lines.
        instruction_mnemonic: Reconstructed instruction text for display.
        address: Location counter rendered as text, when assigned.
        machine_code: Encoded bytes rendered as text, when assigned.
    """

    line_number: int
    is_correct: bool
    error_message: str | None
    instruction_mnemonic: str
    address: str | None = None
    machine_code: str | None = None


@dataclass(frozen=True)
class AnalysisResult:
    """Represent one complete analysis generation.

    Instances are replaced as a whole; fields are never patched in place.
    """

    tokens: tuple[Token, ...] = ()
    symbol_table: tuple[SymbolRecord, ...] = ()
    lines: tuple[LineAnalysis, ...] = ()
    diagnostics: tuple[str, ...] = ()
    succeeded: bool = False


@dataclass(frozen=True)
class HighlightInfo:
    """Represent a transient hover or selection target."""

    line: int
    token_text: str
    detail: str
    start: int | None = None
    end: int | None = None


@dataclass(frozen=True)
class CoordinatorState:
    """Represent one committed snapshot of the coordinator.

    Attributes:
        source_text: Current source buffer text.
        filename: Originating filename; ``None`` for unnamed buffers.
        analysis_state: Current analysis state machine state.
        last_error: Message surfaced for the latest failure, if any.
        last_result: Latest accepted analysis result.
        selected_line: Line selected by the user.
        highlight: Transient hover target.
        active_view: Presentation view currently shown.
    """

    source_text: str = ""
    filename: str | None = None
    analysis_state: AnalysisState = "idle"
    last_error: str | None = None
    last_result: AnalysisResult | None = None
    selected_line: int | None = None
    highlight: HighlightInfo | None = None
    active_view: ActiveView = "load"


@dataclass(frozen=True)
class ProgramSummary:
    """Represent the analyzer's program-level output.

    Attributes:
        symbol_table: Declared symbols.
        lines: Per-line verdicts.
    """

    symbol_table: tuple[SymbolRecord, ...] = ()
    lines: tuple[LineAnalysis, ...] = ()


def check_token_spans(tokens: tuple[Token, ...], text_length: int) -> str | None:
    """Check tokens against the span invariant.

    Args:
        tokens: Tokens in reported order.
        text_length: Length of the analyzed source text.

    Returns:
        Description of the first violation, or ``None`` when all spans hold.
    """
    previous_end = 0
    for position, token in enumerate(tokens):
        if not 0 <= token.start <= token.end <= text_length:
            return (
                f"token {position} span [{token.start}, {token.end}) "
                f"outside source of length {text_length}"
            )
        if token.start < previous_end:
            return (
                f"token {position} starting at {token.start} overlaps "
                f"or precedes previous token ending at {previous_end}"
            )
        previous_end = token.end
    return None


def find_result_violation(result: AnalysisResult, text_length: int) -> str | None:
    """Check a result against the token, symbol and line invariants.

    Returns:
        Description of the first violation, or ``None`` when the result holds.
    """
    violation = check_token_spans(result.tokens, text_length)
    if violation is not None:
        return violation
    seen_symbols: set[tuple[str, str]] = set()
    for symbol in result.symbol_table:
        key = (symbol.name, symbol.segment)
        if key in seen_symbols:
            return f"duplicate symbol {symbol.name!r} in segment {symbol.segment!r}"
        seen_symbols.add(key)
    seen_lines: set[int] = set()
    for line in result.lines:
        if line.line_number in seen_lines:
            return f"duplicate analysis for line {line.line_number}"
        seen_lines.add(line.line_number)
    return None
