# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for the glyph analysis core."""

from glyph.analyzer import (
    AnalyzerAdapter,
    AnalyzerFailure,
    AnalyzerReport,
    MalformedReportError,
    report_from_payload,
)
from glyph.config import CoordinatorConfig
from glyph.coordinator import AnalysisCoordinator
from glyph.highlight_index import HighlightIndex
from glyph.model import (
    AnalysisResult,
    CoordinatorState,
    DataType,
    HighlightInfo,
    LineAnalysis,
    ProgramSummary,
    SymbolKind,
    SymbolRecord,
    Token,
    TokenCategory,
)
from glyph.source_buffer import SourceBuffer, SourceValidationError

__all__ = [
    "AnalysisCoordinator",
    "AnalysisResult",
    "AnalyzerAdapter",
    "AnalyzerFailure",
    "AnalyzerReport",
    "CoordinatorConfig",
    "CoordinatorState",
    "DataType",
    "HighlightIndex",
    "HighlightInfo",
    "LineAnalysis",
    "MalformedReportError",
    "ProgramSummary",
    "SourceBuffer",
    "SourceValidationError",
    "SymbolKind",
    "SymbolRecord",
    "Token",
    "TokenCategory",
    "report_from_payload",
]
