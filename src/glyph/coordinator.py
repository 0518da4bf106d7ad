# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Analysis coordination: source state, edit debounce and result lifecycle."""

import asyncio
import inspect
import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any, Callable

from glyph.analyzer import (
    AnalyzerAdapter,
    AnalyzerFailure,
    AnalyzerReport,
    MalformedReportError,
    report_from_payload,
)
from glyph.config import CoordinatorConfig
from glyph.highlight_index import HighlightIndex
from glyph.model import (
    ActiveView,
    AnalysisResult,
    AnalysisState,
    CoordinatorState,
    HighlightInfo,
    LineAnalysis,
    ProgramSummary,
    SymbolRecord,
    Token,
    find_result_violation,
)
from glyph.source_buffer import SourceBuffer, SourceValidationError, load_buffer

logger = logging.getLogger(__name__)

StateListener = Callable[[CoordinatorState], None]

ACTIVE_VIEWS: tuple[ActiveView, ...] = ("load", "tokens", "symbols")
GENERIC_FAILURE_MESSAGE = "Analysis failed"


class AnalysisCoordinator:
    """Own the source buffer, the analysis state machine and its latest result.

    State lives in immutable ``CoordinatorState`` snapshots. Every committed
    change replaces the snapshot and notifies subscribers. Failures raised by
    the analyzer are absorbed into ``analysis_state`` and ``last_error``;
    nothing propagates to callers.

    ``edit_source`` schedules work on the running event loop and must be
    called from inside it.
    """

    def __init__(
        self,
        analyzer: AnalyzerAdapter,
        config: CoordinatorConfig | None = None,
    ) -> None:
        """Initialize an idle coordinator.

        Args:
            analyzer: Analyzer invoked for every run.
            config: Tunables; defaults apply when omitted.
        """
        self._analyzer = analyzer
        self._config = config or CoordinatorConfig()
        self._state = CoordinatorState()
        self._index = HighlightIndex()
        self._listeners: list[StateListener] = []
        self._pending: asyncio.TimerHandle | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self._generation = 0

    # Observable surface

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def config(self) -> CoordinatorConfig:
        return self._config

    @property
    def source_text(self) -> str:
        return self._state.source_text

    @property
    def filename(self) -> str | None:
        return self._state.filename

    @property
    def analysis_state(self) -> AnalysisState:
        return self._state.analysis_state

    @property
    def last_error(self) -> str | None:
        return self._state.last_error

    @property
    def tokens(self) -> tuple[Token, ...]:
        result = self._state.last_result
        return result.tokens if result is not None else ()

    @property
    def symbol_table(self) -> tuple[SymbolRecord, ...]:
        result = self._state.last_result
        return result.symbol_table if result is not None else ()

    @property
    def lines(self) -> tuple[LineAnalysis, ...]:
        result = self._state.last_result
        return result.lines if result is not None else ()

    @property
    def diagnostics(self) -> tuple[str, ...]:
        result = self._state.last_result
        return result.diagnostics if result is not None else ()

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    @property
    def buffer(self) -> SourceBuffer:
        return SourceBuffer(text=self._state.source_text, filename=self._state.filename)

    @property
    def has_source(self) -> bool:
        """Return whether the buffer holds analyzable text."""
        return self.buffer.has_content

    @property
    def is_analyzed(self) -> bool:
        return (
            self._state.analysis_state == "ready"
            and self._state.last_result is not None
        )

    @property
    def index(self) -> HighlightIndex:
        """Return the correlation index built from the current result."""
        return self._index

    @property
    def has_pending_analysis(self) -> bool:
        return self._pending is not None

    def token_at(self, offset: int) -> Token | None:
        return self._index.token_at(offset)

    def selected_tokens(self) -> tuple[Token, ...]:
        """Return the tokens on the selected line, or an empty tuple."""
        if self._state.selected_line is None:
            return ()
        return self._index.tokens_on_line(self._state.selected_line)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener notified with every committed snapshot.

        Args:
            listener: Callable receiving the new ``CoordinatorState``.

        Returns:
            Callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Source mutations

    async def load_source(self, content: str, filename: str) -> bool:
        """Load a file's content and analyze it immediately.

        A filename without the required suffix is rejected: ``last_error``
        names the file and nothing else changes.

        Args:
            content: File content.
            filename: Originating filename.

        Returns:
            ``True`` if the load was accepted.
        """
        try:
            buffer = load_buffer(content, filename, self._config.required_suffix)
        except SourceValidationError as exc:
            self._commit(last_error=str(exc))
            return False

        self._cancel_pending()
        self._commit(
            source_text=buffer.text,
            filename=buffer.filename,
            active_view="tokens",
        )
        logger.info(
            f"Source loaded (filename={filename} characters={len(buffer.text)})"
        )
        await self.run_analysis()
        return True

    def edit_source(self, new_text: str) -> None:
        """Replace the source text and schedule a debounced analysis.

        Any analysis still waiting on the debounce window is cancelled, so a
        burst of edits yields a single analyzer call on the final text. Runs
        already in flight are superseded and their results discarded.

        Raises:
            RuntimeError: If called outside a running event loop.
        """
        loop = asyncio.get_running_loop()
        self._generation += 1
        self._commit(source_text=new_text)
        self._schedule_analysis(loop)

    def clear(self) -> None:
        """Reset to the initial idle state and supersede in-flight runs."""
        self._cancel_pending()
        self._generation += 1
        self._commit(
            source_text="",
            filename=None,
            analysis_state="idle",
            last_error=None,
            last_result=None,
            selected_line=None,
            highlight=None,
            active_view="load",
        )

    # Presentation setters

    def set_selected_line(self, line: int | None) -> None:
        """Select a line; a selection replaces any transient highlight."""
        if line is None:
            self._commit(selected_line=None)
        else:
            self._commit(selected_line=line, highlight=None)

    def set_highlight(self, info: HighlightInfo | None) -> None:
        self._commit(highlight=info)

    def set_active_view(self, view: ActiveView) -> None:
        if view not in ACTIVE_VIEWS:
            raise ValueError(f"Unknown view: {view}")
        self._commit(active_view=view)

    # Analysis

    async def run_analysis(self) -> None:
        """Analyze the current source text.

        Does nothing for empty or whitespace-only text, except that a
        ``loading`` state left by a superseded run falls back to ``idle``.
        Otherwise the state moves to ``loading`` and resolves to ``ready`` or
        ``error``. A run superseded by a newer one, by an edit or by ``clear``
        is discarded on arrival.
        """
        buffer = self.buffer
        if not buffer.has_content:
            logger.debug("Analysis skipped for empty source")
            if self._state.analysis_state == "loading":
                self._generation += 1
                self._commit(analysis_state="idle")
            return

        self._generation += 1
        generation = self._generation
        self._commit(analysis_state="loading")

        try:
            report = await self._invoke_analyzer(buffer.text)
            result = self._build_result(report, buffer.text)
        except Exception as exc:  # noqa: BLE001
            self._absorb_failure(generation, exc)
            return
        self._apply_result(generation, result)

    async def settle(self) -> None:
        """Wait until no debounced analysis is pending and none is in flight."""
        loop = asyncio.get_running_loop()
        while self._pending is not None or self._in_flight:
            if self._pending is not None:
                await asyncio.sleep(max(0.0, self._pending.when() - loop.time()))
                continue
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    async def _call_analyzer(self, source_text: str) -> Any:
        analyze = self._analyzer.analyze
        if inspect.iscoroutinefunction(analyze):
            report = await analyze(source_text)
        else:
            report = await asyncio.to_thread(analyze, source_text)
        if inspect.isawaitable(report):
            report = await report
        return report

    async def _invoke_analyzer(self, source_text: str) -> AnalyzerReport:
        timeout = self._config.analysis_timeout_seconds
        try:
            report = await asyncio.wait_for(
                self._call_analyzer(source_text), timeout=timeout
            )
        except asyncio.TimeoutError as exc:
            raise AnalyzerFailure(f"analysis timed out after {timeout}s") from exc
        if isinstance(report, Mapping):
            return report_from_payload(report)
        if not isinstance(report, AnalyzerReport):
            raise MalformedReportError(
                f"analyzer returned {type(report).__name__}, expected AnalyzerReport"
            )
        return report

    def _build_result(self, report: AnalyzerReport, source_text: str) -> AnalysisResult:
        program = report.program or ProgramSummary()
        result = AnalysisResult(
            tokens=tuple(report.tokens or ()),
            symbol_table=tuple(
                sorted(
                    program.symbol_table,
                    key=lambda symbol: (symbol.segment, symbol.value),
                )
            ),
            lines=tuple(sorted(program.lines, key=lambda line: line.line_number)),
            diagnostics=tuple(report.errors),
            succeeded=report.success,
        )
        violation = find_result_violation(result, len(source_text))
        if violation is not None:
            raise MalformedReportError(violation)
        return result

    def _apply_result(self, generation: int, result: AnalysisResult) -> None:
        if generation != self._generation:
            logger.debug(
                f"Discarding superseded analysis result "
                f"(generation={generation} current={self._generation})"
            )
            return
        if result.succeeded:
            analysis_state: AnalysisState = "ready"
            last_error = None
        else:
            analysis_state = "error"
            last_error = self._surface_diagnostics(result.diagnostics)
        self._commit(
            last_result=result,
            analysis_state=analysis_state,
            last_error=last_error,
        )
        logger.info(
            f"Analysis completed (generation={generation} state={analysis_state} "
            f"tokens={len(result.tokens)} symbols={len(result.symbol_table)} "
            f"diagnostics={len(result.diagnostics)})"
        )

    def _absorb_failure(self, generation: int, exc: Exception) -> None:
        if generation != self._generation:
            logger.debug(
                f"Discarding superseded analysis failure "
                f"(generation={generation} current={self._generation} error={exc})"
            )
            return
        detail = str(exc)
        message = (
            f"{GENERIC_FAILURE_MESSAGE}: {detail}" if detail else GENERIC_FAILURE_MESSAGE
        )
        logger.warning(
            f"Analyzer call failed (generation={generation} "
            f"error_type={type(exc).__name__} error={exc})"
        )
        self._commit(analysis_state="error", last_error=message)

    def _surface_diagnostics(self, diagnostics: tuple[str, ...]) -> str:
        surfaced = diagnostics[: self._config.max_surfaced_diagnostics]
        if not surfaced:
            return GENERIC_FAILURE_MESSAGE
        return self._config.diagnostic_separator.join(surfaced)

    # Debounce

    def _schedule_analysis(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._cancel_pending():
            logger.debug("Pending analysis rescheduled after edit")
        self._pending = loop.call_later(
            self._config.debounce_seconds, self._fire_pending
        )

    def _cancel_pending(self) -> bool:
        if self._pending is None:
            return False
        self._pending.cancel()
        self._pending = None
        return True

    def _fire_pending(self) -> None:
        self._pending = None
        task = asyncio.get_running_loop().create_task(self.run_analysis())
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    # State commits

    def _commit(self, **changes: Any) -> None:
        previous = self._state
        state = replace(previous, **changes)
        if state == previous:
            return
        self._state = state
        if state.last_result is not previous.last_result:
            self._index = HighlightIndex.from_result(state.last_result)
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    f"State listener failed (listener={listener!r} error={exc})"
                )
