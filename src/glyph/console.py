# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Rich console rendering for coordinator views."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table
from rich.text import Text

from glyph.coordinator import AnalysisCoordinator
from glyph.model import CoordinatorState, DataType

logger = logging.getLogger(__name__)

EMPHASIS_STYLE = Style(bold=True, reverse=True)

TOKEN_COLUMN_RATIOS: dict[str, int] = {
    "line": 1,
    "span": 2,
    "category": 2,
    "raw_text": 3,
    "detail": 5,
}


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def emphasized_line(state: CoordinatorState) -> int | None:
    """Return the line to emphasize; a selection wins over a hover."""
    if state.selected_line is not None:
        return state.selected_line
    if state.highlight is not None:
        return state.highlight.line
    return None


def render_active_view(coordinator: AnalysisCoordinator, console: Console) -> None:
    """Render the coordinator's active view.

    Args:
        coordinator: Coordinator whose state is rendered.
        console: Destination console.
    """
    state = coordinator.state
    console.print(Text(_status_line(coordinator)))
    if state.last_error:
        console.print(Text(state.last_error, style="red"))
    if state.active_view == "tokens":
        console.print(build_token_table(coordinator))
    elif state.active_view == "symbols":
        console.print(build_symbol_table(coordinator))
        console.print(build_line_table(coordinator))


def build_token_table(coordinator: AnalysisCoordinator) -> Table:
    """Build the token view, emphasizing tokens on the emphasized line."""
    table = Table(title="Tokens", expand=True)
    for column, ratio in TOKEN_COLUMN_RATIOS.items():
        table.add_column(column, ratio=ratio, overflow="fold")
    line = emphasized_line(coordinator.state)
    emphasized = set(coordinator.index.tokens_on_line(line)) if line is not None else set()
    for token in coordinator.index.tokens:
        table.add_row(
            str(token.line),
            f"{token.start}-{token.end}",
            token.category.value,
            Text(token.raw_text),
            Text(token.detail),
            style=EMPHASIS_STYLE if token in emphasized else None,
        )
    return table


def build_symbol_table(coordinator: AnalysisCoordinator) -> Table:
    table = Table(title="Symbols", expand=True)
    for column in ("name", "kind", "data_type", "value", "segment"):
        table.add_column(column)
    for symbol in coordinator.symbol_table:
        table.add_row(
            Text(symbol.name),
            symbol.kind.value,
            "-" if symbol.data_type is DataType.NONE else symbol.data_type.value,
            f"{symbol.value:04X}h",
            Text(symbol.segment),
        )
    return table


def build_line_table(coordinator: AnalysisCoordinator) -> Table:
    table = Table(title="Lines", expand=True)
    for column in ("line", "status", "instruction", "address", "machine_code"):
        table.add_column(column, overflow="fold")
    selected = coordinator.state.selected_line
    for line in coordinator.lines:
        instruction = line.instruction_mnemonic.strip()
        if line.error_message:
            instruction = f"{instruction} [ERR: {line.error_message}]"
        table.add_row(
            str(line.line_number),
            "ok" if line.is_correct else "error",
            Text(instruction),
            Text(line.address or ""),
            Text(line.machine_code or ""),
            style=EMPHASIS_STYLE if line.line_number == selected else None,
        )
    return table


def _status_line(coordinator: AnalysisCoordinator) -> str:
    state = coordinator.state
    filename = state.filename or "<unsaved>"
    return (
        f"{filename} | state={state.analysis_state} | "
        f"tokens={coordinator.token_count} | view={state.active_view}"
    )
