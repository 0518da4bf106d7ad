# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Coordinator configuration."""

from dataclasses import dataclass

DEFAULT_DEBOUNCE_SECONDS = 0.3
DEFAULT_ANALYSIS_TIMEOUT_SECONDS = 10.0
DEFAULT_REQUIRED_SUFFIX = ".asm"


@dataclass(frozen=True)
class CoordinatorConfig:
    """Describe tunables for one analysis coordinator.

    Attributes:
        debounce_seconds: Quiescence window applied to edits before analysis.
        analysis_timeout_seconds: Upper bound for one analyzer call; ``None``
            waits indefinitely.
        required_suffix: Filename suffix accepted by loads (case-insensitive).
        max_surfaced_diagnostics: Diagnostics joined into the surfaced error.
        diagnostic_separator: Join string for surfaced diagnostics.

    Raises:
        ValueError: If a numeric setting is out of range or the suffix is empty.
    """

    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    analysis_timeout_seconds: float | None = DEFAULT_ANALYSIS_TIMEOUT_SECONDS
    required_suffix: str = DEFAULT_REQUIRED_SUFFIX
    max_surfaced_diagnostics: int = 2
    diagnostic_separator: str = "; "

    def __post_init__(self) -> None:
        if self.debounce_seconds < 0:
            raise ValueError("debounce_seconds must be >= 0")
        if self.analysis_timeout_seconds is not None and self.analysis_timeout_seconds <= 0:
            raise ValueError("analysis_timeout_seconds must be > 0")
        if not self.required_suffix:
            raise ValueError("required_suffix must not be empty")
        if self.max_surfaced_diagnostics <= 0:
            raise ValueError("max_surfaced_diagnostics must be > 0")
