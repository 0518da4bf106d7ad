# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Source buffer holding the text under analysis."""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class SourceValidationError(ValueError):
    """Represent a rejected source load."""

    def __init__(self, filename: str, required_suffix: str) -> None:
        super().__init__(
            f'Invalid file: "{filename}" is not a {required_suffix} file'
        )
        self.filename = filename
        self.required_suffix = required_suffix


@dataclass(frozen=True)
class SourceBuffer:
    """Represent the current source text and its origin.

    Attributes:
        text: Full source text.
        filename: Originating filename; ``None`` for typed-in buffers.
    """

    text: str = ""
    filename: str | None = None

    @property
    def has_content(self) -> bool:
        """Return whether the buffer holds anything worth analyzing."""
        return bool(self.text.strip())


def validate_filename(filename: str, required_suffix: str) -> None:
    """Check that a filename carries the required suffix.

    Args:
        filename: Name of the file offered for loading.
        required_suffix: Accepted suffix, matched case-insensitively.

    Raises:
        SourceValidationError: If the suffix does not match.
    """
    if not filename.lower().endswith(required_suffix.lower()):
        logger.warning(
            f"Source load rejected (filename={filename} required_suffix={required_suffix})"
        )
        raise SourceValidationError(filename=filename, required_suffix=required_suffix)


def load_buffer(content: str, filename: str, required_suffix: str) -> SourceBuffer:
    """Build a buffer for a loaded file after validating its name.

    Raises:
        SourceValidationError: If the filename lacks the required suffix.
    """
    validate_filename(filename, required_suffix)
    return SourceBuffer(text=content, filename=filename)
