"""Error hierarchy for doc-redactor.

Input and write failures are fatal and surface to the caller. Detector
failures never appear here: the layout detector and the flagger runner
degrade to "no spans" instead of raising.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import RedactionResult


class RedactorError(Exception):
    """Base error for doc-redactor."""


class ExtractionError(RedactorError):
    """The source document could not be read or decoded.

    Attributes:
        path: The file that failed to extract
        reason: Human-readable error description
    """

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to extract {self.path}: {reason}")


class ReportWriteError(RedactorError):
    """Redacted text or report could not be persisted.

    Attributes:
        path: The output file that failed to write
        reason: Human-readable error description
        result: The in-memory result, so the caller can persist it itself
    """

    def __init__(
        self,
        path: str | Path,
        reason: str,
        result: RedactionResult | None = None,
    ) -> None:
        self.path = Path(path)
        self.reason = reason
        self.result = result
        super().__init__(f"Failed to write {self.path}: {reason}")


class ConfigError(RedactorError):
    """Invalid redactor configuration (unknown kind or mode, bad limits)."""
