"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Literal

Kind = Literal[
    "email", "phone", "url", "linkedin", "github",
    "address", "id", "name", "org", "loc",
]
RedactionMode = Literal["hash", "mask", "drop"]
Source = Literal["regex", "layout", "flagger", "ner"]

KINDS: tuple[str, ...] = (
    "email", "phone", "url", "linkedin", "github",
    "address", "id", "name", "org", "loc",
)
MODES: tuple[str, ...] = ("hash", "mask", "drop")


@dataclass(frozen=True, slots=True)
class Span:
    """A detected PII range in normalized text."""
    start: int
    end: int
    value: str             # normalized_text[start:end]
    kind: Kind
    source: Source
    score: float | None = None

    def __post_init__(self) -> None:
        if self.start < 0 or self.end <= self.start:
            raise ValueError(f"invalid span range [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "value": self.value,
            "kind": self.kind,
            "source": self.source,
            "score": self.score,
        }


@dataclass(frozen=True, slots=True)
class LayoutLine:
    """One visual line of text on the first page of a PDF.

    ``y`` is the rounded baseline in PDF user space, so larger values are
    higher up the page.
    """
    text: str
    y: float
    x: float
    width: float
    max_font: float
    avg_font: float
    centered: bool
    bold: bool
    token_count: int
    has_digits: bool
    has_email_or_phone: bool
    score: float | None = None

    def with_score(self, score: float) -> LayoutLine:
        return replace(self, score=score)


@dataclass(frozen=True, slots=True)
class FlagProposal:
    """A span proposed by an external flagger."""
    start: int
    end: int
    label: str
    score: float | None = None


@dataclass(frozen=True, slots=True)
class ExtractedDocument:
    """Text pulled out of a source file, plus first-page layout for PDFs."""
    text: str
    first_page_lines: tuple[LayoutLine, ...] = ()
    page_width: float = 0.0
    is_pdf: bool = False


@dataclass(slots=True)
class RedactionResult:
    """Result of redacting one document."""
    redacted_text: str
    file_hash_sha256: str                       # of the pre-normalization text
    hits: list[Span] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)
    modes: dict[str, str] = field(default_factory=dict)   # effective mode table
    layout_candidate: LayoutLine | None = None
    out_redacted_path: Path | None = None
    out_report_path: Path | None = None
