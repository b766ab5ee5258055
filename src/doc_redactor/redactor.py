"""Redactor — the main API.  Layered: regex, layout name, optional flagger.

Usage:
    from doc_redactor import Redactor, RedactorConfig

    redactor = Redactor(RedactorConfig(modes={"name": "hash"}))
    result = await redactor.redact_file("resume.pdf")
    print(result.out_redacted_path, result.counts)

    # plain strings, no I/O
    result = await redactor.redact_text("Contact me at jane@example.com")
    print(result.redacted_text)    # "Contact me at [[EMAIL:xxxxxxxx]]"

Each call is independent: the redactor holds configuration only, never
per-document state.
"""

from __future__ import annotations
import asyncio
import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence

from .errors import ConfigError
from .extract import extract
from .flagger import Flagger, run_flagger
from .layout import scan_layout
from .normalize import normalize_text
from .patterns import scan_regex
from .report import (
    DEFAULT_PREVIEW_LIMIT,
    count_kinds,
    default_out_base,
    sha256_hex,
    write_outputs,
)
from .resolver import resolve_spans
from .types import KINDS, MODES, ExtractedDocument, LayoutLine, RedactionMode, RedactionResult, Span

logger = logging.getLogger(__name__)

DEFAULT_MODES: dict[str, RedactionMode] = {
    "email": "hash",
    "phone": "hash",
    "url": "hash",
    "linkedin": "hash",
    "github": "hash",
    "address": "mask",
    "id": "drop",
    "name": "mask",
    "org": "mask",
    "loc": "mask",
}


def merge_modes(overrides: Mapping[str, str] | None = None) -> dict[str, str]:
    """Overlay per-kind overrides onto DEFAULT_MODES."""
    modes = dict(DEFAULT_MODES)
    for kind, mode in (overrides or {}).items():
        if kind not in KINDS:
            raise ConfigError(f"unknown PII kind {kind!r}; expected one of {list(KINDS)}")
        if mode not in MODES:
            raise ConfigError(f"unknown redaction mode {mode!r} for {kind}; expected one of {list(MODES)}")
        modes[kind] = mode
    return modes


def make_tag(kind: str, value: str) -> str:
    """``[[KIND:xxxxxxxx]]`` — first 8 hex chars of SHA-256 of the value."""
    digest = hashlib.sha256(value.encode("utf-8")).hexdigest()[:8]
    return f"[[{kind.upper()}:{digest}]]"


def apply_redaction(
    text: str,
    spans: Sequence[Span],
    modes: Mapping[str, str],
    *,
    mask_char: str = "*",
) -> str:
    """Rewrite text, replacing each (sorted, non-overlapping) span by its kind's mode."""
    out: list[str] = []
    last = 0
    for s in spans:
        out.append(text[last:s.start])
        mode = modes.get(s.kind) or DEFAULT_MODES.get(s.kind, "hash")
        if mode == "mask":
            out.append(mask_char * s.length)
        elif mode == "hash":
            out.append(make_tag(s.kind, s.value))
        # drop: nothing
        last = s.end
    out.append(text[last:])
    return "".join(out)


@dataclass
class RedactorConfig:
    """Configuration for the Redactor."""
    modes: dict[str, str] = field(default_factory=dict)   # per-kind overrides
    detect_name_from_layout: bool = True                  # PDF only
    preview_limit: int = DEFAULT_PREVIEW_LIMIT
    flagger_timeout: float = 10.0                         # seconds
    mask_char: str = "*"

    def __post_init__(self) -> None:
        if self.preview_limit < 0:
            raise ConfigError("preview_limit must be >= 0")
        if self.flagger_timeout <= 0:
            raise ConfigError("flagger_timeout must be > 0")
        if len(self.mask_char) != 1:
            raise ConfigError("mask_char must be a single character")


class Redactor:
    """Layered PII redactor.

    Layer 1: Fixed regex patterns (emails, phones, URLs, profiles, ...)
    Layer 2: Layout name detector (first page of a PDF)
    Layer 3: Optional external flagger (fail-open)
    """

    def __init__(
        self,
        config: RedactorConfig | None = None,
        flagger: Flagger | None = None,
    ) -> None:
        self.config = config or RedactorConfig()
        self.flagger = flagger
        self.modes = merge_modes(self.config.modes)

    async def detect(
        self,
        normalized: str,
        layout_lines: Sequence[LayoutLine] = (),
    ) -> tuple[list[Span], LayoutLine | None]:
        """Run every detector over normalized text and resolve overlaps."""
        spans: list[Span] = []

        # --- Layer 1: Regex ---
        regex_spans = scan_regex(normalized)
        spans.extend(regex_spans)

        # --- Layer 2: Layout name ---
        candidate: LayoutLine | None = None
        if self.config.detect_name_from_layout and layout_lines:
            layout_spans, candidate = scan_layout(normalized, layout_lines)
            spans.extend(layout_spans)

        # --- Layer 3: Flagger ---
        flagged = await run_flagger(
            self.flagger, normalized, timeout=self.config.flagger_timeout
        )
        spans.extend(flagged)

        logger.debug(
            "Detected regex=%d layout=%d flagger=%d",
            len(regex_spans), len(spans) - len(regex_spans) - len(flagged), len(flagged),
        )
        return resolve_spans(spans), candidate

    async def redact_document(self, document: ExtractedDocument) -> RedactionResult:
        """Redact an already extracted document.  No I/O."""
        normalized = normalize_text(document.text)
        lines = document.first_page_lines if document.is_pdf else ()
        hits, candidate = await self.detect(normalized, lines)
        return RedactionResult(
            redacted_text=apply_redaction(
                normalized, hits, self.modes, mask_char=self.config.mask_char
            ),
            file_hash_sha256=sha256_hex(document.text),
            hits=hits,
            counts=count_kinds(hits),
            modes=dict(self.modes),
            layout_candidate=candidate,
        )

    async def redact_text(self, text: str) -> RedactionResult:
        """Redact a plain string.  Never runs the layout detector."""
        return await self.redact_document(ExtractedDocument(text=text))

    async def redact_file(
        self,
        path: str | Path,
        *,
        out_base: str | Path | None = None,
        write: bool = True,
    ) -> RedactionResult:
        """Extract, redact and (by default) write ``<base>.redacted.txt``
        and ``<base>.pii.report.json``.

        Raises ExtractionError before anything is written, and
        ReportWriteError if persisting fails.
        """
        document = await asyncio.to_thread(extract, path)
        result = await self.redact_document(document)
        if write:
            base = Path(out_base) if out_base is not None else default_out_base(path)
            await asyncio.to_thread(
                write_outputs, result, base, preview_limit=self.config.preview_limit
            )
        return result

    def redact_file_sync(
        self,
        path: str | Path,
        *,
        out_base: str | Path | None = None,
        write: bool = True,
    ) -> RedactionResult:
        """Blocking wrapper around ``redact_file`` for non-async callers."""
        return asyncio.run(self.redact_file(path, out_base=out_base, write=write))


async def redact_file(
    path: str | Path,
    *,
    out_base: str | Path | None = None,
    modes: Mapping[str, str] | None = None,
    detect_name_from_layout: bool = True,
    flagger: Flagger | None = None,
    preview_limit: int = DEFAULT_PREVIEW_LIMIT,
) -> RedactionResult:
    """One-shot convenience: build a Redactor and redact a single file."""
    config = RedactorConfig(
        modes=dict(modes or {}),
        detect_name_from_layout=detect_name_from_layout,
        preview_limit=preview_limit,
    )
    return await Redactor(config, flagger=flagger).redact_file(path, out_base=out_base)
