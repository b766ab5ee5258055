"""Document extraction: plain text, or PDF text plus first-page layout.

PDF path
--------
PyMuPDF ``page.get_text("dict")`` spans are treated as the PDF's text
items.  Every page contributes its items joined by single spaces and a
trailing newline to the full text.  Only page 1 is decomposed further into
``LayoutLine`` objects for the layout name detector.

Coordinates
-----------
PyMuPDF reports positions with the origin at the top-left and ``y``
growing downward.  Items are converted to PDF user space (origin
bottom-left, ``y`` growing upward) so that a larger baseline means higher
on the page.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import fitz  # PyMuPDF

from .errors import ExtractionError
from .patterns import has_email_or_phone
from .types import ExtractedDocument, LayoutLine

logger = logging.getLogger(__name__)

CENTER_TOLERANCE: float = 0.15   # fraction of page width
_BOLD_MARKERS = ("bold", "semibold", "demi", "black")
_WS = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class PdfItem:
    """A positioned run of text.

    ``transform`` is the (a, b, c, d, e, f) text matrix in PDF user space;
    ``e`` and ``f`` are the baseline origin.
    """
    text: str
    transform: tuple[float, float, float, float, float, float]
    font_name: str = ""

    @property
    def x(self) -> float:
        return self.transform[4]

    @property
    def y(self) -> float:
        return self.transform[5]


def font_size_from_transform(t: tuple[float, ...]) -> float:
    """Larger of the horizontal and vertical scale magnitudes."""
    return max(math.hypot(t[0], t[1]), math.hypot(t[2], t[3]))


def is_bold_font_name(name: str | None) -> bool:
    n = (name or "").lower()
    return any(marker in n for marker in _BOLD_MARKERS)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def build_layout_lines(items: Iterable[PdfItem], page_width: float) -> list[LayoutLine]:
    """Group items sharing a rounded baseline into lines, top to bottom."""
    by_y: dict[int, list[PdfItem]] = {}
    for item in items:
        if not item.text:
            continue
        by_y.setdefault(_round_half_up(item.y), []).append(item)

    lines: list[LayoutLine] = []
    page_center = page_width / 2
    for key in sorted(by_y, reverse=True):
        runs = sorted(by_y[key], key=lambda it: it.x)
        text = _WS.sub(" ", " ".join(r.text for r in runs)).strip()
        if not text:
            continue

        sizes = [font_size_from_transform(r.transform) for r in runs]
        x_min, x_max = runs[0].x, runs[-1].x
        width = max(0.0, x_max - x_min)
        line_center = x_min + width / 2

        lines.append(LayoutLine(
            text=text,
            y=float(key),
            x=x_min,
            width=width,
            max_font=max(sizes),
            avg_font=sum(sizes) / len(sizes),
            centered=abs(line_center - page_center) < page_width * CENTER_TOLERANCE,
            bold=any(is_bold_font_name(r.font_name) for r in runs),
            token_count=len(text.split()),
            has_digits=any(ch.isdigit() for ch in text),
            has_email_or_phone=has_email_or_phone(text),
        ))
    return lines


def _page_items(page: fitz.Page) -> list[PdfItem]:
    """Text spans of one page as PdfItems, in content order."""
    page_height = page.rect.height
    items: list[PdfItem] = []
    raw = page.get_text("dict")
    for block in raw.get("blocks", []):
        if block.get("type") != 0:  # 0 = text; 1 = image
            continue
        for line in block.get("lines", []):
            cos, sin = line.get("dir", (1.0, 0.0))
            for span in line.get("spans", []):
                text = span.get("text", "")
                if not text:
                    continue
                size = float(span.get("size", 0.0))
                ox, oy = span.get("origin", (0.0, 0.0))
                # PyMuPDF's y axis points down; flip rotation and origin
                transform = (
                    size * cos, -size * sin,
                    size * sin, size * cos,
                    float(ox), page_height - float(oy),
                )
                items.append(PdfItem(
                    text=text,
                    transform=transform,
                    font_name=span.get("font", ""),
                ))
    return items


def extract_pdf(path: str | Path) -> ExtractedDocument:
    """Extract all page text and first-page layout lines from a PDF."""
    path = Path(path)
    try:
        doc = fitz.open(str(path))
    except Exception as exc:  # noqa: BLE001
        raise ExtractionError(path, f"cannot open PDF ({type(exc).__name__}: {exc})") from exc

    with doc:
        if doc.needs_pass:
            raise ExtractionError(path, "PDF is encrypted")

        parts: list[str] = []
        first_lines: list[LayoutLine] = []
        page_width = 0.0
        try:
            for page_num in range(len(doc)):
                page = doc.load_page(page_num)
                items = _page_items(page)
                parts.append(" ".join(it.text for it in items) + "\n")
                if page_num == 0:
                    page_width = page.rect.width
                    first_lines = build_layout_lines(items, page_width)
        except Exception as exc:  # noqa: BLE001
            raise ExtractionError(path, f"corrupt PDF content ({type(exc).__name__}: {exc})") from exc

    logger.debug(
        "Extracted PDF path=%s pages=%d first_page_lines=%d",
        path, len(parts), len(first_lines),
    )
    return ExtractedDocument(
        text="".join(parts),
        first_page_lines=tuple(first_lines),
        page_width=page_width,
        is_pdf=True,
    )


def extract_text(path: str | Path) -> ExtractedDocument:
    """Read a plain text document as UTF-8."""
    path = Path(path)
    try:
        # bytes first: no newline translation before fingerprinting
        text = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ExtractionError(path, str(exc)) from exc
    return ExtractedDocument(text=text)


def extract(path: str | Path) -> ExtractedDocument:
    """Dispatch on file extension: ``.pdf`` gets layout-aware extraction."""
    path = Path(path)
    if path.suffix.lower() == ".pdf":
        return extract_pdf(path)
    return extract_text(path)
