"""Layout name detector — guesses the document owner's name on page 1.

A resume usually opens with the owner's name set large, centered and
often bold.  Each first-page line that could be a name is scored against
the page's font-size population and its position; the best one is then
located inside the normalized text and emitted as a ``name`` span.

The weights below are empirical.  Changing any of them is a behavior
change and needs re-checking against the layout tests.
"""

from __future__ import annotations
import logging
import math
import re
from typing import Sequence

from .normalize import normalize_text
from .types import LayoutLine, Span

logger = logging.getLogger(__name__)

W_FONT_Z = 2.5
W_CENTERED = 1.2
W_BOLD = 0.6
W_VERTICAL = 1.0
NAME_LENGTH_BONUS = 0.4     # 2–4 tokens
ALL_CAPS_PENALTY = 0.2

SECTION_HEADINGS: tuple[str, ...] = (
    "resume",
    "curriculum vitae",
    "cv",
    "summary",
    "experience",
    "work experience",
    "education",
    "skills",
    "projects",
    "certifications",
    "publications",
    "contact",
    "profile",
    "objective",
)

# letters, whitespace and name punctuation only
_CAPS_CHARSET = re.compile(r"^(?:[^\W\d_]|[\s'.\-])+$")


def looks_like_heading(text: str) -> bool:
    h = text.strip().lower()
    return any(h == w or h.startswith(w + " ") for w in SECTION_HEADINGS)


def _is_all_caps(text: str) -> bool:
    return bool(_CAPS_CHARSET.match(text)) and text == text.upper()


def _is_candidate(line: LayoutLine) -> bool:
    return (
        1 <= line.token_count <= 5
        and not line.has_digits
        and not line.has_email_or_phone
        and not looks_like_heading(line.text)
    )


def choose_name_candidate(lines: Sequence[LayoutLine]) -> LayoutLine | None:
    """Return the highest-scoring name-like line (with its score), or None.

    Font statistics are taken over all lines, not just candidates.  Ties
    keep the earlier line.
    """
    if not lines:
        return None

    top_y = max(l.y for l in lines)
    bottom_y = min(l.y for l in lines)
    mean_f = sum(l.max_font for l in lines) / len(lines)
    std_f = math.sqrt(sum((l.max_font - mean_f) ** 2 for l in lines) / len(lines))

    def z(f: float) -> float:
        return (f - mean_f) / std_f if std_f > 0 else 0.0

    scored: list[LayoutLine] = []
    for line in lines:
        if not _is_candidate(line):
            continue
        y_top_pct = (top_y - line.y) / (top_y - bottom_y + 1e-6)  # 0 = top, ~1 = bottom
        score = (
            W_FONT_Z * z(line.max_font)
            + (W_CENTERED if line.centered else 0.0)
            + (W_BOLD if line.bold else 0.0)
            - W_VERTICAL * y_top_pct
        )
        if 2 <= line.token_count <= 4:
            score += NAME_LENGTH_BONUS
        if _is_all_caps(line.text):
            score -= ALL_CAPS_PENALTY
        scored.append(line.with_score(score))

    if not scored:
        return None
    scored.sort(key=lambda l: -l.score)
    return scored[0]


def locate_candidate(normalized: str, candidate_text: str) -> tuple[int, int] | None:
    """Find candidate text in normalized text, tolerant to whitespace and case."""
    tokens = normalize_text(candidate_text).split()
    if not tokens:
        return None
    pattern = r"\s+".join(re.escape(t) for t in tokens)
    m = re.search(pattern, normalized, re.IGNORECASE)
    if not m:
        return None
    return m.start(), m.end()


def scan_layout(
    normalized: str,
    lines: Sequence[LayoutLine],
) -> tuple[list[Span], LayoutLine | None]:
    """Run the detector.  Returns (spans, candidate); never raises."""
    try:
        candidate = choose_name_candidate(lines)
        if candidate is None:
            return [], None
        logger.debug("Layout candidate score=%.3f y=%s", candidate.score, candidate.y)
        loc = locate_candidate(normalized, candidate.text)
        if loc is None:
            logger.debug("Layout candidate not found in normalized text")
            return [], candidate
        start, end = loc
        return [Span(
            start=start,
            end=end,
            value=normalized[start:end],
            kind="name",
            source="layout",
            score=candidate.score,
        )], candidate
    except Exception as exc:  # noqa: BLE001
        logger.warning("Layout name detection failed: %s", type(exc).__name__)
        return [], None
