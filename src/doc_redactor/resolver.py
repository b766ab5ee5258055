"""Span resolver — merge candidates from all detectors into one
ordered, non-overlapping list.

Single pass over candidates sorted by start, longest first.  When a
candidate overlaps the last accepted span it replaces it if it is strictly
shorter, or if its source has strictly higher priority.  Shorter wins even
over a higher-priority source.
"""

from __future__ import annotations
import logging
from typing import Iterable

from .types import Span

logger = logging.getLogger(__name__)

SOURCE_PRIORITY: dict[str, int] = {"regex": 3, "flagger": 2, "layout": 2, "ner": 1}

# Among identical ranges of equal priority the layout span is kept over
# the flagger's
_TIE_ORDER: dict[str, int] = {"regex": 0, "layout": 1, "flagger": 2, "ner": 3}


def source_priority(source: str | None) -> int:
    return SOURCE_PRIORITY.get(source or "", 0)


def _sort_key(s: Span) -> tuple:
    # start asc, end desc; the rest only orders identical ranges so the
    # result does not depend on the order detectors ran in
    return (
        s.start,
        -s.end,
        -source_priority(s.source),
        _TIE_ORDER.get(s.source, len(_TIE_ORDER)),
        s.kind,
        -(s.score or 0.0),
    )


def resolve_spans(spans: Iterable[Span]) -> list[Span]:
    """Return non-overlapping spans in ascending order.  Input is not mutated."""
    ordered = sorted(spans, key=_sort_key)
    out: list[Span] = []
    for s in ordered:
        if not out or s.start >= out[-1].end:
            out.append(s)
            continue
        top = out[-1]
        if s.length < top.length or source_priority(s.source) > source_priority(top.source):
            out[-1] = s
    logger.debug("Resolved %d candidate spans to %d", len(ordered), len(out))
    return out
