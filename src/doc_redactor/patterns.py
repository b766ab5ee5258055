"""Pattern detector — fixed regexes for structured PII.

Runs over normalized text and is near-zero cost.  Matches of different
kinds may overlap; the resolver sorts that out later, so nothing is
deduplicated here.
"""

from __future__ import annotations
import re
from .types import Span

# Each pattern: (kind, compiled_regex)
PATTERNS: list[tuple[str, re.Pattern]] = [
    ("email", re.compile(
        r"\b[A-Z0-9._%+\-]+@[A-Z0-9.\-]+\.[A-Z]{2,}\b", re.IGNORECASE
    )),

    # Phone — optional country code, optional area code in parens
    ("phone", re.compile(
        r"\+?[0-9]{1,3}[\s\-]?\(?[0-9]{2,4}\)?[\s\-]?[0-9]{3,4}\b"
    )),

    ("url", re.compile(r"\bhttps?://[^\s)]+", re.IGNORECASE)),

    ("linkedin", re.compile(
        r"\blinkedin\.com/in/[A-Za-z0-9._\-]+", re.IGNORECASE
    )),

    ("github", re.compile(r"\bgithub\.com/[A-Za-z0-9._\-]+", re.IGNORECASE)),

    # Street address: house number, then a name ending in a street suffix
    ("address", re.compile(
        r"\b\d{1,5}\s+[A-Za-z][A-Za-z\s.]+"
        r"(?:Ave|Avenue|St|Street|Rd|Road|Blvd|Drive|Dr)\b",
        re.IGNORECASE,
    )),

    # National identifiers introduced by their label
    ("id", re.compile(
        r"\b(?:SSN|SIN|NIN|PAN|AADHAAR)[:\s#\-]?[A-Z0-9\-]{4,}\b",
        re.IGNORECASE,
    )),
]

# Looser checks used to flag layout lines that carry contact details
EMAIL_LIKE_RE = re.compile(
    r"\b[A-Z0-9._%+\-]+@[A-Z0-9.\-]+\.[A-Z]{2,}\b", re.IGNORECASE
)
PHONE_LIKE_RE = re.compile(r"\+?[0-9][0-9()\s.\-]{5,}")


def scan_regex(text: str) -> list[Span]:
    """Run all patterns against text. Overlapping matches are kept."""
    matches: list[Span] = []
    for kind, pattern in PATTERNS:
        for m in pattern.finditer(text):
            if m.end() == m.start():
                continue
            matches.append(Span(
                start=m.start(),
                end=m.end(),
                value=m.group(),
                kind=kind,
                source="regex",
            ))
    return sorted(matches, key=lambda s: s.start)


def has_email_or_phone(text: str) -> bool:
    return bool(EMAIL_LIKE_RE.search(text) or PHONE_LIKE_RE.search(text))
