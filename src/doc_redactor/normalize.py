"""Text normalization applied before any detector runs.

Detectors only ever see normalized text, and every span offset refers to
it. ``normalize_text`` is idempotent.
"""

from __future__ import annotations
import re
import unicodedata

_AT = re.compile(r"\s*(?:\(at\)|\[at\])\s*", re.IGNORECASE)
_DOT = re.compile(r"\s*(?:\(dot\)|\[dot\])\s*", re.IGNORECASE)
_HSPACE = re.compile(r"[ \t]+")


def normalize_text(text: str) -> str:
    """NFKC, de-obfuscate ``(at)``/``[dot]`` and collapse horizontal whitespace."""
    # \r goes first: dropping it later could join text into a new "(at)"
    s = text.replace("\r", "")
    s = unicodedata.normalize("NFKC", s)
    s = _AT.sub("@", s)
    s = _DOT.sub(".", s)
    s = _HSPACE.sub(" ", s)
    return s
