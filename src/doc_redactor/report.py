"""Reporter — document fingerprint, per-kind counts and the on-disk outputs.

Outputs for a base path ``<base>``:

    <base>.redacted.txt       redacted text (UTF-8)
    <base>.pii.report.json    audit report (UTF-8 JSON)

Both are staged to temp files in the target directory and moved into
place with ``os.replace``.  On any failure neither file is left behind.
"""

from __future__ import annotations
import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable

from .errors import ReportWriteError
from .types import RedactionResult, Span

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_LIMIT = 12
REDACTED_SUFFIX = ".redacted.txt"
REPORT_SUFFIX = ".pii.report.json"


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def count_kinds(spans: Iterable[Span]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for s in spans:
        counts[s.kind] = counts.get(s.kind, 0) + 1
    return counts


def default_out_base(path: str | Path) -> Path:
    """Input path with its extension stripped."""
    path = Path(path)
    return path.with_suffix("") if path.suffix else path


def output_paths(out_base: str | Path) -> tuple[Path, Path]:
    base = str(out_base)
    return Path(base + REDACTED_SUFFIX), Path(base + REPORT_SUFFIX)


def build_report(
    result: RedactionResult,
    *,
    preview_limit: int = DEFAULT_PREVIEW_LIMIT,
) -> dict[str, Any]:
    """JSON-ready audit report for a redaction result."""
    cand = result.layout_candidate
    return {
        "counts": dict(result.counts),
        "file_hash_sha256": result.file_hash_sha256,
        "modes": dict(result.modes),
        "total_spans": len(result.hits),
        "layout_name_candidate": {
            "text": cand.text,
            "score": cand.score,
            "y": cand.y,
            "max_font": cand.max_font,
            "centered": cand.centered,
            "bold": cand.bold,
        } if cand is not None else None,
        "preview": [s.to_dict() for s in result.hits[:max(0, preview_limit)]],
    }


def _stage(final: Path, content: str) -> Path:
    """Write content to a temp file next to ``final`` and return its path."""
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{final.name}.", suffix=".tmp", dir=str(final.parent)
    )
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return tmp


def write_outputs(
    result: RedactionResult,
    out_base: str | Path,
    *,
    preview_limit: int = DEFAULT_PREVIEW_LIMIT,
) -> tuple[Path, Path]:
    """Persist redacted text and report; fills in the result's output paths.

    Raises ReportWriteError (carrying ``result``) if either file cannot be
    written.
    """
    redacted_path, report_path = output_paths(out_base)
    report = build_report(result, preview_limit=preview_limit)
    payloads = (
        (redacted_path, result.redacted_text),
        (report_path, json.dumps(report, indent=2, ensure_ascii=False)),
    )

    staged: list[tuple[Path, Path]] = []
    committed: list[Path] = []
    current = redacted_path
    try:
        for final, content in payloads:
            current = final
            staged.append((_stage(final, content), final))
        for tmp, final in staged:
            current = final
            os.replace(tmp, final)
            committed.append(final)
    except OSError as exc:
        _discard(committed)
        raise ReportWriteError(current, str(exc), result) from exc
    except BaseException:
        _discard(committed)
        raise
    finally:
        for tmp, _ in staged:
            tmp.unlink(missing_ok=True)

    result.out_redacted_path = redacted_path
    result.out_report_path = report_path
    logger.debug("Wrote %s and %s", redacted_path, report_path)
    return redacted_path, report_path


def _discard(paths: Iterable[Path]) -> None:
    for p in paths:
        try:
            p.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove partial output %s: %s", p, exc)
