"""CLI interface for doc-redactor.

Usage:
    # Redact a PDF or text file; writes resume.redacted.txt and
    # resume.pii.report.json next to it
    doc-redactor redact resume.pdf

    # Custom output base, per-kind modes, NER safety net
    doc-redactor redact resume.pdf --out ./out/resume --mode name=hash \\
        --mode id=mask --presidio

    # Print the redacted text instead of only the summary
    doc-redactor redact notes.txt --print

A JSON summary (paths, fingerprint, counts) goes to stdout; logs go to
stderr.  Review the redacted file locally before sharing it.
"""

from __future__ import annotations
import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

from .config import build_config, build_flagger, load_config, load_from_yaml
from .errors import RedactorError
from .redactor import Redactor

logger = logging.getLogger("doc_redactor")

DEFAULT_LOG_LEVEL = os.environ.get("DOC_REDACTOR_LOG_LEVEL", "WARNING")


def _parse_modes(pairs: list[str]) -> dict[str, str]:
    modes: dict[str, str] = {}
    for pair in pairs:
        kind, sep, mode = pair.partition("=")
        if not sep or not kind or not mode:
            raise argparse.ArgumentTypeError(f"expected KIND=MODE, got {pair!r}")
        modes[kind.strip().lower()] = mode.strip().lower()
    return modes


def _build_redactor(args: argparse.Namespace) -> Redactor:
    cfg = load_from_yaml(args.config) if args.config else load_config({})
    cfg["modes"].update(_parse_modes(args.mode))
    if args.no_layout:
        cfg["detect_name_from_layout"] = False
    if args.preview_limit is not None:
        cfg["preview_limit"] = args.preview_limit
    if args.presidio:
        cfg["flagger_backend"] = "presidio"
    return Redactor(build_config(cfg), flagger=build_flagger(cfg))


def _out_base(out: str | None) -> Path | None:
    # --out may carry an extension; the output suffixes are appended to the base
    if not out:
        return None
    p = Path(out)
    return p.with_suffix("") if p.suffix else p


def cmd_redact(args: argparse.Namespace) -> int:
    """Redact PII from a PDF or text file."""
    try:
        redactor = _build_redactor(args)
        result = asyncio.run(redactor.redact_file(args.file, out_base=_out_base(args.out)))
    except argparse.ArgumentTypeError as e:
        logger.error("%s", e)
        return 2
    except RedactorError as e:
        logger.error("Failed to redact file: %s", e)
        return 1

    logger.info("Wrote: %s", result.out_redacted_path)
    logger.info("Wrote: %s", result.out_report_path)
    logger.info("PII counts: %s", result.counts)

    if args.print:
        sys.stdout.write(result.redacted_text)
        if not result.redacted_text.endswith("\n"):
            sys.stdout.write("\n")
        return 0

    output = {
        "redacted_path": str(result.out_redacted_path),
        "report_path": str(result.out_report_path),
        "file_hash_sha256": result.file_hash_sha256,
        "counts": result.counts,
        "total_spans": len(result.hits),
    }
    json.dump(output, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doc-redactor",
        description="Local PII redaction for PDF and text documents",
    )
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, help="Logging level")

    sub = parser.add_subparsers(dest="command", required=True)
    p = sub.add_parser("redact", help="Redact a PDF/TXT file")
    p.add_argument("file", help="Document to redact")
    p.add_argument("--out", help="Output base path (extension is stripped)")
    p.add_argument("--mode", action="append", default=[], metavar="KIND=MODE",
                   help="Override a kind's mode (hash|mask|drop); repeatable")
    p.add_argument("--no-layout", action="store_true", help="Disable layout name detection")
    p.add_argument("--preview-limit", type=int, default=None, help="Spans in report preview")
    p.add_argument("--config", help="YAML config file")
    p.add_argument("--presidio", action="store_true", help="Add the Presidio NER flagger")
    p.add_argument("--print", action="store_true", help="Print redacted text to stdout")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=str(args.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )

    cmds = {
        "redact": cmd_redact,
    }
    return cmds[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
