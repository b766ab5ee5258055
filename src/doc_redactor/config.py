"""YAML/dict config loader for doc-redactor.

Supports loading from a YAML file or a plain dict (for embedding
in a larger application config).

Example YAML:

    doc_redactor:
      detect_name_from_layout: true
      preview_limit: 12
      flagger_timeout: 10
      mask_char: "*"
      modes:
        name: hash
        id: mask
      flagger:
        backend: presidio        # "none" or "presidio"
        language: en
        score_threshold: 0.35
        entities:
          - PERSON
          - ORGANIZATION
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Callable

from .errors import ConfigError
from .flagger import Flagger, PresidioFlagger
from .redactor import Redactor, RedactorConfig, merge_modes
from .report import DEFAULT_PREVIEW_LIMIT


def _coerce(section: dict[str, Any], key: str, default: Any, cast: Callable[[Any], Any]) -> Any:
    value = section.get(key, default)
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ConfigError(f"invalid value for {key!r}: {value!r}") from None


def load_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    data = data or {}
    # Support nested under "doc_redactor" key or flat
    if "doc_redactor" in data:
        data = data["doc_redactor"] or {}

    flagger = data.get("flagger") or {}
    return {
        "modes": dict(data.get("modes") or {}),
        "detect_name_from_layout": bool(data.get("detect_name_from_layout", True)),
        "preview_limit": _coerce(data, "preview_limit", DEFAULT_PREVIEW_LIMIT, int),
        "flagger_timeout": _coerce(data, "flagger_timeout", 10.0, float),
        "mask_char": str(data.get("mask_char", "*")),
        "flagger_backend": str(flagger.get("backend", "none")).lower(),
        "flagger_language": flagger.get("language", "en"),
        "flagger_score_threshold": _coerce(flagger, "score_threshold", 0.35, float),
        "flagger_entities": flagger.get("entities"),
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml
    with open(path, encoding="utf-8") as f:
        return load_config(yaml.safe_load(f))


def build_config(cfg: dict[str, Any]) -> RedactorConfig:
    """Validate a normalized config dict and build a RedactorConfig."""
    merge_modes(cfg["modes"])  # raises ConfigError on unknown kinds/modes
    return RedactorConfig(
        modes=cfg["modes"],
        detect_name_from_layout=cfg["detect_name_from_layout"],
        preview_limit=cfg["preview_limit"],
        flagger_timeout=cfg["flagger_timeout"],
        mask_char=cfg["mask_char"],
    )


def build_flagger(cfg: dict[str, Any]) -> Flagger | None:
    backend = cfg["flagger_backend"]
    if backend in ("none", "", "off"):
        return None
    if backend == "presidio":
        return PresidioFlagger(
            language=cfg["flagger_language"],
            score_threshold=cfg["flagger_score_threshold"],
            entities=cfg["flagger_entities"],
        )
    raise ConfigError(f"unknown flagger backend {backend!r}")


def create_redactor(config: dict[str, Any] | None = None) -> Redactor:
    """Create a fully configured Redactor from a raw or normalized config dict."""
    cfg = config if config is not None and "flagger_backend" in config else load_config(config)
    return Redactor(build_config(cfg), flagger=build_flagger(cfg))
