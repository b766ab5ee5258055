"""Tests for config loading."""

import pytest

from doc_redactor.config import build_config, build_flagger, create_redactor, load_config, load_from_yaml
from doc_redactor.errors import ConfigError
from doc_redactor.flagger import PresidioFlagger


def test_defaults():
    cfg = load_config({})
    assert cfg["modes"] == {}
    assert cfg["detect_name_from_layout"] is True
    assert cfg["preview_limit"] == 12
    assert cfg["flagger_timeout"] == 10.0
    assert cfg["flagger_backend"] == "none"
    assert load_config(None) == cfg


def test_nested_and_flat_forms_match():
    body = {"preview_limit": 3, "modes": {"name": "hash"}}
    assert load_config({"doc_redactor": body}) == load_config(body)


def test_load_from_yaml(tmp_path):
    p = tmp_path / "redactor.yaml"
    p.write_text(
        "doc_redactor:\n"
        "  detect_name_from_layout: false\n"
        "  preview_limit: 5\n"
        "  modes:\n"
        "    id: mask\n"
        "  flagger:\n"
        "    backend: presidio\n"
        "    score_threshold: 0.6\n",
        encoding="utf-8",
    )
    cfg = load_from_yaml(p)
    assert cfg["detect_name_from_layout"] is False
    assert cfg["preview_limit"] == 5
    assert cfg["modes"] == {"id": "mask"}
    assert cfg["flagger_backend"] == "presidio"
    assert cfg["flagger_score_threshold"] == 0.6


def test_build_config_validates_modes():
    with pytest.raises(ConfigError):
        build_config(load_config({"modes": {"email": "shred"}}))


def test_build_flagger():
    assert build_flagger(load_config({})) is None
    flagger = build_flagger(load_config({"flagger": {"backend": "Presidio", "language": "de"}}))
    assert isinstance(flagger, PresidioFlagger)
    assert flagger.language == "de"
    with pytest.raises(ConfigError):
        build_flagger(load_config({"flagger": {"backend": "ollama"}}))


def test_create_redactor():
    redactor = create_redactor({"doc_redactor": {"modes": {"name": "hash"}, "preview_limit": 4}})
    assert redactor.modes["name"] == "hash"
    assert redactor.config.preview_limit == 4
    assert redactor.flagger is None


@pytest.mark.parametrize("body", [
    {"preview_limit": None},
    {"preview_limit": "a dozen"},
    {"flagger_timeout": None},
    {"flagger_timeout": [10]},
    {"flagger": {"score_threshold": "high"}},
])
def test_bad_numbers_raise_config_error(body):
    with pytest.raises(ConfigError):
        load_config(body)


def test_bad_numbers_in_yaml_raise_config_error(tmp_path):
    p = tmp_path / "redactor.yaml"
    p.write_text("doc_redactor:\n  preview_limit: null\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="preview_limit"):
        load_from_yaml(p)
