"""Tests for text normalization."""

import pytest

from doc_redactor.normalize import normalize_text


def test_obfuscated_email_is_rewritten():
    assert normalize_text("jane (at) example (dot) com") == "jane@example.com"


def test_bracket_obfuscations_case_insensitive():
    assert normalize_text("a [AT] b [Dot] c") == "a@b.c"
    assert normalize_text("a(At)b(DOT)c") == "a@b.c"


def test_nfkc_compatibility_forms():
    assert normalize_text("ｊａｎｅ") == "jane"
    assert normalize_text("ﬁle") == "file"


def test_fullwidth_obfuscation_rewritten():
    # NFKC turns fullwidth parens into ASCII before the rewrite
    assert normalize_text("jane（at）example.com") == "jane@example.com"


def test_horizontal_whitespace_collapsed_newlines_kept():
    assert normalize_text("a \t  b\n\nc") == "a b\n\nc"


def test_carriage_returns_stripped():
    assert normalize_text("line1\r\nline2\r") == "line1\nline2"
    assert normalize_text("a \r b") == "a b"


@pytest.mark.parametrize("text", [
    "",
    "plain text",
    "jane (at) example (dot) com",
    "a  (at)  (dot)  b",
    "x\r\n\ty  z w",
    "(a\rt)",
    "ＡＢＣ ① ﬁ",
    "  leading and trailing  ",
])
def test_idempotent(text):
    once = normalize_text(text)
    assert normalize_text(once) == once
