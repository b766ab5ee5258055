"""Tests for the regex pattern detector."""

from doc_redactor.patterns import has_email_or_phone, scan_regex


def _of(kind, spans):
    return [s for s in spans if s.kind == kind]


# ── Per-kind detection ───────────────────────────────────────────────

def test_email_detection():
    spans = scan_regex("Contact me at alice@example.com please")
    assert len(spans) == 1
    assert spans[0].kind == "email"
    assert spans[0].value == "alice@example.com"
    assert spans[0].source == "regex"


def test_email_case_insensitive():
    emails = _of("email", scan_regex("Mail ALICE@EXAMPLE.COM"))
    assert [s.value for s in emails] == ["ALICE@EXAMPLE.COM"]


def test_phone_detection():
    phones = _of("phone", scan_regex("Call +14155550132 now"))
    assert [s.value for s in phones] == ["+14155550132"]


def test_phone_with_spaces():
    phones = _of("phone", scan_regex("Phone: 555 123 4567"))
    assert [s.value for s in phones] == ["555 123 4567"]


def test_url_stops_at_paren():
    urls = _of("url", scan_regex("(see https://example.com/x)"))
    assert [s.value for s in urls] == ["https://example.com/x"]


def test_linkedin_and_github():
    spans = scan_regex("linkedin.com/in/jane-doe and github.com/janedoe")
    assert [s.value for s in _of("linkedin", spans)] == ["linkedin.com/in/jane-doe"]
    assert [s.value for s in _of("github", spans)] == ["github.com/janedoe"]


def test_address_detection():
    addrs = _of("address", scan_regex("I live at 221 Baker Street, London"))
    assert [s.value for s in addrs] == ["221 Baker Street"]


def test_id_detection():
    ids = _of("id", scan_regex("PAN ABCDE1234F on file"))
    assert [s.value for s in ids] == ["PAN ABCDE1234F"]


def test_overlapping_kinds_are_all_kept():
    spans = scan_regex("https://linkedin.com/in/jane-doe")
    kinds = {s.kind for s in spans}
    assert {"url", "linkedin"} <= kinds


def test_no_false_positive_on_clean_text():
    assert scan_regex("The weather is nice today in Melbourne") == []


def test_spans_sorted_and_valid():
    text = "jane@x.io, +14155550132, https://a.io, 10 Main Street"
    spans = scan_regex(text)
    assert [s.start for s in spans] == sorted(s.start for s in spans)
    for s in spans:
        assert 0 <= s.start < s.end <= len(text)
        assert text[s.start:s.end] == s.value


# ── Layout helper ────────────────────────────────────────────────────

def test_has_email_or_phone():
    assert has_email_or_phone("jane@x.io")
    assert has_email_or_phone("+1 (415) 555")
    assert not has_email_or_phone("Jane Doe")
    assert not has_email_or_phone("Class of 2019")
