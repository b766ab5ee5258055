"""Shared fixtures.

PDFs are generated on the fly with PyMuPDF; no fixture files needed.
"""

import fitz
import pytest

PAGE_W, PAGE_H = 612, 792


def build_pdf(path, pages):
    """pages: list of [(x, y_top_down, text, fontsize, fontname), ...]"""
    doc = fitz.open()
    for entries in pages:
        page = doc.new_page(width=PAGE_W, height=PAGE_H)
        for x, y, text, size, fontname in entries:
            page.insert_text((x, y), text, fontsize=size, fontname=fontname)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def resume_pdf(tmp_path):
    """Two-page resume: bold centered name on top, an email on page two."""
    return build_pdf(tmp_path / "resume.PDF", [
        [
            (240, 72, "Jane Doe", 24, "hebo"),
            (72, 120, "Experience", 14, "helv"),
            (72, 140, "Built things at Acme", 11, "helv"),
        ],
        [
            (72, 72, "Second page jane@example.com", 11, "helv"),
        ],
    ])
