"""Tests for infra/pdf.py"""

import pytest

from pdfiron.infra.config.schemas import BinaryName
from pdfiron.infra.errors import ExecutableNotFound, ExternalToolFailed, PageCountUnavailable
from pdfiron.infra.pdf import count_pdf_pages, parse_page_count


PDFINFO_REPORT = """Title:          Scan
Producer:       scanner
Tagged:         no
Pages:          12
Encrypted:      no
Page size:      595 x 842 pts (A4)
"""


def test_parse_page_count():
    assert parse_page_count(PDFINFO_REPORT) == 12


def test_parse_page_count_without_pages_line():
    with pytest.raises(PageCountUnavailable):
        parse_page_count("Title: Scan\nEncrypted: no\n")


def test_parse_page_count_zero_pages():
    with pytest.raises(PageCountUnavailable):
        parse_page_count("Pages: 0\n")


def test_count_pdf_pages(fake_tools, source_pdf):
    fake_tools.install("pdfinfo", pages=7)

    assert count_pdf_pages(source_pdf) == 7
    assert fake_tools.calls("pdfinfo") == [[str(source_pdf)]]


def test_count_pdf_pages_uses_binary_override(fake_tools, source_pdf):
    fake_tools.install("pdfinfo", name="poppler-pdfinfo", pages=4)
    fake_tools.remove("pdfinfo")

    binary = BinaryName(tool="pdfinfo", name="poppler-pdfinfo", source="argument")
    assert count_pdf_pages(source_pdf, binary=binary) == 4


def test_missing_pdfinfo_is_page_count_unavailable(fake_tools, source_pdf):
    fake_tools.remove("pdfinfo")

    with pytest.raises(PageCountUnavailable) as exc_info:
        count_pdf_pages(source_pdf)

    assert isinstance(exc_info.value.cause, ExecutableNotFound)


def test_failing_pdfinfo_propagates(fake_tools, source_pdf):
    fake_tools.install("pdfinfo", fail_on="")

    with pytest.raises(ExternalToolFailed):
        count_pdf_pages(source_pdf)
