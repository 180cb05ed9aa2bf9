"""
Tests for document parsers and parser selection.
"""

import base64
from types import SimpleNamespace

import fitz
import pytest

from solver.parsers import create_parser, is_supported_media_type, parser_for_media_type
from solver.parsers.azure_parser import AzureDocumentParser, MarginFilter
from solver.parsers.image_parser import ImageParser
from solver.parsers.pymupdf_parser import PyMuPDFParser


def _pdf_bytes(*page_texts):
    doc = fitz.open()
    for text in page_texts:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


class TestPyMuPDFParser:
    """Per-page PDF text extraction."""

    def test_pages_numbered_from_one(self):
        parsed = PyMuPDFParser(markdown=False).parse(_pdf_bytes("1. First question?", "", "2. Second question?"))

        assert parsed.format == "plain_text"
        assert parsed.page_count == 3
        assert [p.page_number for p in parsed.pages] == [1, 2, 3]
        assert "First question" in parsed.pages[0].text
        assert parsed.pages[1].has_content is False
        assert "Second question" in parsed.pages[2].text
        assert parsed.metadata["page_count"] == 3

    def test_markdown_mode(self):
        parsed = PyMuPDFParser().parse(_pdf_bytes("1. What is 2+2?"))

        assert parsed.format == "markdown"
        assert parsed.page_count == 1
        assert "2+2" in parsed.pages[0].text

    def test_corrupt_pdf_raises(self):
        with pytest.raises(Exception):
            PyMuPDFParser(markdown=False).parse(b"definitely not a pdf")


class TestImageParser:
    """Single-image uploads."""

    def test_one_page_data_url(self):
        parsed = ImageParser("image/png").parse(b"\x89PNG data")

        assert parsed.page_count == 1
        page = parsed.pages[0]
        assert page.page_number == 1
        assert page.image_url == "data:image/png;base64," + base64.b64encode(b"\x89PNG data").decode()
        assert parsed.has_content is True
        assert parsed.content == ""


class TestParserSelection:
    """Media type and configuration dispatch."""

    def test_supported_media_types(self):
        assert is_supported_media_type("application/pdf") is True
        assert is_supported_media_type("image/jpeg; charset=binary") is True
        assert is_supported_media_type("text/plain") is False
        assert is_supported_media_type(None) is False

    def test_pdf_uses_configured_parser(self):
        parser = parser_for_media_type("application/pdf", "pymupdf_text")
        assert isinstance(parser, PyMuPDFParser)
        assert parser.markdown is False

    def test_image_types(self):
        assert parser_for_media_type("image/jpg").media_type == "image/jpeg"
        assert parser_for_media_type("IMAGE/PNG").media_type == "image/png"

    def test_unsupported(self):
        with pytest.raises(ValueError):
            parser_for_media_type("application/msword")

    def test_unknown_parser_type(self):
        with pytest.raises(ValueError):
            create_parser("tesseract")

    def test_azure_requires_credentials(self, monkeypatch):
        monkeypatch.delenv("DI_ENDPOINT", raising=False)
        monkeypatch.delenv("DI_KEY", raising=False)
        with pytest.raises(ValueError):
            create_parser("azure")


def _paragraph(content, page_number, y):
    region = SimpleNamespace(page_number=page_number, polygon=[0, y, 1, y, 1, y, 0, y])
    return SimpleNamespace(content=content, bounding_regions=[region])


class FakeDIClient:
    def __init__(self, result):
        self.result = result

    def begin_analyze_document(self, model_id, body):
        return SimpleNamespace(result=lambda: self.result)


class TestAzureDocumentParser:
    """Layout results grouped per page."""

    def _result(self):
        return SimpleNamespace(
            pages=[SimpleNamespace(page_number=1, height=11.0), SimpleNamespace(page_number=2, height=11.0)],
            paragraphs=[
                _paragraph("Header text", 1, 0.5),
                _paragraph("1. What is 2+2?", 1, 3.0),
                _paragraph("2. Name a prime.", 2, 4.0),
                _paragraph("Page 2 of 2", 2, 10.8),
            ],
        )

    def test_groups_paragraphs_by_page(self):
        parser = AzureDocumentParser(client=FakeDIClient(self._result()))

        parsed = parser.parse(b"%PDF")

        assert [p.page_number for p in parsed.pages] == [1, 2]
        assert parsed.pages[0].text == "Header text\n\n1. What is 2+2?"
        assert parsed.pages[1].text == "2. Name a prime.\n\nPage 2 of 2"

    def test_margin_filter_drops_headers_and_footers(self):
        parser = AzureDocumentParser(margin_filter=MarginFilter(), client=FakeDIClient(self._result()))

        parsed = parser.parse(b"%PDF")

        assert parsed.pages[0].text == "1. What is 2+2?"
        assert parsed.pages[1].text == "2. Name a prime."
        assert parsed.metadata["paragraphs_count"] == 2
        assert parsed.metadata["filtered_margins"] is True
