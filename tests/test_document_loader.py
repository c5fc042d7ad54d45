"""
Tests for the document loader.

Tests cover:
- Page text extraction with PyMuPDF (words joined by spaces, lines kept)
- Page concatenation (each page followed by a newline)
- Malformed input -> ExtractionError carrying the filename
- Hung PDF engine -> ExtractionTimeoutError; the worker thread is left running
"""
import threading
import time

import pytest

from medpanel.core.exceptions import ExtractionError, ExtractionTimeoutError
from medpanel.services.document_loader import DocumentLoader, extract_pages

from conftest import make_pdf


# =============================================================================
# TESTS: extract_pages
# =============================================================================

class TestExtractPages:
    """Tests for the PyMuPDF page extractor."""

    def test_one_string_per_page(self):
        data = make_pdf(["First page"], ["Second page"], ["Third page"])
        pages = extract_pages(data)
        assert pages == ["First page", "Second page", "Third page"]

    def test_words_joined_by_single_spaces(self):
        data = make_pdf(["Blood   Pressure:  130/85"])
        assert extract_pages(data) == ["Blood Pressure: 130/85"]

    def test_text_lines_kept_apart(self):
        data = make_pdf(["Blood Pressure: 130/85", "BMI: 24.5"])
        pages = extract_pages(data)
        assert len(pages) == 1
        assert pages[0] == "Blood Pressure: 130/85\nBMI: 24.5"

    def test_empty_bytes_rejected(self):
        with pytest.raises(ExtractionError) as exc_info:
            extract_pages(b"")
        assert exc_info.value.context["reason"] == "document is empty"

    def test_garbage_bytes_rejected(self, corrupt_pdf):
        with pytest.raises(ExtractionError):
            extract_pages(corrupt_pdf)


# =============================================================================
# TESTS: DocumentLoader.load
# =============================================================================

class TestDocumentLoader:
    """Tests for DocumentLoader.load."""

    @pytest.mark.asyncio
    async def test_pages_concatenated_with_trailing_newlines(self):
        loader = DocumentLoader(page_extractor=lambda data: ["page one", "page two"], timeout=5)
        text = await loader.load(b"%PDF", "two-pages.pdf")
        assert text == "page one\npage two\n"

    @pytest.mark.asyncio
    async def test_real_pdf(self, checkup_pdf):
        loader = DocumentLoader(timeout=10)
        text = await loader.load(checkup_pdf, "checkup.pdf")
        assert "Blood Pressure: 130/85" in text
        assert text.endswith("\n")

    @pytest.mark.asyncio
    async def test_error_names_the_file(self, corrupt_pdf):
        loader = DocumentLoader(timeout=10)
        with pytest.raises(ExtractionError) as exc_info:
            await loader.load(corrupt_pdf, "broken.pdf")
        assert exc_info.value.context["filename"] == "broken.pdf"
        assert "broken.pdf" in exc_info.value.detail
        assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_timeout(self):
        def slow_extractor(data):
            time.sleep(0.5)
            return ["too late"]

        loader = DocumentLoader(page_extractor=slow_extractor, timeout=0.05)
        with pytest.raises(ExtractionTimeoutError) as exc_info:
            await loader.load(b"%PDF", "slow.pdf")
        assert exc_info.value.status_code == 504
        assert exc_info.value.context["filename"] == "slow.pdf"

    @pytest.mark.asyncio
    async def test_timed_out_worker_is_abandoned_not_stopped(self):
        release = threading.Event()
        finished = threading.Event()

        def hung_extractor(data):
            release.wait(timeout=5)
            finished.set()
            return ["late"]

        loader = DocumentLoader(page_extractor=hung_extractor, timeout=0.05)
        with pytest.raises(ExtractionTimeoutError):
            await loader.load(b"%PDF", "hung.pdf")

        assert not finished.is_set()
        release.set()
        assert finished.wait(timeout=5)

    def test_default_timeout_from_settings(self):
        from medpanel.core.config import settings

        assert DocumentLoader().timeout == settings.extraction_timeout
