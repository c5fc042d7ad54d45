"""
Document loader - turns uploaded PDF bytes into one text string.

The PDF engine (PyMuPDF) is treated as an opaque page extractor:
``extract_pages(bytes) -> list[str]``. It is blocking, so the loader runs
it in a worker thread and bounds it with a timeout.

Limitation: a thread cannot be cancelled. When the timeout fires the
caller gets ExtractionTimeoutError right away, but a hung PyMuPDF call
keeps running in the default executor until it returns on its own.
"""
import asyncio
import logging
from itertools import groupby
from typing import Callable, List, Optional

import fitz  # PyMuPDF

from medpanel.core.config import settings
from medpanel.core.exceptions import ExtractionError, ExtractionTimeoutError

logger = logging.getLogger(__name__)

PageExtractor = Callable[[bytes], List[str]]


def extract_pages(data: bytes) -> List[str]:
    """
    Extract the text of every page of a PDF.

    Words on the same text line are joined with single spaces, in reading
    order; text lines are separated by ``\\n``. Extraction rules never
    cross a line break, so a medication list ends with its line.

    Raises:
        ExtractionError: If the bytes are not a readable PDF.
    """
    if not data:
        raise ExtractionError(reason="document is empty")

    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            if doc.needs_pass:
                raise ExtractionError(reason="document is password protected")
            pages = []
            for page in doc:
                # word tuples: (x0, y0, x1, y1, text, block_no, line_no, word_no)
                words = page.get_text("words", sort=True)
                lines = [
                    " ".join(word[4] for word in line_words)
                    for _, line_words in groupby(words, key=lambda word: (word[5], word[6]))
                ]
                pages.append("\n".join(lines))
            return pages
    except ExtractionError:
        raise
    except (fitz.FileDataError, RuntimeError, ValueError) as e:
        raise ExtractionError(reason=str(e) or e.__class__.__name__) from e


class DocumentLoader:
    """Loads PDF documents through the configured page extractor."""

    def __init__(
        self,
        page_extractor: PageExtractor = extract_pages,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            page_extractor: Callable returning the text of each page.
            timeout: Seconds to wait per document. Defaults to settings.extraction_timeout.
        """
        self._extract_pages = page_extractor
        self.timeout = timeout if timeout is not None else settings.extraction_timeout

    async def load(self, data: bytes, filename: str) -> str:
        """
        Extract the full text of one document.

        Pages are concatenated, each followed by a newline.

        On timeout the worker thread is abandoned, not stopped (see the
        module docstring).

        Raises:
            ExtractionError: If the document cannot be read.
            ExtractionTimeoutError: If the PDF engine does not finish in time.
        """
        try:
            pages = await asyncio.wait_for(
                asyncio.to_thread(self._extract_pages, data),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error("PDF extraction timed out", extra={"timeout": self.timeout})
            raise ExtractionTimeoutError(
                filename=filename, reason=f"no result after {self.timeout:g}s"
            ) from e
        except ExtractionError as e:
            logger.warning("PDF extraction failed", extra={"reason": e.context.get("reason")})
            raise ExtractionError(filename=filename, reason=e.context.get("reason")) from e

        text = "".join(f"{page}\n" for page in pages)
        logger.info(
            "PDF text extracted",
            extra={"pages": len(pages), "characters": len(text)},
        )
        return text
