"""PDF access through pdfplumber: opening documents and reading the text layer.

Rasterization lives in `docsum.render`; this module never renders pixels.
"""

from __future__ import annotations

import logging
import os
from typing import List

import pdfplumber

from docsum.errors import DocumentUnreadable

from .model import Document, Page

logger = logging.getLogger(__name__)


def open_document(path: str) -> Document:
    """Open a PDF and read its page count and page sizes.

    Doxygen:
    - @param path: Path to the PDF file.
    - @return: An open Document; close it (or use it as a context manager) when done.
    - @throws DocumentUnreadable: If the file is missing or cannot be parsed as a PDF.
    """
    if not os.path.exists(path):
        raise DocumentUnreadable(f"PDF file not found: {path}")

    try:
        pdf = pdfplumber.open(path)
    except Exception as exc:
        raise DocumentUnreadable(f"Cannot open PDF {path}: {exc}") from exc

    try:
        pages = [
            Page(number=p.page_number, width=float(p.width), height=float(p.height))
            for p in pdf.pages
        ]
    except Exception as exc:
        pdf.close()
        raise DocumentUnreadable(f"Cannot read pages of PDF {path}: {exc}") from exc

    return Document(path=path, pages=pages, handle=pdf)


def page_text(document: Document, page: Page) -> str:
    """Return the embedded, layout-ordered text of one page."""
    return document.handle.pages[page.number - 1].extract_text() or ""


class DirectTextExtractor:
    """Pulls the embedded text layer out of a PDF without rendering it.

    An empty result means there is no text layer (a scanned document, for
    instance) and is the cue for OCR fallback, not an error.
    """

    def extract(self, path: str) -> str:
        parts: List[str] = []
        with open_document(path) as document:
            for page in document.iter_pages():
                try:
                    text = page_text(document, page)
                except Exception as exc:
                    logger.warning("No text extracted from page %d of %s: %s", page.number, path, exc)
                    continue
                if text.strip():
                    parts.append(text)
        return "\n\n".join(parts)
