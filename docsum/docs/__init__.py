"""PDF document layer.

Exposes:
- Data model: Document, Page, Viewport, ExtractionResult, ExtractionSource
- Reader: open_document (pdfplumber) and DirectTextExtractor
"""

from .model import Document, Page, Viewport, ExtractionResult, ExtractionSource
from .pdf_io import DirectTextExtractor, open_document, page_text

__all__ = [
    "Document",
    "Page",
    "Viewport",
    "ExtractionResult",
    "ExtractionSource",
    "DirectTextExtractor",
    "open_document",
    "page_text",
]
