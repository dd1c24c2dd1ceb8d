"""Summarize PDF documents, falling back to OCR for scanned pages.

Packages:
- docsum.docs: Document model and direct text extraction (pdfplumber)
- docsum.image: Page bitmaps and their lifetime
- docsum.render: Page rasterization (pdf2image / Poppler)
- docsum.ocr: OCR engine interface and Tesseract engine
- docsum.llm: Chat-completions client helpers and the retrying summarizer
- docsum.pipeline: Orchestration (`process_document`)
"""

__version__ = "0.1.0"
