"""OCR (Optical Character Recognition) utilities.

This package includes the engine interface, the Tesseract engine and the
helpers that turn Tesseract word boxes into page text.
"""

from .reader import (
    OCREngine,
    OCRResult,
    TesseractEngine,
    build_dataframe_from_tesseract,
    group_words_to_lines,
    lines_to_text,
    preprocess_image_for_ocr,
)

__all__ = [
    "OCREngine",
    "OCRResult",
    "TesseractEngine",
    "build_dataframe_from_tesseract",
    "group_words_to_lines",
    "lines_to_text",
    "preprocess_image_for_ocr",
]
