"""High-level pipeline orchestration: extract → OCR fallback → summarize."""

from .ocr_fallback import OCRFallbackPipeline
from .extract import ExtractionOrchestrator
from .process import (
    NO_TEXT_NOTE,
    RequestOrchestrator,
    build_extractor,
    build_orchestrator,
    print_progress_bar,
    process_document,
)

__all__ = [
    "OCRFallbackPipeline",
    "ExtractionOrchestrator",
    "NO_TEXT_NOTE",
    "RequestOrchestrator",
    "build_extractor",
    "build_orchestrator",
    "print_progress_bar",
    "process_document",
]
