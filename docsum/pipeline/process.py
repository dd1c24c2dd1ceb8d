"""High-level pipeline: extract text (direct or OCR) → summarize.

This module wires the components from `Settings` and provides a single entry
point `process_document` suitable for scripts and request handlers.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

from docsum.config import Settings, load_settings
from docsum.deadline import Deadline
from docsum.docs.model import ExtractionSource
from docsum.docs.pdf_io import DirectTextExtractor
from docsum.errors import DocSumError, ProcessingFailed
from docsum.llm.summarize import SummarizationClient
from docsum.ocr.reader import TesseractEngine
from docsum.render.rasterizer import PageRasterizer

from .extract import ExtractionOrchestrator
from .ocr_fallback import OCRFallbackPipeline, ProgressCallback

logger = logging.getLogger(__name__)

NO_TEXT_NOTE = "No readable text."


def print_progress_bar(done_pages: int, total_pages: int, width: int = 10) -> None:
    """Render a colored one-line OCR progress bar (10 fixed segments).

    Doxygen:
    - @param done_pages: Number of pages already recognized.
    - @param total_pages: Total pages in the document.
    - @param width: Number of bar segments (default 10).
    """
    total = max(1, total_pages)
    done = max(0, min(done_pages, total))
    segments = max(1, int(width))
    filled = segments if done >= total else int(done / total * segments)
    pending = max(0, segments - filled)
    GREEN = "\x1b[32m"
    RED = "\x1b[31m"
    RESET = "\x1b[0m"
    bar = f"{GREEN}{'█'*filled}{RESET}{RED}{'█'*pending}{RESET} [{done}/{total_pages}]"
    end = "\n" if done >= total else ""
    print(f"\r{bar}", end=end, flush=True)


class RequestOrchestrator:
    """Run one document through extraction and summarization.

    The document file is deleted on every exit path; the caller hands over
    ownership of it.
    """

    def __init__(
        self,
        extractor: ExtractionOrchestrator,
        summarizer: SummarizationClient,
        deadline_seconds: Optional[float] = None,
    ) -> None:
        self.extractor = extractor
        self.summarizer = summarizer
        self.deadline_seconds = deadline_seconds

    def process(self, file_path: str) -> Dict[str, str]:
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        try:
            deadline = Deadline.maybe(self.deadline_seconds)
            result = self.extractor.extract(file_path, deadline=deadline)
            if result.source is ExtractionSource.NONE:
                return {"summary": "", "note": NO_TEXT_NOTE}
            summary = self.summarizer.summarize(result.text, deadline=deadline)
            return {"summary": summary}
        except DocSumError as exc:
            logger.exception("Error processing PDF %s", file_path)
            raise ProcessingFailed("Error processing PDF") from exc
        finally:
            _discard(file_path)


def _discard(file_path: str) -> None:
    try:
        os.unlink(file_path)
    except OSError as exc:
        logger.warning("Failed to delete temporary file %s: %s", file_path, exc)


def build_extractor(settings: Settings, progress: Optional[ProgressCallback] = None) -> ExtractionOrchestrator:
    rasterizer = PageRasterizer(scale=settings.render_scale, poppler_path=settings.poppler_path)
    engine = TesseractEngine(
        ocr_mode=settings.ocr_mode,
        conf_threshold=settings.ocr_conf_threshold,
        tesseract_cmd=settings.tesseract_cmd,
    )
    fallback = OCRFallbackPipeline(
        rasterizer,
        engine,
        language=settings.ocr_language,
        workers=settings.ocr_workers,
        strict=settings.strict_pages,
        progress=progress,
    )
    return ExtractionOrchestrator(DirectTextExtractor(), fallback)


def build_orchestrator(
    settings: Settings,
    summarizer: Optional[SummarizationClient] = None,
    progress: Optional[ProgressCallback] = None,
) -> RequestOrchestrator:
    return RequestOrchestrator(
        build_extractor(settings, progress=progress),
        summarizer or SummarizationClient.from_settings(settings),
        deadline_seconds=settings.request_deadline,
    )


def process_document(file_path: str, settings: Optional[Settings] = None) -> Dict[str, str]:
    """Summarize a document, consuming (deleting) the file.

    Doxygen:
    - @param file_path: Path to a PDF the caller no longer needs.
    - @param settings: Process settings; loaded from config/ and the environment when None.
    - @return: {'summary': ...} or {'summary': '', 'note': 'No readable text.'}.
    - @throws ProcessingFailed: On unreadable documents or unavailable summarization.
    """
    settings = settings or load_settings()
    return build_orchestrator(settings).process(file_path)
