"""Choose between the embedded text layer and OCR for one document."""

from __future__ import annotations

import logging
from typing import Optional

from docsum.deadline import Deadline
from docsum.docs.model import ExtractionResult, ExtractionSource
from docsum.docs.pdf_io import DirectTextExtractor

from .ocr_fallback import OCRFallbackPipeline

logger = logging.getLogger(__name__)


class ExtractionOrchestrator:
    """Direct text extraction first; OCR only when that finds nothing."""

    def __init__(self, direct: DirectTextExtractor, fallback: OCRFallbackPipeline) -> None:
        self.direct = direct
        self.fallback = fallback

    def extract(self, path: str, deadline: Optional[Deadline] = None) -> ExtractionResult:
        text = self.direct.extract(path)
        if text.strip():
            logger.info("Extracted %d characters of embedded text from %s", len(text), path)
            return ExtractionResult(text=text, source=ExtractionSource.DIRECT)

        logger.info("No embedded text in %s; falling back to OCR", path)
        text = self.fallback.run(path, deadline=deadline)
        if text.strip():
            logger.info("OCR recognized %d characters in %s", len(text), path)
            return ExtractionResult(text=text, source=ExtractionSource.OCR)

        logger.info("No readable text found in %s", path)
        return ExtractionResult.empty()
