"""Exception hierarchy for the extraction and summarization pipeline.

Per-page failures (`PageRenderFailure`, `PageRecognitionFailure`) are absorbed
by the OCR fallback pipeline. Document-level and summarization failures reach
the request orchestrator, which reports them as `ProcessingFailed`.
"""

from __future__ import annotations

from typing import Optional


class DocSumError(Exception):
    """Base class for all pipeline errors."""


class DocumentUnreadable(DocSumError):
    """The document cannot be opened or parsed at all."""


class DependencyMissing(DocSumError):
    """A required external binary (Poppler, Tesseract) is not available."""


class PageRenderFailure(DocSumError):
    """A single page could not be rasterized."""

    def __init__(self, page_number: Optional[int], message: str = "") -> None:
        self.page_number = page_number
        super().__init__(message or f"Failed to render page {page_number}")


class PageRecognitionFailure(DocSumError):
    """OCR failed on a single page."""

    def __init__(self, page_number: Optional[int], message: str = "") -> None:
        self.page_number = page_number
        super().__init__(message or f"Failed to recognize text on page {page_number}")


class SummarizationUnavailable(DocSumError):
    """The summarization service could not produce a summary."""

    def __init__(self, message: str, attempts: int = 0) -> None:
        self.attempts = attempts
        super().__init__(message)


class SummarizationRejected(SummarizationUnavailable):
    """The service rejected the request as malformed; retrying cannot help."""


class MalformedCompletion(DocSumError):
    """The service answered without a usable completion (no choices or no message)."""


class DeadlineExceeded(DocSumError):
    """The overall request deadline passed before the work finished."""


class ProcessingFailed(DocSumError):
    """Generic failure reported to the caller of a request."""


__all__ = [
    "DocSumError",
    "DocumentUnreadable",
    "DependencyMissing",
    "PageRenderFailure",
    "PageRecognitionFailure",
    "SummarizationUnavailable",
    "SummarizationRejected",
    "MalformedCompletion",
    "DeadlineExceeded",
    "ProcessingFailed",
]
