"""
Entry point and facade for the PDF → text (direct or OCR) → summary pipeline.

This module exposes a stable API and a CLI.

Packages:
- docsum.docs: Document model and direct text extraction
- docsum.render / docsum.image: Page rasterization into bitmaps
- docsum.ocr: Tesseract OCR engine
- docsum.llm: Chat-completions client and retrying summarizer
- docsum.pipeline: High-level orchestration (`process_document`)
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile

from docsum.config import Settings, load_settings, MODELS_PATH, DEPENDENCIES_PATH
from docsum.errors import DocSumError
from docsum.llm import (
    SummarizationClient,
    check_model_health,
)
from docsum.pipeline import (
    ExtractionOrchestrator,
    OCRFallbackPipeline,
    RequestOrchestrator,
    build_extractor,
    build_orchestrator,
    print_progress_bar,
    process_document,
)

__all__ = [
    "Settings",
    "load_settings",
    "SummarizationClient",
    "ExtractionOrchestrator",
    "OCRFallbackPipeline",
    "RequestOrchestrator",
    "build_extractor",
    "build_orchestrator",
    "process_document",
]


def _stage_copy(file_path: str) -> str:
    """Copy the input into a temporary file the pipeline is allowed to delete."""
    fd, staged = tempfile.mkstemp(suffix=os.path.splitext(file_path)[1] or ".pdf")
    os.close(fd)
    shutil.copyfile(file_path, staged)
    return staged


def _cli(argv=None) -> int:
    """CLI for document summarization.

    --file / -f: Path to input PDF
    --extract-only: Print extracted text and its source instead of summarizing
    --models-config: Path to models.json (default: config/models.json)
    --deps-config: Path to dependencies.json (default: config/dependencies.json)
    --workers: Pages OCR'd concurrently (default: 1)
    --ocr-mode: 'raw' or 'auto' (preprocess scans before OCR)
    --strict-pages: Fail the document when a single page cannot be OCR'd
    --timeout: Per-request summarization timeout in seconds
    --deadline: Overall time budget for the document in seconds
    --check-model: Run a model health check before processing
    --verbose / -v: Debug logging
    """
    import argparse

    parser = argparse.ArgumentParser(description="Extract text from a PDF (with OCR fallback) and summarize it.")
    parser.add_argument("--file", "-f", type=str, required=True, help="Path to input PDF")
    parser.add_argument("--extract-only", action="store_true", help="Only extract text; do not call the summarization model")
    parser.add_argument("--models-config", type=str, default=MODELS_PATH, help="Path to models.json")
    parser.add_argument("--deps-config", type=str, default=DEPENDENCIES_PATH, help="Path to dependencies.json")
    parser.add_argument("--workers", type=int, default=None, help="Pages OCR'd concurrently (default: 1)")
    parser.add_argument("--ocr-mode", type=str, default=None, choices=["raw", "auto"], help="OCR preprocessing mode (default: raw)")
    parser.add_argument("--strict-pages", action="store_true", help="Fail instead of skipping pages that cannot be OCR'd")
    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds for the summarization API (default: 30)")
    parser.add_argument("--deadline", type=float, default=None, help="Overall time budget in seconds (default: none)")
    parser.add_argument("--check-model", action="store_true", help="Run a model health check first")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not os.path.exists(args.file):
        print(f"File not found: {args.file}")
        return 2

    try:
        settings = load_settings(args.models_config, args.deps_config)
    except ValueError as e:
        print(str(e))
        return 2

    settings = settings.with_overrides(
        ocr_workers=args.workers,
        ocr_mode=args.ocr_mode,
        request_timeout=args.timeout,
        request_deadline=args.deadline,
        strict_pages=True if args.strict_pages else None,
    )

    staged = _stage_copy(args.file)
    try:
        if args.extract_only:
            extractor = build_extractor(settings, progress=print_progress_bar)
            result = extractor.extract(staged)
            print(json.dumps({"source": result.source.value, "text": result.text}, ensure_ascii=False, indent=2))
            return 0

        try:
            summarizer = SummarizationClient.from_settings(settings)
        except ValueError as e:
            print(str(e))
            return 2

        if args.check_model:
            check_model_health(summarizer.client, summarizer.model)
            print("Model connectivity check succeeded")

        orchestrator = build_orchestrator(settings, summarizer=summarizer, progress=print_progress_bar)
        result = orchestrator.process(staged)
        print(json.dumps(result, ensure_ascii=False, indent=2))
        return 0
    except (DocSumError, RuntimeError) as e:
        print(json.dumps({"error": str(e)}))
        return 1
    finally:
        if os.path.exists(staged):
            os.unlink(staged)


if __name__ == "__main__":
    raise SystemExit(_cli())
