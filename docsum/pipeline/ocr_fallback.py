"""OCR fallback: rasterize every page and recognize its text.

Pages are processed one at a time by default, so at most one page bitmap is
alive during a run whatever the document length. With ``workers > 1`` pages
run on a thread pool and the number of live bitmaps is bounded by
``workers``. Either way page texts are concatenated in ascending page order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from docsum.deadline import Deadline, check_deadline
from docsum.docs.model import Document, Page
from docsum.docs.pdf_io import open_document
from docsum.errors import PageRecognitionFailure, PageRenderFailure
from docsum.ocr.reader import OCREngine
from docsum.render.rasterizer import PageRasterizer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class OCRFallbackPipeline:
    """Produce text for documents without a usable text layer.

    Doxygen:
    - @param rasterizer: Renders pages into bitmaps from its BitmapFactory.
    - @param engine: OCR engine called once per page.
    - @param language: OCR language code.
    - @param workers: Pages processed concurrently (1 means strictly sequential).
    - @param strict: Re-raise per-page failures instead of treating the page as empty.
    - @param opener: Callable opening a Document from a path.
    - @param progress: Optional callback receiving (pages_done, total_pages).
    """

    def __init__(
        self,
        rasterizer: PageRasterizer,
        engine: OCREngine,
        language: str = "eng",
        workers: int = 1,
        strict: bool = False,
        opener: Callable[[str], Document] = open_document,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.rasterizer = rasterizer
        self.engine = engine
        self.language = language
        self.workers = max(1, int(workers))
        self.strict = strict
        self._opener = opener
        self._progress = progress

    def run(self, path: str, deadline: Optional[Deadline] = None) -> str:
        with self._opener(path) as document:
            total = document.page_count
            logger.info("Running OCR on %d page(s) of %s", total, path)
            if self.workers == 1 or total < 2:
                texts = []
                for page in document.iter_pages():
                    texts.append(self._process_page(document, page, deadline))
                    self._report(len(texts), total)
            else:
                texts = self._run_parallel(document, total, deadline)
        return "".join(f"{text}\n" for text in texts)

    def _run_parallel(self, document: Document, total: int, deadline: Optional[Deadline]) -> List[str]:
        pages = list(document.iter_pages())
        texts: List[str] = []
        pool = ThreadPoolExecutor(max_workers=self.workers)
        try:
            futures = [pool.submit(self._process_page, document, page, deadline) for page in pages]
            # collected in submission order, not completion order
            for future in futures:
                texts.append(future.result())
                self._report(len(texts), total)
        finally:
            # on the first error, pages not yet started are dropped; running
            # ones finish so their bitmaps are released before the document closes
            pool.shutdown(wait=True, cancel_futures=True)
        return texts

    def _process_page(self, document: Document, page: Page, deadline: Optional[Deadline]) -> str:
        check_deadline(deadline, f"OCR of page {page.number}")
        viewport = self.rasterizer.viewport(page)
        with self.rasterizer.factory.scoped(viewport.width, viewport.height) as bitmap:
            try:
                self.rasterizer.render(document, page, bitmap)
                return self.engine.recognize(bitmap, self.language).text
            except (PageRenderFailure, PageRecognitionFailure) as exc:
                if exc.page_number is None:
                    exc.page_number = page.number
                if self.strict:
                    raise
                logger.warning("Page %d of %s contributes no text: %s", page.number, document.path, exc)
                return ""

    def _report(self, done: int, total: int) -> None:
        if self._progress is not None:
            self._progress(done, total)
