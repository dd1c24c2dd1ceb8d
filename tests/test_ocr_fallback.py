import time

import pytest

from docsum.deadline import Deadline
from docsum.docs.model import Document, Page, Viewport
from docsum.errors import (
    DeadlineExceeded,
    DocumentUnreadable,
    PageRecognitionFailure,
    PageRenderFailure,
)
from docsum.image.bitmap import BitmapFactory
from docsum.ocr.reader import OCRResult
from docsum.pipeline.ocr_fallback import OCRFallbackPipeline


class RecordingFactory(BitmapFactory):
    def __init__(self):
        self.created = 0
        self.destroyed = 0
        self.live = 0
        self.peak = 0

    def create(self, width, height):
        self.created += 1
        self.live += 1
        self.peak = max(self.peak, self.live)
        return super().create(width, height)

    def destroy(self, bitmap):
        self.destroyed += 1
        self.live -= 1
        super().destroy(bitmap)


class StampingRasterizer:
    """Writes the page number into the first pixel so the engine can read it back."""

    def __init__(self, fail_pages=()):
        self.factory = RecordingFactory()
        self.fail_pages = set(fail_pages)

    def viewport(self, page):
        return Viewport(page.width * 2, page.height * 2, 2.0)

    def render(self, document, page, bitmap):
        if page.number in self.fail_pages:
            raise PageRenderFailure(page.number)
        bitmap.pixels[0, 0, 0] = page.number


class PageEchoEngine:
    def __init__(self, fail_pages=(), delay=0.0):
        self.calls = []
        self.fail_pages = set(fail_pages)
        self.delay = delay

    def recognize(self, bitmap, language="eng"):
        number = int(bitmap.pixels[0, 0, 0])
        self.calls.append((number, language))
        if self.delay:
            # later pages finish first
            time.sleep(self.delay / number)
        if number in self.fail_pages:
            raise PageRecognitionFailure(None)
        return OCRResult(text=f"page {number}")


def _opener(n_pages, opened=None):
    def open_(path):
        doc = Document(path=path, pages=[Page(i, 10, 20) for i in range(1, n_pages + 1)])
        if opened is not None:
            opened.append(doc)
        return doc
    return open_


def test_concatenates_page_texts_in_order_with_newlines():
    rast, engine = StampingRasterizer(), PageEchoEngine()
    pipeline = OCRFallbackPipeline(rast, engine, opener=_opener(3))
    assert pipeline.run("doc.pdf") == "page 1\npage 2\npage 3\n"
    assert engine.calls == [(1, "eng"), (2, "eng"), (3, "eng")]


def test_exactly_n_bitmaps_and_never_two_alive():
    rast = StampingRasterizer()
    OCRFallbackPipeline(rast, PageEchoEngine(), opener=_opener(25)).run("doc.pdf")
    assert rast.factory.created == 25
    assert rast.factory.destroyed == 25
    assert rast.factory.peak == 1
    assert rast.factory.live == 0


def test_failed_pages_contribute_empty_text():
    rast = StampingRasterizer(fail_pages={2})
    engine = PageEchoEngine(fail_pages={3})
    pipeline = OCRFallbackPipeline(rast, engine, opener=_opener(4))
    assert pipeline.run("doc.pdf") == "page 1\n\n\npage 4\n"
    assert rast.factory.created == rast.factory.destroyed == 4


def test_strict_mode_propagates_page_failure_and_still_cleans_up():
    opened = []
    rast = StampingRasterizer()
    engine = PageEchoEngine(fail_pages={2})
    pipeline = OCRFallbackPipeline(rast, engine, strict=True, opener=_opener(3, opened))
    with pytest.raises(PageRecognitionFailure) as info:
        pipeline.run("doc.pdf")
    assert info.value.page_number == 2
    assert opened[0].closed
    assert rast.factory.live == 0


def test_document_closed_when_engine_raises_unexpectedly():
    opened = []

    class Exploding(PageEchoEngine):
        def recognize(self, bitmap, language="eng"):
            raise MemoryError("out of memory")

    rast = StampingRasterizer()
    pipeline = OCRFallbackPipeline(rast, Exploding(), opener=_opener(2, opened))
    with pytest.raises(MemoryError):
        pipeline.run("doc.pdf")
    assert opened[0].closed
    assert rast.factory.created == rast.factory.destroyed == 1


def test_open_failure_is_fatal():
    def unreadable(path):
        raise DocumentUnreadable("broken")

    pipeline = OCRFallbackPipeline(StampingRasterizer(), PageEchoEngine(), opener=unreadable)
    with pytest.raises(DocumentUnreadable):
        pipeline.run("doc.pdf")


def test_empty_document_yields_empty_text():
    pipeline = OCRFallbackPipeline(StampingRasterizer(), PageEchoEngine(), opener=_opener(0))
    assert pipeline.run("doc.pdf") == ""


def test_parallel_workers_preserve_page_order():
    rast = StampingRasterizer()
    engine = PageEchoEngine(delay=0.05)
    pipeline = OCRFallbackPipeline(rast, engine, workers=4, opener=_opener(6))
    assert pipeline.run("doc.pdf") == "".join(f"page {i}\n" for i in range(1, 7))
    assert rast.factory.created == rast.factory.destroyed == 6
    assert rast.factory.peak <= 4


def test_progress_callback_reports_each_page():
    seen = []
    pipeline = OCRFallbackPipeline(
        StampingRasterizer(), PageEchoEngine(), opener=_opener(3), progress=lambda d, t: seen.append((d, t))
    )
    pipeline.run("doc.pdf")
    assert seen == [(1, 3), (2, 3), (3, 3)]


def test_expired_deadline_stops_before_next_page():
    clock = iter([0.0, 0.5, 5.0, 5.0, 5.0]).__next__
    deadline = Deadline(1.0, clock=clock)
    rast = StampingRasterizer()
    engine = PageEchoEngine()
    pipeline = OCRFallbackPipeline(rast, engine, opener=_opener(3))
    with pytest.raises(DeadlineExceeded):
        pipeline.run("doc.pdf", deadline=deadline)
    assert [n for n, _ in engine.calls] == [1]
    assert rast.factory.live == 0


def test_strict_parallel_failure_cancels_pages_not_yet_started():
    opened = []
    rast = StampingRasterizer(fail_pages={1})
    engine = PageEchoEngine(delay=0.4)
    pipeline = OCRFallbackPipeline(rast, engine, workers=2, strict=True, opener=_opener(12, opened))
    with pytest.raises(PageRenderFailure) as info:
        pipeline.run("doc.pdf")
    assert info.value.page_number == 1
    # only pages already picked up by a worker ran
    assert len(engine.calls) <= 4
    assert rast.factory.created == rast.factory.destroyed < 12
    assert rast.factory.live == 0
    assert opened[0].closed
