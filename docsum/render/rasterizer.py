"""Render single PDF pages into page bitmaps via Poppler (pdf2image)."""

from __future__ import annotations

from typing import Optional

import cv2
import numpy as np
from pdf2image import convert_from_path
from pdf2image.exceptions import PDFInfoNotInstalledError, PopplerNotInstalledError

from docsum.config import RENDER_SCALE
from docsum.docs.model import Document, Page, Viewport
from docsum.errors import DependencyMissing, PageRenderFailure
from docsum.image.bitmap import Bitmap, BitmapFactory

POINTS_PER_INCH = 72


class PageRasterizer:
    """Turns one page at a time into pixels for OCR.

    Doxygen:
    - @param factory: BitmapFactory that owns bitmap buffers (a new one by default).
    - @param scale: Render scale over the intrinsic page size.
    - @param poppler_path: Directory with Poppler binaries, or None to use PATH.
    """

    def __init__(
        self,
        factory: Optional[BitmapFactory] = None,
        scale: float = RENDER_SCALE,
        poppler_path: Optional[str] = None,
    ) -> None:
        self.factory = factory or BitmapFactory()
        self.scale = scale
        self.poppler_path = poppler_path

    @property
    def dpi(self) -> int:
        return int(round(POINTS_PER_INCH * self.scale))

    def viewport(self, page: Page) -> Viewport:
        return page.viewport(self.scale)

    def render(self, document: Document, page: Page, bitmap: Bitmap) -> None:
        """Render `page` of `document` into `bitmap`, filling it completely.

        Doxygen:
        - @throws PageRenderFailure: If Poppler fails on this page.
        - @throws DependencyMissing: If Poppler is not installed.
        """
        try:
            images = convert_from_path(
                document.path,
                dpi=self.dpi,
                first_page=page.number,
                last_page=page.number,
                size=(bitmap.width, bitmap.height),
                poppler_path=self.poppler_path,
            )
        except (PDFInfoNotInstalledError, PopplerNotInstalledError) as exc:
            raise DependencyMissing(
                "Poppler is required to rasterize scanned PDFs. Install it and/or set poppler_path."
            ) from exc
        except Exception as exc:
            raise PageRenderFailure(page.number, f"Failed to render page {page.number}: {exc}") from exc

        if not images:
            raise PageRenderFailure(page.number, f"Poppler returned no image for page {page.number}")

        image = images[0]
        try:
            pixels = np.asarray(image.convert("RGB"))
        finally:
            image.close()

        # Poppler may round the target size by a pixel
        if pixels.shape[:2] != (bitmap.height, bitmap.width):
            pixels = cv2.resize(pixels, (bitmap.width, bitmap.height), interpolation=cv2.INTER_AREA)
        bitmap.write(pixels)
