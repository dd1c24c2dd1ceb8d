"""Document data model: pages, viewports and extraction results."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float
    scale: float


@dataclass(frozen=True)
class Page:
    number: int  # 1-based
    width: float  # points
    height: float  # points

    def viewport(self, scale: float) -> Viewport:
        return Viewport(width=self.width * scale, height=self.height * scale, scale=scale)


@dataclass
class Document:
    """An open PDF owned by a single extraction call.

    `handle` is the underlying pdfplumber PDF (or None for in-memory
    documents). `close()` releases it once; later calls are no-ops.
    """

    path: str
    pages: List[Page] = field(default_factory=list)
    handle: Optional[Any] = None
    closed: bool = False

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def iter_pages(self) -> Iterator[Page]:
        return iter(self.pages)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.handle is not None:
            self.handle.close()
            self.handle = None

    def __enter__(self) -> "Document":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ExtractionSource(str, enum.Enum):
    DIRECT = "direct"
    OCR = "ocr"
    NONE = "none"


@dataclass(frozen=True)
class ExtractionResult:
    text: str
    source: ExtractionSource

    def __post_init__(self) -> None:
        if (self.source is ExtractionSource.NONE) != (self.text == ""):
            raise ValueError("source must be NONE exactly when text is empty")

    @classmethod
    def empty(cls) -> "ExtractionResult":
        return cls(text="", source=ExtractionSource.NONE)
