"""Page bitmaps and the factory that owns their pixel buffers.

A `Bitmap` wraps an RGB ``uint8`` numpy array of shape ``(height, width, 3)``.
Buffers are released explicitly through `BitmapFactory.destroy`; the
`scoped` helper pairs every create with a destroy, even when the body raises.
"""

from __future__ import annotations

import math
from contextlib import contextmanager
from typing import Iterator, Optional

import numpy as np

BACKGROUND = 255


def clamp_dimension(value: float) -> int:
    """Round a viewport dimension up to a whole pixel, never below 1."""
    return max(1, int(math.ceil(value)))


class Bitmap:
    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._pixels: Optional[np.ndarray] = np.full((height, width, 3), BACKGROUND, dtype=np.uint8)

    @property
    def destroyed(self) -> bool:
        return self._pixels is None

    @property
    def pixels(self) -> np.ndarray:
        if self._pixels is None:
            raise RuntimeError("Bitmap has been destroyed.")
        return self._pixels

    def write(self, pixels: np.ndarray) -> None:
        """Copy an RGB array of exactly this bitmap's size into the buffer."""
        target = self.pixels
        if pixels.shape != target.shape:
            raise ValueError(
                f"Pixel data shape {pixels.shape} does not match bitmap {target.shape}"
            )
        np.copyto(target, pixels)

    def _reallocate(self, width: int, height: int) -> None:
        if (width, height) != (self.width, self.height):
            self._pixels = np.full((height, width, 3), BACKGROUND, dtype=np.uint8)
        else:
            self.pixels.fill(BACKGROUND)
        self.width = width
        self.height = height

    def _release(self) -> None:
        self._pixels = None

    def __repr__(self) -> str:
        state = "destroyed" if self.destroyed else "live"
        return f"Bitmap({self.width}x{self.height}, {state})"


class BitmapFactory:
    """Allocates, recycles and releases page bitmaps."""

    def create(self, width: float, height: float) -> Bitmap:
        return Bitmap(clamp_dimension(width), clamp_dimension(height))

    def reset(self, bitmap: Bitmap, width: float, height: float) -> None:
        if bitmap.destroyed:
            raise RuntimeError("Cannot reset a destroyed bitmap.")
        bitmap._reallocate(clamp_dimension(width), clamp_dimension(height))

    def destroy(self, bitmap: Bitmap) -> None:
        bitmap._release()

    @contextmanager
    def scoped(self, width: float, height: float) -> Iterator[Bitmap]:
        bitmap = self.create(width, height)
        try:
            yield bitmap
        finally:
            self.destroy(bitmap)
