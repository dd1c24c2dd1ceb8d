"""Page bitmap allocation and lifetime management."""

from .bitmap import (
    Bitmap,
    BitmapFactory,
    clamp_dimension,
)

__all__ = [
    "Bitmap",
    "BitmapFactory",
    "clamp_dimension",
]
