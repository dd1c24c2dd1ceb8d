"""Page rasterization."""

from .rasterizer import PageRasterizer

__all__ = ["PageRasterizer"]
