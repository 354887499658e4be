"""
Geometry primitives for fractalgen.

Two coordinate systems meet here:
- the viewing window, a Rectangle in the complex plane
- the pixel grid, an integer PixelGrid anchored at (0, 0)

The renderer maps pixel (px, py) onto the window with

    x = px * (window.dx() / grid.dx()) + window.min.x
    y = py * (window.dy() / grid.dy()) + window.min.y
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rectangle:
    min: Point
    max: Point

    def dx(self) -> float:
        return abs(self.min.x - self.max.x)

    def dy(self) -> float:
        return abs(self.min.y - self.max.y)


@dataclass(frozen=True)
class PixelGrid:
    """Integer pixel extent, (0, 0) to (width, height)."""

    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Pixel grid must be non-empty, got {self.width}x{self.height}")

    def dx(self) -> int:
        return self.width

    def dy(self) -> int:
        return self.height

    @property
    def size(self) -> int:
        return self.width * self.height


def window_from_center(center: Tuple[float, float], zoom: float, grid: PixelGrid) -> Rectangle:
    """
    Viewing window centered on `center`.

    Half-extents are the grid dimensions in thousands divided by zoom, so a
    1080x1920 grid at zoom 1 spans [-1.08, 1.08] x [-1.92, 1.92].
    """
    if zoom <= 0:
        raise ValueError(f"Zoom must be positive, got {zoom}")
    cx, cy = center
    half_w = grid.width / 1000.0 / zoom
    half_h = grid.height / 1000.0 / zoom
    return Rectangle(
        Point(-half_w + cx, -half_h + cy),
        Point(half_w + cx, half_h + cy),
    )


def pixel_to_plane(px: int, py: int, window: Rectangle, grid: PixelGrid) -> Tuple[float, float]:
    """Map a pixel coordinate to its point in the viewing window."""
    x = px * (window.dx() / grid.dx()) + window.min.x
    y = py * (window.dy() / grid.dy()) + window.min.y
    return x, y
