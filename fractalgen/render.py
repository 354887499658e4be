"""
Rendering pipeline for fractalgen.

    params -> compute_escape_grid -> escape_histogram -> cumulative_bins
           -> colorize -> assemble_image -> write_png

Main entrypoint:
    create_fractal_image(fractal_params, rendering_params, path) -> Path
"""

from __future__ import annotations

import logging
import multiprocessing
import os
from dataclasses import dataclass
from pathlib import Path
from time import time
from typing import Callable, Optional

import numpy as np
from PIL import Image

from fractalgen.coloring import black_and_green, colorize
from fractalgen.geometry import PixelGrid, Rectangle, pixel_to_plane
from fractalgen.iterators import escape_iterations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FractalParams:
    """The mathematical identity of a fractal."""

    function: Callable[[complex, complex], complex]
    start: complex


@dataclass(frozen=True)
class RenderingParams:
    """Quality and style of a rendering, independent of the fractal's math."""

    max_iterations: int
    escape_threshold: float
    viewing_window: Rectangle
    display_quality: PixelGrid
    color_scheme: Callable = black_and_green

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.escape_threshold <= 0:
            raise ValueError(f"escape_threshold must be positive, got {self.escape_threshold}")
        if self.viewing_window.dx() == 0 or self.viewing_window.dy() == 0:
            raise ValueError("Viewing window must have a non-zero extent")


def expected_render_seconds(rendering_params: RenderingParams) -> float:
    """Rough wall-clock estimate, scaled from a 1080x1920 reference run."""
    grid = rendering_params.display_quality
    return rendering_params.max_iterations * grid.size * 28 / (10 * 1080 * 1920 * 4)


# ----------------------------------------------------
# Parallel grid evaluation
# ----------------------------------------------------

def _escape_column(task):
    """Escape counts for every row of pixel column px."""
    px, fractal_params, rendering_params = task
    window = rendering_params.viewing_window
    grid = rendering_params.display_quality

    column = np.empty(grid.height, dtype=np.int32)
    for py in range(grid.height):
        x, y = pixel_to_plane(px, py, window, grid)
        column[py] = escape_iterations(x, y, fractal_params, rendering_params)
    return px, column


def compute_escape_grid(
    fractal_params: FractalParams,
    rendering_params: RenderingParams,
    workers: Optional[int] = None,
) -> np.ndarray:
    """
    Escape count for every pixel, as an int32 array indexed [px, py].

    Columns are handed to a pool of `workers` processes (default: one per
    CPU). Each column lands in its own slice of the buffer; the call returns
    once every column is in.
    """
    grid = rendering_params.display_quality
    if workers is None:
        workers = os.cpu_count() or 1
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    buffer = np.zeros((grid.width, grid.height), dtype=np.int32)
    tasks = [(px, fractal_params, rendering_params) for px in range(grid.width)]

    if workers == 1:
        results = map(_escape_column, tasks)
        for px, column in results:
            buffer[px] = column
    else:
        chunksize = max(1, grid.width // (workers * 4))
        with multiprocessing.Pool(processes=workers) as pool:
            for px, column in pool.imap_unordered(_escape_column, tasks, chunksize=chunksize):
                buffer[px] = column

    if not buffer.all():
        raise RuntimeError("Escape grid has unevaluated pixels")
    return buffer


# ----------------------------------------------------
# Histogram normalization
# ----------------------------------------------------

def escape_histogram(buffer, max_iterations):
    """hist[v] = number of pixels whose escape count is v + 1."""
    counts = np.asarray(buffer).ravel() - 1
    return np.bincount(counts, minlength=max_iterations)[:max_iterations]


def cumulative_bins(hist, total):
    """
    Cumulative distribution of escape counts.

    bins[v] is the fraction of pixels escaping within v + 1 iterations. The
    last bin holds the pixels that never escaped and is pinned to 1.0.
    """
    if total <= 0:
        raise ValueError(f"Total pixel count must be positive, got {total}")
    hist = np.asarray(hist)
    bins = np.empty(len(hist), dtype=np.float64)
    bins[:-1] = np.cumsum(hist[:-1]) / float(total)
    bins[-1] = 1.0
    return bins


# ----------------------------------------------------
# Image assembly and output
# ----------------------------------------------------

def assemble_image(colors, grid: PixelGrid):
    """
    (width, height, 4) colors indexed [px, py] -> (height, width, 4) image.

    Pixel row py lands on image row height - py - 1, so the plane's y axis
    points up in the picture.
    """
    colors = np.asarray(colors, dtype=np.uint8)
    if colors.shape[:2] != (grid.width, grid.height):
        raise ValueError(
            f"Color buffer shape {colors.shape[:2]} does not match grid {grid.width}x{grid.height}"
        )
    return np.ascontiguousarray(colors.transpose(1, 0, 2)[::-1])


def write_png(image, path) -> Path:
    """Write an RGBA array to a PNG file, creating parent directories."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.asarray(image, dtype=np.uint8)).save(out_path, format="PNG")
    return out_path


def render_image(
    fractal_params: FractalParams,
    rendering_params: RenderingParams,
    workers: Optional[int] = None,
) -> np.ndarray:
    """Run the whole pipeline in memory and return the (height, width, 4) RGBA image."""
    grid = rendering_params.display_quality
    logger.info(
        f"Rendering {grid.width}x{grid.height}, max_iterations={rendering_params.max_iterations} "
        f"(expected ~{expected_render_seconds(rendering_params):.1f}s)"
    )

    start_time = time()
    buffer = compute_escape_grid(fractal_params, rendering_params, workers=workers)
    grid_time = time()
    logger.info(f"Escape grid computed in {grid_time - start_time:.2f} seconds.")

    hist = escape_histogram(buffer, rendering_params.max_iterations)
    bins = cumulative_bins(hist, grid.size)
    logger.debug(f"{hist[-1]} of {grid.size} pixels reached the iteration cap")

    colors = colorize(buffer, bins, rendering_params.color_scheme)
    image = assemble_image(colors, grid)
    logger.info(f"Image assembled in {time() - grid_time:.2f} seconds.")
    return image


def create_fractal_image(
    fractal_params: FractalParams,
    rendering_params: RenderingParams,
    path,
    workers: Optional[int] = None,
) -> Path:
    """Render a fractal and write it to `path` as PNG. OSError from the write propagates."""
    image = render_image(fractal_params, rendering_params, workers=workers)
    out_path = write_png(image, path)
    logger.info(f"Image saved to {out_path}")
    return out_path
