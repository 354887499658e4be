# fractalgen/coloring.py
import math

import numpy as np
from matplotlib import colormaps

from fractalgen.utils import clamp

# A color scheme maps a normalized value in [0, 1] to an 8-bit RGBA tuple.
# 1.0 is the top bucket: pixels that never escaped.

BLACK = (0, 0, 0, 255)


def black_and_green(val):
    """Green fading towards black as val grows; the top bucket is black."""
    if val == 1.0:
        return BLACK
    s = int(math.sqrt(val) * 255)
    return (0, 255 - s, 127 - s // 2, 255)


def black_and_green_cubed(val):
    """black_and_green on val**3, which widens the bright band."""
    if val == 1.0:
        return BLACK
    return black_and_green(val * val * val)


class ColormapScheme:
    """
    Color scheme backed by a matplotlib colormap. Always opaque, with the top
    bucket drawn black.

    Only the colormap name is stored so instances pickle cheaply.
    """

    def __init__(self, name):
        if name not in colormaps:
            raise ValueError(f"Unknown colormap: {name}")
        self.name = name

    def __call__(self, val):
        if val == 1.0:
            return BLACK
        rgba = colormaps[self.name](clamp(val, 0.0, 1.0))
        r, g, b = (int(c * 255) for c in rgba[:3])
        return (r, g, b, 255)

    def __eq__(self, other):
        return isinstance(other, ColormapScheme) and other.name == self.name

    def __hash__(self):
        return hash(("cmap", self.name))

    def __repr__(self):
        return f"ColormapScheme({self.name!r})"


_SCHEMES = {
    "black_and_green": black_and_green,
    "black_and_green_cubed": black_and_green_cubed,
}


def available_color_schemes():
    return sorted(_SCHEMES) + ["cmap:<matplotlib colormap>"]


def pick_color_scheme(name: str):
    """
    Resolve a color scheme by name.

    Accepts the built-in names and "cmap:<name>" for any matplotlib colormap,
    e.g. "cmap:inferno".
    """
    key = name.strip()
    if key.lower().startswith("cmap:"):
        return ColormapScheme(key[len("cmap:"):])
    key = key.lower()
    if key not in _SCHEMES:
        raise ValueError(f"Unknown color scheme: {name}")
    return _SCHEMES[key]


def build_palette(bins, color_scheme):
    """Evaluate the scheme once per bin. Returns a uint8 array of shape (len(bins), 4)."""
    return np.array([color_scheme(float(v)) for v in bins], dtype=np.uint8)


def colorize(buffer, bins, color_scheme):
    """
    Map an escape buffer of 1-based counts to RGBA through the cumulative
    bins. Output shape is buffer.shape + (4,).
    """
    palette = build_palette(bins, color_scheme)
    return palette[np.asarray(buffer) - 1]
