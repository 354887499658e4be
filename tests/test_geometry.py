import dataclasses

import pytest

from fractalgen.geometry import PixelGrid, Point, Rectangle, pixel_to_plane, window_from_center
from fractalgen.utils import clamp, parse_complex


def test_rectangle_extent():
    r = Rectangle(Point(-2.0, 1.0), Point(0.5, -1.5))
    assert r.dx() == pytest.approx(2.5)
    assert r.dy() == pytest.approx(2.5)


def test_point_is_immutable():
    p = Point(1.0, 2.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.x = 3.0


def test_pixel_grid():
    grid = PixelGrid(1080, 1920)
    assert grid.dx() == 1080
    assert grid.dy() == 1920
    assert grid.size == 1080 * 1920


@pytest.mark.parametrize("width, height", [(0, 10), (10, 0), (-1, 5)])
def test_pixel_grid_rejects_empty(width, height):
    with pytest.raises(ValueError):
        PixelGrid(width, height)


def test_window_from_center_sample():
    window = window_from_center((-0.8, 0.425), 7.25, PixelGrid(1080, 1920))
    assert window.min.x == pytest.approx(-1.080 / 7.25 - 0.8)
    assert window.min.y == pytest.approx(-1.920 / 7.25 + 0.425)
    assert window.max.x == pytest.approx(1.080 / 7.25 - 0.8)
    assert window.max.y == pytest.approx(1.920 / 7.25 + 0.425)


def test_window_from_center_rejects_bad_zoom():
    with pytest.raises(ValueError):
        window_from_center((0.0, 0.0), 0.0, PixelGrid(10, 10))


def test_pixel_to_plane():
    window = Rectangle(Point(-2.0, -1.0), Point(2.0, 1.0))
    grid = PixelGrid(4, 2)
    assert pixel_to_plane(0, 0, window, grid) == (-2.0, -1.0)
    assert pixel_to_plane(2, 1, window, grid) == (0.0, 0.0)
    # the max edge itself is never sampled
    assert pixel_to_plane(3, 1, window, grid) == (1.0, 0.0)


@pytest.mark.parametrize("text, expected", [
    ("0.8+0.6j", 0.8 + 0.6j),
    ("-0.4-0.6i", -0.4 - 0.6j),
    (" 0.5 ", 0.5 + 0j),
    ("(0.8+0.6j)", 0.8 + 0.6j),
])
def test_parse_complex(text, expected):
    assert parse_complex(text) == expected


def test_parse_complex_rejects_garbage():
    with pytest.raises(ValueError):
        parse_complex("abc")


def test_clamp():
    assert clamp(1.5, 0.0, 1.0) == 1.0
    assert clamp(-0.5, 0.0, 1.0) == 0.0
    assert clamp(0.3, 0.0, 1.0) == 0.3
