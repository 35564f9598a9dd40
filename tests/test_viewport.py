import math

import numpy as np
import pytest

from mandelbrot import DEFAULT_VIEWPORT, ComplexPoint, Viewport, axis_samples, pixel_to_complex, raster_coordinates


def test_default_viewport_bounds():
    assert DEFAULT_VIEWPORT == Viewport(-2.0, 1.0, -1.0, 1.0)
    assert DEFAULT_VIEWPORT.real_width == 3.0
    assert DEFAULT_VIEWPORT.imaginary_width == 2.0
    assert DEFAULT_VIEWPORT.center == ComplexPoint(-0.5, 0.0)


@pytest.mark.parametrize(
    "bounds",
    [
        (1.0, 1.0, -1.0, 1.0),
        (1.0, -2.0, -1.0, 1.0),
        (-2.0, 1.0, 1.0, 1.0),
        (-2.0, 1.0, 1.0, -1.0),
        (-2.0, math.inf, -1.0, 1.0),
        (-2.0, 1.0, math.nan, 1.0),
    ],
)
def test_degenerate_viewports_are_rejected(bounds):
    with pytest.raises(ValueError):
        Viewport(*bounds)


def test_viewport_is_immutable():
    with pytest.raises(AttributeError):
        DEFAULT_VIEWPORT.real_start = 0.0


@pytest.mark.parametrize("size", [(1, 1), (4, 4), (640, 480), (3, 1000)])
def test_origin_pixel_maps_to_viewport_start(size):
    width, height = size
    assert pixel_to_complex(0, 0, width, height, DEFAULT_VIEWPORT) == ComplexPoint(-2.0, -1.0)


def test_far_corner_maps_to_viewport_end():
    point = pixel_to_complex(4, 4, 4, 4, DEFAULT_VIEWPORT)
    assert point == ComplexPoint(1.0, 1.0)


def test_four_by_four_grid():
    assert pixel_to_complex(1, 0, 4, 4, DEFAULT_VIEWPORT) == ComplexPoint(-1.25, -1.0)
    assert pixel_to_complex(2, 2, 4, 4, DEFAULT_VIEWPORT) == ComplexPoint(-0.5, 0.0)
    assert pixel_to_complex(3, 3, 4, 4, DEFAULT_VIEWPORT) == ComplexPoint(0.25, 0.5)


def test_mapping_is_monotonic_on_both_axes():
    viewport = Viewport(-0.8, -0.7, 0.05, 0.15)
    reals = [pixel_to_complex(px, 3, 97, 61, viewport).real for px in range(97)]
    imaginaries = [pixel_to_complex(5, py, 97, 61, viewport).imaginary for py in range(61)]
    assert all(a < b for a, b in zip(reals, reals[1:]))
    assert all(a < b for a, b in zip(imaginaries, imaginaries[1:]))


def test_no_aspect_correction():
    # A square viewport on a wide raster keeps independent per-axis steps.
    viewport = Viewport(0.0, 1.0, 0.0, 1.0)
    point = pixel_to_complex(50, 50, 200, 100, viewport)
    assert point == ComplexPoint(0.25, 0.5)


@pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
def test_empty_raster_is_rejected(size):
    with pytest.raises(ValueError):
        pixel_to_complex(0, 0, size[0], size[1], DEFAULT_VIEWPORT)


def test_axis_samples_match_scalar_mapping():
    viewport = Viewport(-1.7490234375, -1.7468, -0.0003, 0.00117)
    width, height = 37, 23
    real = axis_samples(viewport.real_start, viewport.real_end, width)
    imaginary = axis_samples(viewport.imaginary_start, viewport.imaginary_end, height)
    for px in range(width):
        assert real[px] == pixel_to_complex(px, 0, width, height, viewport).real
    for py in range(height):
        assert imaginary[py] == pixel_to_complex(0, py, width, height, viewport).imaginary


def test_raster_coordinates_are_row_major():
    real, imaginary = raster_coordinates(4, 2, DEFAULT_VIEWPORT)
    assert real.shape == imaginary.shape == (2, 4)
    np.testing.assert_array_equal(real[0], [-2.0, -1.25, -0.5, 0.25])
    np.testing.assert_array_equal(imaginary[:, 0], [-1.0, 0.0])
