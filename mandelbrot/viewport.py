"""Coordinate types and the pixel-to-complex-plane mapping."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ComplexPoint:
    """A point ``real + imaginary * i`` of the complex plane."""

    real: float
    imaginary: float


@dataclass(frozen=True)
class Viewport:
    """Axis-aligned rectangle of the complex plane mapped onto the raster."""

    real_start: float
    real_end: float
    imaginary_start: float
    imaginary_end: float

    def __post_init__(self) -> None:
        bounds = (self.real_start, self.real_end, self.imaginary_start, self.imaginary_end)
        if not all(math.isfinite(value) for value in bounds):
            raise ValueError(f"Viewport bounds must be finite, got {bounds}.")
        if not self.real_end > self.real_start:
            raise ValueError(f"real_end ({self.real_end}) must be greater than real_start ({self.real_start}).")
        if not self.imaginary_end > self.imaginary_start:
            raise ValueError(
                f"imaginary_end ({self.imaginary_end}) must be greater than imaginary_start ({self.imaginary_start})."
            )

    @property
    def real_width(self) -> float:
        return self.real_end - self.real_start

    @property
    def imaginary_width(self) -> float:
        return self.imaginary_end - self.imaginary_start

    @property
    def center(self) -> ComplexPoint:
        return ComplexPoint(
            (self.real_start + self.real_end) / 2.0,
            (self.imaginary_start + self.imaginary_end) / 2.0,
        )


DEFAULT_VIEWPORT = Viewport(real_start=-2.0, real_end=1.0, imaginary_start=-1.0, imaginary_end=1.0)


def _check_raster(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Raster dimensions must be positive, got {width}x{height}.")


def pixel_to_complex(px: int, py: int, width: int, height: int, viewport: Viewport) -> ComplexPoint:
    """Map raster pixel ``(px, py)`` to its point in ``viewport``.

    The mapping is affine per axis with no aspect correction: pixel ``(0, 0)``
    lands on ``(real_start, imaginary_start)`` and pixel ``(width, height)``
    would land on ``(real_end, imaginary_end)``.
    """

    _check_raster(width, height)
    real = viewport.real_start + px * (viewport.real_end - viewport.real_start) / width
    imaginary = viewport.imaginary_start + py * (viewport.imaginary_end - viewport.imaginary_start) / height
    return ComplexPoint(real, imaginary)


def axis_samples(start: float, end: float, count: int) -> np.ndarray:
    """Coordinates of ``count`` consecutive pixels along one axis.

    Evaluates the same expression as :func:`pixel_to_complex` element-wise, so
    every sample is bit-identical to its scalar counterpart.
    """

    if count <= 0:
        raise ValueError(f"Axis sample count must be positive, got {count}.")
    pixels = np.arange(count, dtype=np.float64)
    return np.float64(start) + pixels * (np.float64(end) - np.float64(start)) / np.float64(count)


def raster_coordinates(width: int, height: int, viewport: Viewport) -> tuple[np.ndarray, np.ndarray]:
    """Return the real and imaginary coordinate grids, each shaped ``(height, width)``."""

    _check_raster(width, height)
    real = axis_samples(viewport.real_start, viewport.real_end, width)
    imaginary = axis_samples(viewport.imaginary_start, viewport.imaginary_end, height)
    return np.meshgrid(real, imaginary)
