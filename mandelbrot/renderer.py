"""Rendering primitives for Mandelbrot frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import tensorflow as tf

from .escape import ESCAPE_RADIUS, MAX_ITERATION, evaluate
from .palette import Palette
from .viewport import Viewport, pixel_to_complex, raster_coordinates

ALPHA_CHANNEL = 255
BACKENDS = ("tensorflow", "python")


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set."""

    width: int
    height: int
    max_iterations: int = MAX_ITERATION

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Raster dimensions must be positive, got {self.width}x{self.height}.")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}.")


@dataclass(frozen=True)
class RenderResult:
    """Container for the pixel buffer and the numerical results behind it."""

    pixels: bytes
    iterations: np.ndarray
    members: np.ndarray
    viewport: Viewport
    params: RenderParameters


@tf.function
def _escape_step(
    zx: tf.Tensor,
    zy: tf.Tensor,
    cx: tf.Tensor,
    cy: tf.Tensor,
    ns: tf.Tensor,
    modulus: tf.Tensor,
    active: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Perform a single Mandelbrot iteration for points that have not escaped."""

    two = tf.constant(2.0, dtype=zx.dtype)
    zx_new = zx * zx - zy * zy + cx
    zy_new = two * zx * zy + cy
    modulus_new = tf.sqrt(zx_new * zx_new + zy_new * zy_new)
    zx = tf.where(active, zx_new, zx)
    zy = tf.where(active, zy_new, zy)
    modulus = tf.where(active, modulus_new, modulus)
    ns = ns + tf.cast(active, tf.int32)
    return zx, zy, ns, modulus


@tf.function
def _escape_run(cx: tf.Tensor, cy: tf.Tensor, max_iterations: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor]:
    """Iterate every point with a TensorFlow while loop until all escaped or hit the bound."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    radius = tf.constant(ESCAPE_RADIUS, dtype=cx.dtype)
    i = tf.constant(0, dtype=tf.int32)
    zx = tf.zeros_like(cx)
    zy = tf.zeros_like(cy)
    ns = tf.zeros_like(cx, tf.int32)
    modulus = tf.zeros_like(cx)
    active = tf.ones_like(ns, tf.bool)

    def cond(i, zx, zy, ns, modulus, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zx, zy, ns, modulus, active):
        zx, zy, ns, modulus = _escape_step(zx, zy, cx, cy, ns, modulus, active)
        active = tf.logical_and(
            active,
            tf.logical_and(tf.less_equal(modulus, radius), tf.less(ns, max_iterations)),
        )
        return i + 1, zx, zy, ns, modulus, active

    _, _, _, ns, modulus, _ = tf.while_loop(cond, body, (i, zx, zy, ns, modulus, active))
    return ns, tf.less_equal(modulus, radius)


def escape_grid(
    real: np.ndarray,
    imaginary: np.ndarray,
    max_iterations: int,
    *,
    device: Optional[str] = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Escape counts and membership for every point of a coordinate grid.

    Uses the same float64 operations as :func:`mandelbrot.escape.evaluate`, so
    the results match the scalar evaluator point for point.
    """

    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iterations}.")

    with tf.device(device if device is not None else "/CPU:0"):
        cx = tf.convert_to_tensor(real, dtype=tf.float64)
        cy = tf.convert_to_tensor(imaginary, dtype=tf.float64)
        ns, members = _escape_run(cx, cy, tf.constant(max_iterations, dtype=tf.int32))

    return ns.numpy(), members.numpy()


def _escape_grid_python(params: RenderParameters, viewport: Viewport) -> tuple[np.ndarray, np.ndarray]:
    iterations = np.zeros((params.height, params.width), dtype=np.int32)
    members = np.zeros((params.height, params.width), dtype=bool)
    for py in range(params.height):
        for px in range(params.width):
            c = pixel_to_complex(px, py, params.width, params.height, viewport)
            iterations[py, px], members[py, px] = evaluate(c, params.max_iterations)
    return iterations, members


def render_frame(
    params: RenderParameters,
    viewport: Viewport,
    palette: Palette,
    *,
    backend: str = "tensorflow",
    device: Optional[str] = None,
) -> RenderResult:
    """Render one full frame of ``viewport`` into a fresh RGBA buffer."""

    if not palette.covers(params.max_iterations):
        raise ValueError(
            f"Palette has {len(palette)} colors but max_iterations is {params.max_iterations}."
        )

    if backend == "tensorflow":
        real, imaginary = raster_coordinates(params.width, params.height, viewport)
        iterations, members = escape_grid(real, imaginary, params.max_iterations, device=device)
    elif backend == "python":
        iterations, members = _escape_grid_python(params, viewport)
    else:
        raise ValueError(f"Unknown backend '{backend}'. Valid choices: {', '.join(BACKENDS)}.")

    # Row-major RGBA, pixel (px, py) at byte offset (py * width + px) * 4.
    rgba = np.empty((params.height, params.width, 4), dtype=np.uint8)
    rgba[..., :3] = palette.colorize(iterations, members)
    rgba[..., 3] = ALPHA_CHANNEL

    return RenderResult(
        pixels=rgba.tobytes(),
        iterations=iterations,
        members=members,
        viewport=viewport,
        params=params,
    )


@dataclass
class Renderer:
    """Full-frame renderer bound to a palette, an iteration bound and a surface.

    ``surface`` is any object with ``present(width, height, pixels)``; it
    receives each buffer only after the whole raster has been written.
    """

    palette: Palette
    max_iterations: int = MAX_ITERATION
    backend: str = "tensorflow"
    device: Optional[str] = None
    surface: Any = None

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{self.backend}'. Valid choices: {', '.join(BACKENDS)}.")
        if not self.palette.covers(self.max_iterations):
            raise ValueError(
                f"Palette has {len(self.palette)} colors but max_iterations is {self.max_iterations}."
            )

    def render_result(self, viewport: Viewport, width: int, height: int) -> RenderResult:
        params = RenderParameters(width=width, height=height, max_iterations=self.max_iterations)
        return render_frame(params, viewport, self.palette, backend=self.backend, device=self.device)

    def render(self, viewport: Viewport, width: int, height: int) -> bytes:
        result = self.render_result(viewport, width, height)
        if self.surface is not None:
            self.surface.present(width, height, result.pixels)
        return result.pixels
