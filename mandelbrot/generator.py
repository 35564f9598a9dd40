"""Click-driven zoom transitions between viewports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .viewport import Viewport

SCALE_FACTOR = 0.5

Click = tuple[int, int]


def _check_scale(scale_factor: float) -> None:
    if not 0.0 < scale_factor < 1.0:
        raise ValueError(f"scale_factor must lie strictly between 0 and 1, got {scale_factor}.")


def _zoom_axis(start: float, end: float, proportion: float, scale_factor: float) -> tuple[float, float]:
    span = end - start
    center = start + span * proportion
    half_width = span * scale_factor / 2
    return center - half_width, center + half_width


def zoom(
    click: Click,
    width: int,
    height: int,
    viewport: Viewport,
    scale_factor: float = SCALE_FACTOR,
) -> Viewport:
    """Return the viewport centered on ``click`` and shrunk by ``scale_factor``.

    Each axis is handled independently. The result is not clamped to the old
    rectangle, so clicks near an edge produce a viewport reaching past it.
    """

    _check_scale(scale_factor)
    if width <= 0 or height <= 0:
        raise ValueError(f"Raster dimensions must be positive, got {width}x{height}.")

    px, py = click
    real_start, real_end = _zoom_axis(viewport.real_start, viewport.real_end, px / width, scale_factor)
    imaginary_start, imaginary_end = _zoom_axis(
        viewport.imaginary_start, viewport.imaginary_end, py / height, scale_factor
    )
    return Viewport(real_start, real_end, imaginary_start, imaginary_end)


@dataclass(frozen=True)
class ZoomPlanner:
    """Apply click zooms for a fixed raster size and scale factor."""

    width: int
    height: int
    scale_factor: float = SCALE_FACTOR

    def __post_init__(self) -> None:
        _check_scale(self.scale_factor)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Raster dimensions must be positive, got {self.width}x{self.height}.")

    def update_after_click(self, viewport: Viewport, click: Click) -> Viewport:
        return zoom(click, self.width, self.height, viewport, self.scale_factor)

    def replay(self, viewport: Viewport, clicks: Iterable[Click]) -> Iterator[Viewport]:
        """Yield ``viewport`` followed by the viewport after each click."""

        yield viewport
        for click in clicks:
            viewport = self.update_after_click(viewport, click)
            yield viewport


def parse_click(text: str) -> Click:
    """Parse an ``X,Y`` pixel position."""

    parts = text.split(',')
    if len(parts) != 2:
        raise ValueError(f"Clicks must be given as X,Y, got {text!r}.")
    try:
        return int(parts[0].strip()), int(parts[1].strip())
    except ValueError as exc:
        raise ValueError(f"Click coordinates must be integers, got {text!r}.") from exc
