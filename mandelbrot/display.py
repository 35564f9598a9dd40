"""Presentation surfaces that receive finished RGBA buffers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import imageio
import numpy as np
import PIL.Image

from .generator import SCALE_FACTOR, zoom
from .viewport import Viewport


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def _check_buffer(width: int, height: int, pixels: bytes) -> None:
    expected = width * height * 4
    if len(pixels) != expected:
        raise ValueError(f"Expected {expected} bytes for a {width}x{height} RGBA buffer, got {len(pixels)}.")


def to_array(width: int, height: int, pixels: bytes) -> np.ndarray:
    """View ``pixels`` as a ``(height, width, 4)`` array."""

    _check_buffer(width, height, pixels)
    return np.frombuffer(pixels, dtype=np.uint8).reshape(height, width, 4)


def to_image(width: int, height: int, pixels: bytes) -> PIL.Image.Image:
    _check_buffer(width, height, pixels)
    return PIL.Image.frombytes("RGBA", (width, height), bytes(pixels))


def _save(image: PIL.Image.Image, path: Path, image_format: str) -> None:
    pil_format = _pil_format_name(image_format)
    if pil_format == "JPEG":
        image = image.convert("RGB")
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(path), format=pil_format)


class ImageSurface:
    """Write each presented frame to the same image file."""

    def __init__(self, path: Path, image_format: str = "png") -> None:
        self.path = Path(path)
        self.image_format = image_format
        self.frames_presented = 0

    def present(self, width: int, height: int, pixels: bytes) -> None:
        _save(to_image(width, height, pixels), self.path, self.image_format)
        self.frames_presented += 1


class FrameSequenceSurface:
    """Persist every presented frame as a numbered file inside ``frame_dir``."""

    def __init__(self, frame_dir: Path, image_format: str = "png", digits: int = 3, prefix: str = "frame") -> None:
        self.frame_dir = Path(frame_dir)
        self.image_format = image_format
        self.digits = digits
        self.prefix = prefix
        self.paths: list[Path] = []

    def present(self, width: int, height: int, pixels: bytes) -> None:
        index = len(self.paths)
        frame_path = self.frame_dir / f"{self.prefix}{index:0{self.digits}d}.{self.image_format}"
        _save(to_image(width, height, pixels), frame_path, self.image_format)
        self.paths.append(frame_path)


class GifSurface:
    """Append presented frames to an animated GIF, ``duration`` milliseconds each."""

    def __init__(self, path: Path, duration: float = 500) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._writer = imageio.get_writer(str(self.path), mode='I', duration=duration, loop=0)
        self.frames_presented = 0

    def present(self, width: int, height: int, pixels: bytes) -> None:
        if self._writer is None:
            raise RuntimeError(f"GIF writer for {self.path} is already closed.")
        self._writer.append_data(to_array(width, height, pixels))
        self.frames_presented += 1

    def close(self) -> None:
        if self._writer is not None:
            self._writer.close()
            self._writer = None


class MultiSurface:
    """Fan a presented frame out to several surfaces."""

    def __init__(self, surfaces) -> None:
        self.surfaces = list(surfaces)

    def present(self, width: int, height: int, pixels: bytes) -> None:
        for surface in self.surfaces:
            surface.present(width, height, pixels)

    def close(self) -> None:
        for surface in self.surfaces:
            close = getattr(surface, "close", None)
            if close is not None:
                close()


class InteractiveViewer:
    """Matplotlib window that zooms on every left click.

    The viewer owns the current viewport and threads it through ``zoom`` and
    the renderer. Clicks are handled one at a time by the GUI event loop, so a
    render always completes before the next click is seen.
    """

    def __init__(
        self,
        renderer,
        width: int,
        height: int,
        viewport: Viewport,
        scale_factor: float = SCALE_FACTOR,
        *,
        title: str = "Mandelbrot",
    ) -> None:
        self.renderer = renderer
        self.width = width
        self.height = height
        self.viewport = viewport
        self.scale_factor = scale_factor
        self.title = title
        self._figure: Any = None
        self._axes: Any = None
        self._image: Any = None

    def present(self, width: int, height: int, pixels: bytes) -> None:
        frame = to_array(width, height, pixels)
        if self._image is None:
            self._image = self._axes.imshow(frame, origin="upper", interpolation="nearest")
        else:
            self._image.set_data(frame)
        self._axes.set_title(self._status_text())
        self._figure.canvas.draw_idle()

    def _status_text(self) -> str:
        vp = self.viewport
        return (
            f"{self.title}  real [{vp.real_start:.6g}, {vp.real_end:.6g}]  "
            f"imag [{vp.imaginary_start:.6g}, {vp.imaginary_end:.6g}]"
        )

    def redraw(self) -> None:
        self.present(self.width, self.height, self.renderer.render(self.viewport, self.width, self.height))

    def handle_click(self, px: float, py: float) -> Viewport:
        click = (int(px), int(py))
        try:
            self.viewport = zoom(click, self.width, self.height, self.viewport, self.scale_factor)
        except ValueError as exc:
            # Floating point ran out of room; stay on the last valid viewport.
            self._axes.set_title(f"{self.title}  cannot zoom further: {exc}", fontsize="small")
            self._figure.canvas.draw_idle()
            return self.viewport
        self.redraw()
        return self.viewport

    def _on_press(self, event) -> None:
        if event.inaxes is not self._axes or event.button != 1:
            return
        if event.xdata is None or event.ydata is None:
            return
        # imshow puts pixel centers on integer data coordinates.
        self.handle_click(event.xdata + 0.5, event.ydata + 0.5)

    def show(self, block: Optional[bool] = None) -> None:
        import matplotlib.pyplot as plt

        dpi = 100
        self._figure, self._axes = plt.subplots(figsize=(self.width / dpi, self.height / dpi), dpi=dpi)
        self._axes.set_axis_off()
        self._figure.canvas.mpl_connect("button_press_event", self._on_press)
        self.redraw()
        plt.show(block=block)
