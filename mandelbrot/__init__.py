"""Public API for Mandelbrot rendering utilities."""

from .viewport import DEFAULT_VIEWPORT, ComplexPoint, Viewport, axis_samples, pixel_to_complex, raster_coordinates
from .escape import ESCAPE_RADIUS, MAX_ITERATION, EscapeResult, evaluate
from .palette import (
    MEMBER_COLOR,
    RAINBOW_COLORS,
    Palette,
    colormap_palette,
    parse_hex_color,
    rainbow_palette,
    random_palette,
)
from .generator import SCALE_FACTOR, ZoomPlanner, parse_click, zoom
from .renderer import ALPHA_CHANNEL, RenderParameters, Renderer, RenderResult, escape_grid, render_frame
from .display import (
    FrameSequenceSurface,
    GifSurface,
    ImageSurface,
    InteractiveViewer,
    MultiSurface,
    to_array,
    to_image,
)

__all__ = [
    "ALPHA_CHANNEL",
    "ComplexPoint",
    "DEFAULT_VIEWPORT",
    "ESCAPE_RADIUS",
    "EscapeResult",
    "FrameSequenceSurface",
    "GifSurface",
    "ImageSurface",
    "InteractiveViewer",
    "MAX_ITERATION",
    "MEMBER_COLOR",
    "MultiSurface",
    "Palette",
    "RAINBOW_COLORS",
    "RenderParameters",
    "RenderResult",
    "Renderer",
    "SCALE_FACTOR",
    "Viewport",
    "ZoomPlanner",
    "axis_samples",
    "colormap_palette",
    "escape_grid",
    "evaluate",
    "parse_click",
    "parse_hex_color",
    "pixel_to_complex",
    "rainbow_palette",
    "random_palette",
    "raster_coordinates",
    "render_frame",
    "to_array",
    "to_image",
    "zoom",
]
