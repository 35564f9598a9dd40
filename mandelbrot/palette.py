"""Color tables that turn escape counts into RGB values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from matplotlib import colormaps as _mpl_colormaps

RGB = tuple[int, int, int]

MEMBER_COLOR: RGB = (0, 0, 0)

# Rainbow order, one entry per escape count up to the default bound.
RAINBOW_COLORS: tuple[RGB, ...] = (
    (139, 0, 0), (166, 29, 0), (192, 57, 43), (217, 84, 45), (242, 121, 41),
    (245, 160, 0), (255, 185, 15), (255, 209, 26), (255, 223, 34), (255, 240, 0),
    (230, 230, 0), (200, 200, 0), (173, 255, 47), (154, 205, 50), (124, 252, 0),
    (50, 205, 50), (34, 139, 34), (0, 128, 0), (0, 100, 0), (0, 255, 255),
    (0, 206, 209), (64, 224, 208), (0, 255, 127), (0, 250, 154), (46, 139, 87),
    (0, 128, 128), (0, 255, 0), (34, 139, 34), (60, 179, 113), (152, 251, 152),
    (144, 238, 144), (152, 255, 152), (0, 255, 0), (127, 255, 0), (124, 252, 0),
    (50, 205, 50), (173, 255, 47), (154, 205, 50), (173, 216, 230), (0, 191, 255),
    (135, 206, 235), (30, 144, 255), (0, 0, 255), (65, 105, 225), (0, 0, 139),
    (0, 0, 128), (25, 25, 112), (0, 0, 205), (0, 0, 255), (30, 144, 255),
    (65, 105, 225), (0, 0, 139), (128, 0, 128), (75, 0, 130), (139, 0, 139),
    (148, 0, 211), (186, 85, 211), (139, 0, 139), (238, 130, 238), (255, 0, 255),
    (255, 20, 147), (255, 105, 180), (255, 182, 193), (255, 192, 203), (255, 240, 245),
    (255, 255, 255), (245, 245, 245), (220, 220, 220), (211, 211, 211), (192, 192, 192),
    (169, 169, 169), (128, 128, 128), (105, 105, 105), (255, 69, 0), (128, 0, 128),
    (75, 0, 130), (139, 0, 139), (148, 0, 211), (186, 85, 211), (139, 0, 139),
)


def get_colormap(name):
    return _mpl_colormaps[name]


def _check_rgb(color) -> RGB:
    rgb = tuple(int(channel) for channel in color)
    if len(rgb) != 3 or any(channel < 0 or channel > 255 for channel in rgb):
        raise ValueError(f"Colors must be three channels in [0, 255], got {color!r}.")
    return rgb  # type: ignore[return-value]


@dataclass(frozen=True)
class Palette:
    """Ordered color table indexed by escape count, starting at 1."""

    colors: tuple[RGB, ...]
    member_color: RGB = MEMBER_COLOR

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError("A palette needs at least one color.")
        object.__setattr__(self, "colors", tuple(_check_rgb(color) for color in self.colors))
        object.__setattr__(self, "member_color", _check_rgb(self.member_color))

    def __len__(self) -> int:
        return len(self.colors)

    def covers(self, max_iterations: int) -> bool:
        return len(self.colors) >= max_iterations

    def color_for(self, iteration_count: int, is_member: bool) -> RGB:
        if is_member:
            return self.member_color
        if not 1 <= iteration_count <= len(self.colors):
            raise IndexError(f"No palette entry for iteration count {iteration_count} (palette has {len(self.colors)}).")
        return self.colors[iteration_count - 1]

    def colorize(self, iterations: np.ndarray, members: np.ndarray) -> np.ndarray:
        """Vectorized :meth:`color_for` over grids, returning ``uint8`` RGB."""

        iterations = np.asarray(iterations)
        members = np.asarray(members, dtype=bool)
        outside = iterations[~members]
        if outside.size and (outside.min() < 1 or outside.max() > len(self.colors)):
            raise IndexError(
                f"Iteration counts {outside.min()}..{outside.max()} exceed the palette range 1..{len(self.colors)}."
            )

        table = np.array((self.member_color,) + self.colors, dtype=np.uint8)
        indices = np.where(members, 0, iterations)
        return table[indices]


def _palette_size(max_iterations: int) -> int:
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iterations}.")
    return int(max_iterations)


def _cycled(colors, max_iterations: int) -> tuple[RGB, ...]:
    count = _palette_size(max_iterations)
    return tuple(colors[i % len(colors)] for i in range(count))


def rainbow_palette(max_iterations: int, member_color: RGB = MEMBER_COLOR) -> Palette:
    """The curated rainbow table, repeated as needed to cover ``max_iterations``."""

    return Palette(_cycled(RAINBOW_COLORS, max_iterations), member_color)


def random_palette(max_iterations: int, seed: Optional[int] = None, member_color: RGB = MEMBER_COLOR) -> Palette:
    rng = np.random.default_rng(seed)
    values = rng.integers(0, 256, size=(_palette_size(max_iterations), 3))
    return Palette(tuple(tuple(int(v) for v in row) for row in values), member_color)


def colormap_palette(
    name: str,
    max_iterations: int,
    *,
    invert: bool = False,
    member_color: RGB = MEMBER_COLOR,
) -> Palette:
    """Sample a matplotlib colormap evenly, one entry per escape count."""

    cmap = get_colormap(name)
    count = _palette_size(max_iterations)
    positions = np.linspace(0.0, 1.0, count, dtype=np.float64)
    if invert:
        positions = 1.0 - positions
    rgba = np.array(cmap(positions), copy=True)
    rgb = np.uint8(np.clip(rgba[:, :3] * 255, 0, 255))
    return Palette(tuple(tuple(int(v) for v in row) for row in rgb), member_color)


def parse_hex_color(hex_color: str) -> RGB:
    """Parse ``#RRGGBB`` into an RGB triple."""

    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError('Colors must be in the form #RRGGBB.')
    try:
        return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))  # type: ignore[return-value]
    except ValueError as exc:
        raise ValueError('Colors must contain only hexadecimal digits.') from exc
