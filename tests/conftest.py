import matplotlib

matplotlib.use("Agg")

import pytest

from mandelbrot import DEFAULT_VIEWPORT, Renderer, rainbow_palette


@pytest.fixture
def palette():
    return rainbow_palette(80)


@pytest.fixture
def python_renderer(palette):
    return Renderer(palette=palette, max_iterations=80, backend="python")


@pytest.fixture
def default_viewport():
    return DEFAULT_VIEWPORT
