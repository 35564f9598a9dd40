import pytest

from mandelbrot import DEFAULT_VIEWPORT, Viewport, ZoomPlanner, parse_click, pixel_to_complex, zoom


@pytest.mark.parametrize("click", [(0, 0), (10, 7), (99, 59), (50, 30)])
@pytest.mark.parametrize("scale_factor", [0.1, 0.5, 0.9])
def test_zoom_scales_and_recenters(click, scale_factor):
    width, height = 100, 60
    new = zoom(click, width, height, DEFAULT_VIEWPORT, scale_factor)
    target = pixel_to_complex(click[0], click[1], width, height, DEFAULT_VIEWPORT)

    assert new.real_width == pytest.approx(DEFAULT_VIEWPORT.real_width * scale_factor, rel=1e-9)
    assert new.imaginary_width == pytest.approx(DEFAULT_VIEWPORT.imaginary_width * scale_factor, rel=1e-9)
    assert new.center.real == pytest.approx(target.real, rel=1e-9, abs=1e-12)
    assert new.center.imaginary == pytest.approx(target.imaginary, rel=1e-9, abs=1e-12)


def test_center_click_is_pure_scale_down():
    width, height = 80, 40
    new = zoom((width // 2, height // 2), width, height, DEFAULT_VIEWPORT, 0.5)
    assert new.real_width == pytest.approx(1.5)
    assert new.imaginary_width == pytest.approx(1.0)
    assert new.center.real == pytest.approx(DEFAULT_VIEWPORT.center.real)
    assert new.center.imaginary == pytest.approx(DEFAULT_VIEWPORT.center.imaginary)


def test_edge_click_extends_past_old_bounds():
    new = zoom((0, 0), 100, 100, DEFAULT_VIEWPORT, 0.5)
    assert new == Viewport(-2.75, -1.25, -1.5, -0.5)
    assert new.real_start < DEFAULT_VIEWPORT.real_start
    assert new.imaginary_start < DEFAULT_VIEWPORT.imaginary_start


@pytest.mark.parametrize("scale_factor", [0.0, 1.0, -0.5, 2.0])
def test_scale_factor_must_shrink(scale_factor):
    with pytest.raises(ValueError):
        zoom((1, 1), 10, 10, DEFAULT_VIEWPORT, scale_factor)
    with pytest.raises(ValueError):
        ZoomPlanner(10, 10, scale_factor)


def test_zoom_rejects_empty_raster():
    with pytest.raises(ValueError):
        zoom((0, 0), 0, 10, DEFAULT_VIEWPORT)


def test_planner_replays_clicks_in_order():
    planner = ZoomPlanner(200, 100, 0.5)
    clicks = [(150, 20), (10, 90), (100, 50)]
    viewports = list(planner.replay(DEFAULT_VIEWPORT, clicks))

    assert len(viewports) == len(clicks) + 1
    assert viewports[0] == DEFAULT_VIEWPORT
    expected = DEFAULT_VIEWPORT
    for click, viewport in zip(clicks, viewports[1:]):
        expected = zoom(click, 200, 100, expected, 0.5)
        assert viewport == expected
    assert viewports[-1].real_width == pytest.approx(DEFAULT_VIEWPORT.real_width / 8)


def test_repeated_zoom_keeps_a_valid_viewport():
    planner = ZoomPlanner(64, 64, 0.5)
    viewport = DEFAULT_VIEWPORT
    for _ in range(30):
        viewport = planner.update_after_click(viewport, (40, 20))
    assert viewport.real_end > viewport.real_start
    assert viewport.imaginary_end > viewport.imaginary_start


def test_parse_click():
    assert parse_click("12,34") == (12, 34)
    assert parse_click(" 5 , 6 ") == (5, 6)
    with pytest.raises(ValueError):
        parse_click("12")
    with pytest.raises(ValueError):
        parse_click("a,b")
