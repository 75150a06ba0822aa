import pytest

from chartsmith.services.exceptions import RenderError
from chartsmith.viz.canvas import Canvas, Text
from chartsmith.viz.cartesian import CartesianPlot, format_tick, nice_ticks
from chartsmith.viz.theme import resolve_style


def test_nice_ticks():
    assert nice_ticks(0, 110) == [0, 20, 40, 60, 80, 100]
    assert nice_ticks(0, 1) == [0, 0.2, 0.4, 0.6, 0.8, 1.0]
    assert nice_ticks(5, 5) == [5]


def test_format_tick():
    assert format_tick(20.0) == "20"
    assert format_tick(0.25) == "0.25"


def test_data_to_pixel_mapping():
    canvas = Canvas(800, 600)
    plot = CartesianPlot(canvas.root(), resolve_style(), "Title", x_range=(0, 10), y_range=(0, 100))
    area = plot.area
    assert plot.x(0) == 0
    assert plot.x(10) == pytest.approx(area.width)
    assert plot.y(0) == pytest.approx(area.height)
    assert plot.y(100) == pytest.approx(0)


def test_caption_is_drawn():
    canvas = Canvas(800, 600)
    CartesianPlot(canvas.root(), resolve_style(), "Revenue", x_range=(0, 1), y_range=(0, 1))
    captions = [p for p in canvas.primitives if isinstance(p, Text) and p.text == "Revenue"]
    assert captions and captions[0].size == 36


def test_region_too_small():
    canvas = Canvas(150, 150)
    with pytest.raises(RenderError, match="too small"):
        CartesianPlot(canvas.root(), resolve_style(), "T", x_range=(0, 1), y_range=(0, 1))
