import pytest

from chartsmith.schemas.chart import LegendPosition
from chartsmith.viz.canvas import Canvas, Rect, Text
from chartsmith.viz.layout import draw_legend, split, truncate_label
from chartsmith.viz.theme import resolve_style


def _root(width=1000, height=600):
    return Canvas(width, height).root()


@pytest.mark.parametrize(
    "position, chart_box, legend_box",
    [
        (LegendPosition.RIGHT, (0, 0, 750, 600), (750, 0, 250, 600)),
        (LegendPosition.LEFT, (250, 0, 750, 600), (0, 0, 250, 600)),
        (LegendPosition.TOP, (0, 90, 1000, 510), (0, 0, 1000, 90)),
        (LegendPosition.BOTTOM, (0, 0, 1000, 510), (0, 510, 1000, 90)),
    ],
)
def test_split(position, chart_box, legend_box):
    chart, legend = split(_root(), position)
    assert (chart.x, chart.y, chart.width, chart.height) == chart_box
    assert (legend.x, legend.y, legend.width, legend.height) == legend_box


def test_truncate_label():
    # (200 - 60) // 8 = 17 characters fit.
    assert truncate_label("short", 200) == "short"
    assert truncate_label("a" * 30, 200) == "a" * 14 + "..."
    # Too narrow to truncate meaningfully: left as is.
    assert truncate_label("a" * 30, 120) == "a" * 30


def test_draw_legend_rows():
    canvas = Canvas(1000, 600)
    _, legend = split(canvas.root(), LegendPosition.RIGHT)
    style = resolve_style()
    draw_legend(legend, ["first", "second"], style)

    background, swatch1, text1, swatch2, text2 = canvas.primitives
    assert isinstance(background, Rect)
    assert swatch1 == Rect(765, 30, 785, 45, "#1f77b4")
    assert isinstance(text1, Text) and (text1.x, text1.y, text1.text) == (795, 42, "first")
    assert (swatch2.y0, text2.y) == (65, 77)
    assert swatch2.color == "#ff7f0e"
