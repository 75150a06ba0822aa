from itertools import groupby
from pathlib import Path
from typing import Any, Dict, List, Sequence

import altair as alt
import pandas as pd

from chartsmith.config.observability import logger
from chartsmith.schemas.chart import OutputFormat
from chartsmith.services.exceptions import RenderError
from chartsmith.viz.canvas import Band, Canvas, Circle, Polyline, Primitive, Rect, Text


def _group_key(primitive: Primitive) -> Any:
    if isinstance(primitive, Text):
        return (Text, primitive.align, primitive.baseline, primitive.angle)
    return type(primitive)


def _scales(canvas: Canvas) -> Dict[str, alt.Scale]:
    # Identity scales: data values are already pixels, y grows downwards.
    return {
        "x": alt.Scale(domain=[0, canvas.width], range=[0, canvas.width], nice=False, zero=False),
        "y": alt.Scale(domain=[0, canvas.height], range=[0, canvas.height], nice=False, zero=False),
    }


def _rect_layer(items: Sequence[Rect], scales: Dict[str, alt.Scale]) -> alt.Chart:
    df = pd.DataFrame(
        [{"x": r.x0, "x2": r.x1, "y": r.y0, "y2": r.y1, "color": r.color} for r in items]
    )
    return (
        alt.Chart(df)
        .mark_rect()
        .encode(
            x=alt.X("x:Q", scale=scales["x"], axis=None),
            x2="x2:Q",
            y=alt.Y("y:Q", scale=scales["y"], axis=None),
            y2="y2:Q",
            color=alt.Color("color:N", scale=None, legend=None),
        )
    )


def _band_layer(items: Sequence[Band], scales: Dict[str, alt.Scale]) -> alt.Chart:
    rows: List[Dict[str, Any]] = []
    for index, band in enumerate(items):
        rows.append({"id": index, "seq": 0, "x": band.x_left, "y": band.top_left, "y2": band.base, "color": band.color})
        rows.append({"id": index, "seq": 1, "x": band.x_right, "y": band.top_right, "y2": band.base, "color": band.color})
    return (
        alt.Chart(pd.DataFrame(rows))
        .mark_area()
        .encode(
            x=alt.X("x:Q", scale=scales["x"], axis=None),
            y=alt.Y("y:Q", scale=scales["y"], axis=None, stack=None),
            y2="y2:Q",
            color=alt.Color("color:N", scale=None, legend=None),
            detail="id:N",
        )
    )


def _line_layer(items: Sequence[Polyline], scales: Dict[str, alt.Scale]) -> alt.Chart:
    rows: List[Dict[str, Any]] = []
    for index, line in enumerate(items):
        for seq, (px, py) in enumerate(line.points):
            rows.append({"id": index, "seq": seq, "x": px, "y": py, "color": line.color, "width": line.width})
    return (
        alt.Chart(pd.DataFrame(rows))
        .mark_line()
        .encode(
            x=alt.X("x:Q", scale=scales["x"], axis=None),
            y=alt.Y("y:Q", scale=scales["y"], axis=None),
            color=alt.Color("color:N", scale=None, legend=None),
            strokeWidth=alt.StrokeWidth("width:Q", scale=None, legend=None),
            detail="id:N",
            order="seq:Q",
        )
    )


def _circle_layer(items: Sequence[Circle], scales: Dict[str, alt.Scale]) -> alt.Chart:
    # Vega-Lite sizes circles by area in square pixels.
    df = pd.DataFrame(
        [{"x": c.x, "y": c.y, "size": 3.141592653589793 * c.radius**2, "color": c.color} for c in items]
    )
    return (
        alt.Chart(df)
        .mark_circle(opacity=1)
        .encode(
            x=alt.X("x:Q", scale=scales["x"], axis=None),
            y=alt.Y("y:Q", scale=scales["y"], axis=None),
            size=alt.Size("size:Q", scale=None, legend=None),
            color=alt.Color("color:N", scale=None, legend=None),
        )
    )


def _text_layer(items: Sequence[Text], scales: Dict[str, alt.Scale], font: str) -> alt.Chart:
    first = items[0]
    df = pd.DataFrame(
        [{"x": t.x, "y": t.y, "text": t.text, "size": t.size, "color": t.color} for t in items]
    )
    return (
        alt.Chart(df)
        .mark_text(align=first.align, baseline=first.baseline, angle=first.angle % 360, font=font)
        .encode(
            x=alt.X("x:Q", scale=scales["x"], axis=None),
            y=alt.Y("y:Q", scale=scales["y"], axis=None),
            text="text:N",
            size=alt.Size("size:Q", scale=None, legend=None),
            color=alt.Color("color:N", scale=None, legend=None),
        )
    )


def compose(canvas: Canvas) -> alt.LayerChart:
    """Turn the canvas primitives into one Vega-Lite layer per run of same-kind shapes.

    Runs are consecutive, so the painter's order of the canvas is kept.
    """
    if not canvas.primitives:
        raise RenderError("Nothing to draw: the canvas is empty")
    alt.data_transformers.disable_max_rows()
    scales = _scales(canvas)
    layers: List[alt.Chart] = []
    for key, run in groupby(canvas.primitives, key=_group_key):
        items = list(run)
        kind = key[0] if isinstance(key, tuple) else key
        if kind is Rect:
            layers.append(_rect_layer(items, scales))
        elif kind is Band:
            layers.append(_band_layer(items, scales))
        elif kind is Polyline:
            layers.append(_line_layer(items, scales))
        elif kind is Circle:
            layers.append(_circle_layer(items, scales))
        else:
            layers.append(_text_layer(items, scales, canvas.font_family))
    return (
        alt.layer(*layers)
        .properties(
            width=canvas.width,
            height=canvas.height,
            background=canvas.background,
            padding=0,
            autosize=alt.AutoSizeParams(type="none"),
        )
        .configure_view(strokeWidth=0)
    )


def save(canvas: Canvas, output_path: Path, output_format: OutputFormat, scale: float = 1.0) -> None:
    """Encode the canvas to ``output_path``. The scale factor applies to PNG and PDF; SVG is vector."""
    chart = compose(canvas)
    logger.debug(
        "Encoding %d primitives to %s (%s, scale=%s)", len(canvas.primitives), output_path, output_format.value, scale
    )
    try:
        chart.save(str(output_path), format=output_format.value, scale_factor=scale)
    except (ValueError, OSError, RuntimeError) as exc:
        raise RenderError(f"Failed to encode {output_format.value} image to {output_path}: {exc}") from exc
