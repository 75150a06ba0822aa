import math
from typing import List, Optional, Sequence, Tuple

from chartsmith.services.exceptions import RenderError
from chartsmith.viz.canvas import Region
from chartsmith.viz.theme import ChartStyle

MAX_LABEL_CHARS = 14


def nice_number(value: float) -> float:
    exponent = math.floor(math.log10(value))
    fraction = value / 10**exponent
    nice = 1 if fraction < 1.5 else 2 if fraction < 3 else 5 if fraction < 7 else 10
    return nice * 10**exponent


def nice_ticks(low: float, high: float, count: int = 5) -> List[float]:
    """Round tick positions inside ``[low, high]``."""
    if high <= low:
        return [low]
    step = nice_number((high - low) / count)
    first = math.ceil(low / step)
    ticks = []
    index = first
    while index * step <= high + step * 1e-9:
        ticks.append(round(index * step, 10))
        index += 1
    return ticks


def format_tick(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value)}"
    return f"{value:.6g}"


def shorten(label: str, limit: int = MAX_LABEL_CHARS) -> str:
    return label if len(label) <= limit else label[: limit - 1] + "…"


class CartesianPlot:
    """Titled plot frame with a mesh, tick labels and axis descriptions.

    Ranges are data coordinates. ``x_labels`` / ``y_labels`` switch an axis to
    categorical mode, where label ``i`` sits at the centre of ``[i, i + 1]``.
    """

    def __init__(
        self,
        region: Region,
        style: ChartStyle,
        caption: Optional[str],
        x_range: Tuple[float, float],
        y_range: Tuple[float, float],
        x_desc: str = "",
        y_desc: str = "",
        x_labels: Optional[Sequence[str]] = None,
        y_labels: Optional[Sequence[str]] = None,
    ) -> None:
        self.style = style
        self.x_range = x_range
        self.y_range = y_range
        self.x_labels = x_labels
        self.y_labels = y_labels

        margin = style.layout.margins.chart
        areas = style.layout.areas
        top = margin
        if caption:
            region.text(
                region.width / 2,
                margin,
                caption,
                style.typography.sizes.title,
                style.colors.text.title,
                align="center",
                baseline="top",
            )
            top += style.typography.sizes.title + margin // 2
        left = margin + areas.y_label_area
        width = region.width - left - margin
        height = region.height - top - areas.x_label_area - margin
        if width <= 0 or height <= 0:
            raise RenderError(f"Chart area is too small to draw: {region.width}x{region.height} pixels")
        self.area = region.sub(left, top, width, height)
        self._draw_frame(x_desc, y_desc)

    def x(self, value: float) -> float:
        low, high = self.x_range
        span = high - low or 1.0
        return (value - low) / span * self.area.width

    def y(self, value: float) -> float:
        low, high = self.y_range
        span = high - low or 1.0
        return self.area.height - (value - low) / span * self.area.height

    def _draw_frame(self, x_desc: str, y_desc: str) -> None:
        area = self.area
        colors = self.style.colors.text
        sizes = self.style.typography.sizes
        pad = self.style.spacing.text_padding

        if self.y_labels is None:
            for tick in nice_ticks(*self.y_range):
                py = self.y(tick)
                area.polyline([(0, py), (area.width, py)], colors.grid, 1)
                area.text(-pad, py, format_tick(tick), sizes.axis_labels, colors.axis_labels, "right", "middle")
        else:
            for index, label in enumerate(self.y_labels):
                py = self.y(len(self.y_labels) - index - 0.5)
                area.text(-pad, py, shorten(label), sizes.axis_labels, colors.axis_labels, "right", "middle")

        if self.x_labels is None:
            for tick in nice_ticks(*self.x_range):
                px = self.x(tick)
                area.polyline([(px, 0), (px, area.height)], colors.grid, 1)
                area.text(px, area.height + pad, format_tick(tick), sizes.axis_labels, colors.axis_labels, "center", "top")
        else:
            count = len(self.x_labels)
            # Thin out labels so neighbours do not run into each other.
            step = max(1, math.ceil(count * 60 / max(1, area.width)))
            for index in range(0, count, step):
                px = self.x(index + 0.5)
                label = shorten(self.x_labels[index])
                area.text(px, area.height + pad, label, sizes.axis_labels, colors.axis_labels, "center", "top")

        area.polyline([(0, 0), (0, area.height), (area.width, area.height)], colors.axis_labels, 1)

        if x_desc:
            area.text(
                area.width / 2,
                area.height + self.style.layout.areas.x_label_area - pad,
                x_desc,
                sizes.axis_description,
                colors.axis_labels,
                "center",
                "bottom",
            )
        if y_desc:
            area.text(
                -self.style.layout.areas.y_label_area + pad,
                area.height / 2,
                y_desc,
                sizes.axis_description,
                colors.axis_labels,
                "center",
                "top",
                angle=270,
            )
