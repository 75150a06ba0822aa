from typing import List, Tuple

import pandas as pd

from chartsmith.schemas.chart import ChartConfig, LegendPosition
from chartsmith.viz.base import IChartRenderer
from chartsmith.viz.canvas import Region
from chartsmith.viz.cartesian import CartesianPlot
from chartsmith.viz.numeric import extract_numeric, numeric_or_zero
from chartsmith.viz.series import column
from chartsmith.viz.theme import ChartStyle

MAX_POINTS = 1000


def padded_span(values: List[float]) -> Tuple[float, float]:
    low, high = min(values), max(values)
    padding = (high - low) * 0.1 or 1.0
    return low - padding, high + padding


def scatter_points(frame: pd.DataFrame, x: str, y: str) -> List[Tuple[float, float]]:
    """First 1000 rows; a non-numeric x falls back to the row index, a non-numeric y to 0."""
    head = frame.head(MAX_POINTS)
    points = []
    for index, (x_value, y_value) in enumerate(zip(column(head, x), column(head, y))):
        px = extract_numeric(x_value)
        points.append((float(index) if px is None else px, numeric_or_zero(y_value)))
    return points


class ScatterRenderer(IChartRenderer):
    """Point cloud of y against x.

    Required columns: x, y.
    """

    def render(
        self,
        frame: pd.DataFrame,
        config: ChartConfig,
        region: Region,
        style: ChartStyle,
        title: str,
        legend_position: LegendPosition,
    ) -> None:
        points = scatter_points(frame, config.x or "", config.y or "")
        if not points:
            return

        plot = CartesianPlot(
            region,
            style,
            title,
            x_range=padded_span([p[0] for p in points]),
            y_range=padded_span([p[1] for p in points]),
            x_desc=config.x or "",
            y_desc=config.y or "",
        )
        color = style.primary_color(0)
        for px, py in points:
            plot.area.circle(plot.x(px), plot.y(py), style.layout.elements.line_points, color)

    def legend_items(self, frame: pd.DataFrame, config: ChartConfig) -> List[str]:
        return [f"{config.y} vs {config.x}"]
