from typing import List

import pandas as pd

from chartsmith.schemas.chart import ChartConfig, LegendPosition
from chartsmith.viz.base import IChartRenderer
from chartsmith.viz.canvas import Region
from chartsmith.viz.cartesian import CartesianPlot
from chartsmith.viz.series import label_column, padded_range, series_values
from chartsmith.viz.theme import ChartStyle


class LineRenderer(IChartRenderer):
    """Single line over the row index.

    Required columns: x (or group_by, which labels the axis), y.
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
        values = series_values(frame, config)
        if not values:
            return

        plot = CartesianPlot(
            region,
            style,
            title,
            x_range=(0.0, float(len(values))),
            y_range=padded_range(values),
            x_desc=label_column(config),
            y_desc=config.y or "",
        )
        color = style.primary_color(0)
        points = [(plot.x(i), plot.y(v)) for i, v in enumerate(values)]
        plot.area.polyline(points, color, style.layout.elements.line_width)
        for px, py in points:
            plot.area.circle(px, py, style.layout.elements.line_points, color)

    def legend_items(self, frame: pd.DataFrame, config: ChartConfig) -> List[str]:
        return [config.y or ""]
