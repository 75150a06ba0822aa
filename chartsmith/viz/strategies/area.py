from typing import List

import pandas as pd

from chartsmith.schemas.chart import ChartConfig, LegendPosition
from chartsmith.viz.base import IChartRenderer
from chartsmith.viz.canvas import Region
from chartsmith.viz.cartesian import CartesianPlot
from chartsmith.viz.series import label_column, padded_range, series_values
from chartsmith.viz.theme import ChartStyle

MAX_POINTS = 100
FILL_ALPHA = 0.3


class AreaRenderer(IChartRenderer):
    """Filled line over the row index, first 100 rows.

    Required columns: x (or group_by), y.
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
        values = series_values(frame, config, limit=MAX_POINTS)
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
        base = plot.y(0.0)
        points = [(plot.x(i), plot.y(v)) for i, v in enumerate(values)]
        for (x1, y1), (x2, y2) in zip(points, points[1:]):
            plot.area.band(x1, x2, y1, y2, base, color, FILL_ALPHA)
        plot.area.polyline(points, color, style.layout.elements.line_width)

    def legend_items(self, frame: pd.DataFrame, config: ChartConfig) -> List[str]:
        return [config.y or ""]
