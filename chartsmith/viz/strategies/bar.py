from typing import List

import pandas as pd

from chartsmith.schemas.chart import ChartConfig, LegendPosition
from chartsmith.viz.base import IChartRenderer
from chartsmith.viz.canvas import Region
from chartsmith.viz.cartesian import CartesianPlot
from chartsmith.viz.series import label_column, padded_range, series_labels, series_values
from chartsmith.viz.theme import ChartStyle

MAX_BARS = 20


class BarRenderer(IChartRenderer):
    """One bar per row (first 20 rows), colored by position.

    Required columns: x (or group_by, which supplies the category labels), y.
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
        values = series_values(frame, config, limit=MAX_BARS)
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
            x_labels=series_labels(frame, config, MAX_BARS),
        )
        base = plot.y(0.0)
        for index, value in enumerate(values):
            plot.area.rect(plot.x(index), base, plot.x(index + 1), plot.y(value), style.primary_color(index))

    def legend_items(self, frame: pd.DataFrame, config: ChartConfig) -> List[str]:
        return [config.y or ""]
