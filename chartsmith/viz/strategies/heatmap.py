from typing import List, Optional

import pandas as pd

from chartsmith.schemas.chart import ChartConfig, ColorMap, LegendPosition
from chartsmith.viz.base import IChartRenderer
from chartsmith.viz.canvas import Region
from chartsmith.viz.cartesian import CartesianPlot
from chartsmith.viz.numeric import cell_label, extract_numeric
from chartsmith.viz.series import column
from chartsmith.viz.strategies.bar import BarRenderer
from chartsmith.viz.theme import COLORMAP_ENDPOINTS, RGB, ChartStyle

MAX_CELLS = 100


def heatmap_intensity(values: List[float], bins: Optional[int] = None) -> List[float]:
    """Normalise to ``[0, 1]`` (0.5 everywhere when all values are equal), optionally in ``bins`` steps."""
    if not values:
        return []
    low, high = min(values), max(values)
    if high > low:
        intensities = [(value - low) / (high - low) for value in values]
    else:
        intensities = [0.5] * len(values)
    if bins and bins > 1:
        intensities = [min(int(i * bins), bins - 1) / (bins - 1) for i in intensities]
    return intensities


def heatmap_color(intensity: float, style: ChartStyle, colormap: Optional[ColorMap] = None) -> RGB:
    if colormap is not None:
        low, high = COLORMAP_ENDPOINTS[colormap]
        return tuple(int(a + (b - a) * intensity) for a, b in zip(low, high))
    start, end = style.heatmap.intensity_range
    base = start + intensity * (end - start)
    return (int(base), min(255, int(base * 1.1)), min(255, int(base * 1.2)))


class HeatmapRenderer(IChartRenderer):
    """Color-coded cells for the first 100 rows with a numeric z, laid out on the diagonal.

    Required columns: x, y, z. Without z the chart is drawn as a bar chart.
    """

    def __init__(self) -> None:
        self._fallback = BarRenderer()

    def render(
        self,
        frame: pd.DataFrame,
        config: ChartConfig,
        region: Region,
        style: ChartStyle,
        title: str,
        legend_position: LegendPosition,
    ) -> None:
        if config.z is None:
            self._fallback.render(frame, config, region, style, title, legend_position)
            return

        head = frame.head(MAX_CELLS)
        x_cells, y_cells, z_cells = column(head, config.x), column(head, config.y), column(head, config.z)
        labels_x: List[str] = []
        labels_y: List[str] = []
        values: List[float] = []
        for x_value, y_value, z_value in zip(x_cells, y_cells, z_cells):
            z = extract_numeric(z_value)
            if z is None:
                continue
            labels_x.append(cell_label(x_value))
            labels_y.append(cell_label(y_value))
            values.append(z)
        if not values:
            return

        count = len(values)
        plot = CartesianPlot(
            region,
            style,
            title,
            x_range=(0.0, float(count)),
            y_range=(0.0, float(count)),
            x_desc=config.x or "",
            y_desc=config.y or "",
            x_labels=labels_x,
            # Row labels read top to bottom while cell i sits i steps up from the origin.
            y_labels=list(reversed(labels_y)),
        )
        for index, intensity in enumerate(heatmap_intensity(values, config.bins)):
            color = heatmap_color(intensity, style, config.colormap)
            plot.area.rect(plot.x(index), plot.y(index), plot.x(index + 1), plot.y(index + 1), color)

    def legend_items(self, frame: pd.DataFrame, config: ChartConfig) -> List[str]:
        return [config.z or config.y or ""]
