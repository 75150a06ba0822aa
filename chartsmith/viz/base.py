from abc import ABC, abstractmethod
from typing import List

import pandas as pd

from chartsmith.schemas.chart import ChartConfig, LegendPosition
from chartsmith.viz.canvas import Region
from chartsmith.viz.theme import ChartStyle


class IChartRenderer(ABC):
    """Draws one chart type from an already transformed data frame.

    frame: output of the transform pipeline
    config: the chart's configuration
    region: the chart half of the canvas (the legend is drawn separately)

    To add a new chart: create a renderer class in chartsmith/viz/strategies/, implement
    the three methods, and register it for its ChartType in chartsmith/viz/__init__.py.
    """

    def validate_requirements(self, config: ChartConfig) -> None:
        """Raise ConfigValidationError when the config lacks fields this renderer needs."""

    @abstractmethod
    def render(
        self,
        frame: pd.DataFrame,
        config: ChartConfig,
        region: Region,
        style: ChartStyle,
        title: str,
        legend_position: LegendPosition,
    ) -> None:
        ...

    @abstractmethod
    def legend_items(self, frame: pd.DataFrame, config: ChartConfig) -> List[str]:
        ...
