from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Tuple

import pandas as pd

from chartsmith.schemas.chart import ChartConfig, LegendPosition
from chartsmith.services.exceptions import ConfigValidationError
from chartsmith.viz.base import IChartRenderer
from chartsmith.viz.canvas import Region
from chartsmith.viz.cartesian import CartesianPlot
from chartsmith.viz.numeric import cell_label, numeric_or_zero
from chartsmith.viz.series import column
from chartsmith.viz.theme import ChartStyle

MAX_ROWS = 50
SINGLE_BAR_LABEL = "Total"


@dataclass(frozen=True)
class StackedSeries:
    """Cumulative ``(start, end)`` intervals per category, one per group in ``groups`` order."""

    categories: List[str]
    groups: List[str]
    intervals: Dict[str, List[Tuple[float, float]]]
    grand_max: float


def stack_categories(frame: pd.DataFrame, x: str, group_by: str, y: str) -> StackedSeries:
    """Stack the first 50 rows by category (first-appearance order) and group (sorted).

    Rows repeating a (category, group) pair add up. When ``x`` is not a column
    of the frame every group lands in one single bar.
    """
    head = frame.head(MAX_ROWS)
    groups_column = column(head, group_by)
    values = column(head, y)
    if x in head.columns:
        category_cells = [cell_label(value) for value in head[x]]
    else:
        category_cells = [SINGLE_BAR_LABEL] * len(head)

    totals: Dict[Tuple[str, str], float] = defaultdict(float)
    categories: List[str] = []
    for category, group, value in zip(category_cells, groups_column, values):
        if category not in categories:
            categories.append(category)
        totals[(category, cell_label(group))] += numeric_or_zero(value)

    groups = sorted({cell_label(group) for group in groups_column})
    intervals: Dict[str, List[Tuple[float, float]]] = {}
    grand_max = 0.0
    for category in categories:
        running = 0.0
        stack = []
        for group in groups:
            value = totals.get((category, group), 0.0)
            stack.append((running, running + value))
            running += value
        intervals[category] = stack
        grand_max = max(grand_max, running)
    return StackedSeries(categories, groups, intervals, grand_max)


class BarStackedRenderer(IChartRenderer):
    """Stacked bars: one bar per x category, one colored segment per group.

    Required columns: x, y, group_by.
    """

    def validate_requirements(self, config: ChartConfig) -> None:
        if not config.group_by:
            raise ConfigValidationError("Stacked bar charts require a 'group_by' field", field="group_by")

    def render(
        self,
        frame: pd.DataFrame,
        config: ChartConfig,
        region: Region,
        style: ChartStyle,
        title: str,
        legend_position: LegendPosition,
    ) -> None:
        self.validate_requirements(config)
        series = stack_categories(frame, config.x or "", config.group_by, config.y or "")
        if series.grand_max == 0:
            return

        plot = CartesianPlot(
            region,
            style,
            title,
            x_range=(0.0, float(len(series.categories))),
            y_range=(0.0, series.grand_max * 1.1),
            x_desc=config.x or "",
            y_desc=config.y or "",
            x_labels=series.categories,
        )
        spacing = style.layout.elements.bar_spacing
        for group_index in range(len(series.groups)):
            color = style.primary_color(group_index)
            for category_index, category in enumerate(series.categories):
                start, end = series.intervals[category][group_index]
                if end == start:
                    continue
                left = category_index + (1 - spacing) / 2
                plot.area.rect(plot.x(left), plot.y(start), plot.x(left + spacing), plot.y(end), color)

    def legend_items(self, frame: pd.DataFrame, config: ChartConfig) -> List[str]:
        if not config.group_by or config.group_by not in frame.columns:
            return []
        return sorted({cell_label(group) for group in frame[config.group_by].head(MAX_ROWS)})
