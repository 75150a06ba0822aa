from typing import List, Tuple

import pandas as pd

from chartsmith.schemas.chart import ChartConfig, LegendPosition, ValueLabelPosition
from chartsmith.services.exceptions import ConfigValidationError, RenderError
from chartsmith.services.validators import validate_step_order
from chartsmith.viz.base import IChartRenderer
from chartsmith.viz.canvas import Region
from chartsmith.viz.numeric import numeric_or_zero
from chartsmith.viz.series import column
from chartsmith.viz.theme import ChartStyle

FUNNEL_RATIO = 0.6
TITLE_SPACE = 50
LEFT_LABEL_OFFSET = 120
RIGHT_LABEL_OFFSET = 10


def order_funnel_steps(frame: pd.DataFrame, config: ChartConfig) -> List[Tuple[str, float]]:
    """Pair step ``i`` with row ``i`` of the values column, then order for drawing.

    An explicit ``step_order`` is validated and applied as given; otherwise
    steps are sorted by value, largest first, keeping ties in declaration order.
    """
    values = column(frame, config.values)
    pairs = [(step, numeric_or_zero(values.iloc[i])) for i, step in enumerate((config.steps or [])[: len(frame)])]
    if not pairs:
        return []
    if config.step_order is not None:
        validate_step_order(config.step_order, len(pairs))
        return [pairs[index] for index in config.step_order]
    return sorted(pairs, key=lambda pair: pair[1], reverse=True)


def step_labels(ordered: List[Tuple[str, float]], conversion_rates: bool = False) -> List[str]:
    labels = []
    for index, (step, value) in enumerate(ordered):
        label = f"{step}: {value:.0f}"
        if conversion_rates and index > 0:
            previous = ordered[index - 1][1]
            rate = value / previous * 100 if previous > 0 else 0.0
            label = f"{label} ({rate:.1f}%)"
        labels.append(label)
    return labels


class FunnelRenderer(IChartRenderer):
    """Centred horizontal segments whose widths are proportional to each step's value.

    Required config: steps (names), values (column). Optional step_order,
    value_labels and conversion_rates.
    """

    def validate_requirements(self, config: ChartConfig) -> None:
        if not config.steps:
            raise ConfigValidationError("Funnel charts require a 'steps' field with step names", field="steps")
        if not config.values:
            raise ConfigValidationError("Funnel charts require a 'values' field for step values", field="values")

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
        ordered = order_funnel_steps(frame, config)
        if not ordered:
            return
        max_value = max(0.0, *(value for _, value in ordered))
        if max_value == 0:
            return

        region.fill(style.colors.background.chart)
        region.text(
            region.width / 2,
            style.layout.margins.chart,
            title,
            style.typography.sizes.title,
            style.colors.text.title,
            align="center",
            baseline="top",
        )

        funnel_width = int(region.width * FUNNEL_RATIO)
        funnel_height = int(region.height * FUNNEL_RATIO)
        start_x = (region.width - funnel_width) // 2
        start_y = (region.height - funnel_height) // 2 + TITLE_SPACE
        segment_height = funnel_height // len(ordered)
        if segment_height == 0:
            raise RenderError(f"Too many funnel steps ({len(ordered)}) for a {region.height}px tall chart")

        labels = step_labels(ordered, bool(config.conversion_rates))
        on_left = config.value_labels == ValueLabelPosition.LEFT
        for index, ((_, value), label) in enumerate(zip(ordered, labels)):
            top = start_y + index * segment_height
            segment_width = int(funnel_width * (value / max_value))
            left = start_x + (funnel_width - segment_width) // 2
            right = left + segment_width
            region.rect(left, top, right, top + segment_height, style.primary_color(index))

            text_x = left - LEFT_LABEL_OFFSET if on_left else right + RIGHT_LABEL_OFFSET
            text_y = top + segment_height // 2 + 5
            region.text(text_x, text_y, label, style.typography.sizes.axis_labels, style.colors.text.axis_labels)

    def legend_items(self, frame: pd.DataFrame, config: ChartConfig) -> List[str]:
        if not config.steps or not config.values:
            return []
        return [step for step, _ in order_funnel_steps(frame, config)]
