from typing import Sequence, Tuple

from chartsmith.schemas.chart import LegendPosition
from chartsmith.viz.canvas import Region
from chartsmith.viz.theme import ChartStyle

SIDE_LEGEND_PERCENT = 25
BAND_LEGEND_PERCENT = 15
LEGEND_FIRST_ROW = 30
LEGEND_ROW_STEP = 35
CHAR_WIDTH = 8


def split(region: Region, legend_position: LegendPosition) -> Tuple[Region, Region]:
    """Return ``(chart_region, legend_region)``."""
    if legend_position in (LegendPosition.RIGHT, LegendPosition.LEFT):
        legend_width = region.width * SIDE_LEGEND_PERCENT // 100
        chart_width = region.width - legend_width
        if legend_position == LegendPosition.RIGHT:
            return region.sub(0, 0, chart_width, region.height), region.sub(chart_width, 0, legend_width, region.height)
        return region.sub(legend_width, 0, chart_width, region.height), region.sub(0, 0, legend_width, region.height)

    legend_height = region.height * BAND_LEGEND_PERCENT // 100
    chart_height = region.height - legend_height
    if legend_position == LegendPosition.BOTTOM:
        return region.sub(0, 0, region.width, chart_height), region.sub(0, chart_height, region.width, legend_height)
    return region.sub(0, legend_height, region.width, chart_height), region.sub(0, 0, region.width, legend_height)


def truncate_label(text: str, legend_width: int) -> str:
    max_chars = (legend_width - 60) // CHAR_WIDTH
    if len(text) > max_chars and max_chars > 10:
        return text[: max_chars - 3] + "..."
    return text


def draw_legend(region: Region, items: Sequence[str], style: ChartStyle) -> None:
    """Background, then one swatch + label row per item, colored by item index."""
    region.fill(style.colors.background.chart)
    y = LEGEND_FIRST_ROW
    for index, label in enumerate(items):
        region.rect(15, y, 35, y + 15, style.primary_color(index))
        region.text(
            45,
            y + 12,
            truncate_label(label, region.width),
            style.typography.sizes.legend,
            style.colors.text.axis_labels,
        )
        y += LEGEND_ROW_STEP
