from dataclasses import dataclass
from typing import Dict, List

import pandas as pd

from chartsmith.schemas.chart import ChartConfig, LegendPosition
from chartsmith.services.exceptions import ConfigValidationError
from chartsmith.viz.base import IChartRenderer
from chartsmith.viz.canvas import Region
from chartsmith.viz.cartesian import CartesianPlot
from chartsmith.viz.numeric import cell_label, numeric_or_zero
from chartsmith.viz.series import column
from chartsmith.viz.theme import ChartStyle

MAX_ROWS = 100
LEGEND_LABEL = "Retention %"
CELL_TEXT_COLOR = (255, 255, 255)


@dataclass(frozen=True)
class RetentionMatrix:
    cohorts: List[str]
    periods: List[int]
    # rows[i][j]: retention of cohorts[i] at periods[j], in percent of the cohort's baseline.
    rows: List[List[float]]

    @property
    def max_value(self) -> float:
        return max((value for row in self.rows for value in row), default=0.0)


def build_retention_matrix(frame: pd.DataFrame, cohort_date: str, period_number: str, users: str) -> RetentionMatrix:
    """Cohort x period matrix over the first 100 rows.

    The baseline of a cohort is its first observed period (in sorted period
    order) and reads 100%; a zero or missing baseline makes the whole row 0.
    A repeated (cohort, period) pair keeps the last row's users.
    """
    head = frame.head(MAX_ROWS)
    counts: Dict[str, Dict[int, float]] = {}
    for cohort, period, count in zip(column(head, cohort_date), column(head, period_number), column(head, users)):
        counts.setdefault(cell_label(cohort), {})[int(numeric_or_zero(period))] = numeric_or_zero(count)

    cohorts = sorted(counts)
    periods = sorted({period for by_period in counts.values() for period in by_period})
    rows = []
    for cohort in cohorts:
        by_period = counts[cohort]
        baseline = next((by_period[p] for p in periods if p in by_period), 0.0)
        rows.append([by_period.get(p, 0.0) / baseline * 100 if baseline > 0 else 0.0 for p in periods])
    return RetentionMatrix(cohorts, periods, rows)


class RetentionRenderer(IChartRenderer):
    """Cohort retention grid: cohorts as rows, periods as columns.

    Required columns: cohort_date, period_number, users.
    """

    def validate_requirements(self, config: ChartConfig) -> None:
        for field in ("cohort_date", "period_number", "users"):
            if not getattr(config, field):
                raise ConfigValidationError(f"Retention charts require a '{field}' field", field=field)

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
        matrix = build_retention_matrix(frame, config.cohort_date, config.period_number, config.users)
        max_value = matrix.max_value
        if max_value == 0:
            return

        n_cohorts, n_periods = len(matrix.cohorts), len(matrix.periods)
        plot = CartesianPlot(
            region,
            style,
            title,
            x_range=(0.0, float(n_periods)),
            y_range=(0.0, float(n_cohorts)),
            x_desc="Period",
            y_desc="Cohort",
            x_labels=[str(p) for p in matrix.periods],
            y_labels=matrix.cohorts,
        )
        start, end = style.heatmap.intensity_range
        for row_index, row in enumerate(matrix.rows):
            # First cohort on the top row.
            top, bottom = plot.y(n_cohorts - row_index), plot.y(n_cohorts - row_index - 1)
            for period_index, pct in enumerate(row):
                base = start + pct / max_value * (end - start)
                color = (int(base), int(base * 0.8), int(base * 0.6))
                left, right = plot.x(period_index), plot.x(period_index + 1)
                plot.area.rect(left, top, right, bottom, color)
                if config.percentage:
                    plot.area.text(
                        (left + right) / 2,
                        (top + bottom) / 2,
                        f"{pct:.0f}%",
                        style.typography.sizes.legend,
                        CELL_TEXT_COLOR,
                        align="center",
                        baseline="middle",
                    )

    def legend_items(self, frame: pd.DataFrame, config: ChartConfig) -> List[str]:
        return [LEGEND_LABEL]
