"""Helpers shared by the single-series renderers (line, area, bar)."""
from typing import List, Optional, Tuple

import pandas as pd

from chartsmith.schemas.chart import ChartConfig
from chartsmith.services.exceptions import ColumnNotFoundError
from chartsmith.viz.numeric import cell_label, numeric_or_zero


def column(frame: pd.DataFrame, name: Optional[str]) -> pd.Series:
    if name is None or name not in frame.columns:
        raise ColumnNotFoundError(str(name), [str(c) for c in frame.columns])
    return frame[name]


def label_column(config: ChartConfig) -> str:
    """The grouped variants label the x axis with the group column instead of x."""
    return config.group_by or config.x or ""


def series_values(frame: pd.DataFrame, config: ChartConfig, limit: Optional[int] = None) -> List[float]:
    # The label column is looked up for its existence only; rows are positioned by index.
    column(frame, label_column(config))
    values = column(frame, config.y)
    if limit is not None:
        values = values.head(limit)
    return [numeric_or_zero(value) for value in values]


def series_labels(frame: pd.DataFrame, config: ChartConfig, limit: int) -> List[str]:
    return [cell_label(value) for value in column(frame, label_column(config)).head(limit)]


def padded_range(values: List[float]) -> Tuple[float, float]:
    """``0 .. max * 1.1``, with a unit span when nothing is above zero."""
    upper = max(values, default=0.0) * 1.1
    return 0.0, upper if upper > 0 else 1.0
