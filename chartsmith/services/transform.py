from typing import Iterable, List

import pandas as pd

from chartsmith.config.observability import logger
from chartsmith.schemas.chart import AggregationType, ChartConfig, FilterConfig, FilterValue, SortConfig
from chartsmith.services.derive import apply_derived_columns, parse_derivations
from chartsmith.services.exceptions import ColumnNotFoundError

NUMERIC_AGGREGATIONS = {
    AggregationType.SUM: "sum",
    AggregationType.MEAN: "mean",
    AggregationType.MEDIAN: "median",
    AggregationType.MIN: "min",
    AggregationType.MAX: "max",
}


def apply_transforms(df: pd.DataFrame, config: ChartConfig) -> pd.DataFrame:
    """Run filter -> derive -> group/aggregate -> sort -> limit, in that order.

    The input frame is never modified; every step returns a new frame.
    """
    # Parse up front so a bad expression fails before any work is done.
    derivations = parse_derivations(config.derive) if config.derive else {}

    result = df
    if config.filter is not None:
        result = apply_filters(result, config.filter)
    if derivations:
        result = apply_derived_columns(result, derivations)
    if config.group_by and config.agg:
        result = apply_grouping(result, config.group_by, config.agg)
    if config.sort:
        result = apply_sorting(result, config.sort)
    if config.limit is not None:
        result = result.head(config.limit)
    return result.reset_index(drop=True)


def _require_columns(df: pd.DataFrame, columns: Iterable[str]) -> None:
    for column in columns:
        if column not in df.columns:
            raise ColumnNotFoundError(column, [str(c) for c in df.columns])


def cell_text(series: pd.Series) -> pd.Series:
    """Render cells the way filter values are written in a spec document."""
    if pd.api.types.is_datetime64_any_dtype(series):
        stamps = series.dt.tz_localize(None) if series.dt.tz is not None else series
        has_time = ((stamps - stamps.dt.normalize()) != pd.Timedelta(0)).any()
        return stamps.dt.strftime("%Y-%m-%d %H:%M:%S" if has_time else "%Y-%m-%d")
    return series.astype(str)


def _as_list(values: FilterValue) -> List[str]:
    return [values] if isinstance(values, str) else list(values)


def apply_filters(df: pd.DataFrame, filter_config: FilterConfig) -> pd.DataFrame:
    include = filter_config.include or {}
    exclude = filter_config.exclude or {}
    _require_columns(df, list(include) + list(exclude))

    mask = pd.Series(True, index=df.index)
    for column, values in include.items():
        mask &= cell_text(df[column]).isin(_as_list(values))
    for column, values in exclude.items():
        mask &= ~cell_text(df[column]).isin(_as_list(values))

    if filter_config.expression is not None:
        logger.warning("Expression filter not yet implemented, ignoring: %s", filter_config.expression)

    return df[mask]


def apply_grouping(df: pd.DataFrame, group_by: str, agg: AggregationType) -> pd.DataFrame:
    """One row per distinct ``group_by`` value, every other column aggregated.

    Numeric aggregations keep numeric columns only; ``count`` counts the
    non-null cells of every column.
    """
    _require_columns(df, [group_by])
    grouped = df.groupby(group_by, sort=False, dropna=False)
    if agg == AggregationType.COUNT:
        return grouped.count().reset_index()
    return getattr(grouped, NUMERIC_AGGREGATIONS[agg])(numeric_only=True).reset_index()


def apply_sorting(df: pd.DataFrame, sort_configs: List[SortConfig]) -> pd.DataFrame:
    _require_columns(df, [s.column for s in sort_configs])
    return df.sort_values(
        by=[s.column for s in sort_configs],
        ascending=[s.ascending for s in sort_configs],
        kind="mergesort",
    )
