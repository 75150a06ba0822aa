from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from chartsmith.schemas.chart import ChartConfig, ChartType, FilterConfig, FilterValue
from chartsmith.services.exceptions import ConfigValidationError, DatasetTooLargeError

MIN_DIMENSION = 100
MAX_DIMENSION = 10000
MAX_SCALE = 10.0
MIN_BINS = 2
MAX_BINS = 100


def validate(config: ChartConfig) -> None:
    """Check a chart config against its type's required fields, numeric bounds and filter rules.

    Rules run in a fixed order and the first violation is raised as a
    ``ConfigValidationError`` naming the offending field.
    """
    _validate_required_fields(config)
    _validate_bounds(config)
    if config.filter is not None:
        _validate_filter(config.filter)


def _validate_required_fields(config: ChartConfig) -> None:
    if config.chart_type == ChartType.HEATMAP:
        if config.z is None:
            raise ConfigValidationError(
                "Heatmap charts require a 'z' field for color intensity values", field="z"
            )
    elif config.chart_type == ChartType.FUNNEL:
        if config.steps is None:
            raise ConfigValidationError("Funnel charts require a 'steps' field with step names", field="steps")
        if config.values is None:
            raise ConfigValidationError("Funnel charts require a 'values' field for step values", field="values")
    elif config.chart_type == ChartType.RETENTION:
        for field in ("cohort_date", "period_number", "users"):
            if getattr(config, field) is None:
                raise ConfigValidationError(f"Retention charts require a '{field}' field", field=field)
    else:
        name = config.chart_type.display_name
        if config.x is None:
            raise ConfigValidationError(f"{name} charts require an 'x' field", field="x")
        if config.y is None:
            raise ConfigValidationError(f"{name} charts require a 'y' field", field="y")


def _validate_bounds(config: ChartConfig) -> None:
    for field in ("width", "height"):
        value = getattr(config, field)
        if value is not None and not MIN_DIMENSION <= value <= MAX_DIMENSION:
            raise ConfigValidationError(
                f"Chart {field} must be between {MIN_DIMENSION} and {MAX_DIMENSION} pixels, got {value}",
                field=field,
            )

    if config.scale is not None and not 0.0 < config.scale <= MAX_SCALE:
        raise ConfigValidationError(
            f"Chart scale must be between 0.1 and {MAX_SCALE}, got {config.scale}", field="scale"
        )

    if config.bins is not None and not MIN_BINS <= config.bins <= MAX_BINS:
        raise ConfigValidationError(
            f"Heatmap bins must be between {MIN_BINS} and {MAX_BINS}, got {config.bins}", field="bins"
        )


def _validate_filter(filter_config: FilterConfig) -> None:
    has_include = bool(filter_config.include)
    has_exclude = bool(filter_config.exclude)
    has_expression = filter_config.expression is not None

    if not (has_include or has_exclude or has_expression):
        raise ConfigValidationError(
            "Filter configuration must have at least one condition (include, exclude, or expression)",
            field="filter",
        )

    for section in ("include", "exclude"):
        entries: Optional[Dict[str, FilterValue]] = getattr(filter_config, section)
        for column, values in (entries or {}).items():
            _validate_filter_entry(section, column, values)

    if filter_config.expression is not None and not filter_config.expression.strip():
        raise ConfigValidationError("Filter expression cannot be empty", field="filter.expression")


def _validate_filter_entry(section: str, column: str, values: FilterValue) -> None:
    field = f"filter.{section}"
    if not column:
        raise ConfigValidationError("Filter column name cannot be empty", field=field)
    if isinstance(values, str):
        if not values:
            raise ConfigValidationError(f"Filter value cannot be empty for column '{column}'", field=field)
        return
    if not values:
        raise ConfigValidationError(f"Filter values list cannot be empty for column '{column}'", field=field)
    for value in values:
        if not value:
            raise ConfigValidationError(f"Filter value cannot be empty for column '{column}'", field=field)


def validate_step_order(step_order: Sequence[int], num_steps: int) -> None:
    if len(step_order) != num_steps:
        raise ConfigValidationError(
            f"Step order length ({len(step_order)}) must match number of steps ({num_steps})",
            field="step_order",
        )
    for index in step_order:
        if index < 0 or index >= num_steps:
            raise ConfigValidationError(
                f"Invalid step order index: {index} (max: {num_steps - 1})", field="step_order"
            )


def required_columns(config: ChartConfig) -> List[str]:
    """Columns the source data must carry before any transform runs (derived columns excluded)."""
    columns: List[str] = []
    for name in (config.x, config.y):
        if name:
            columns.append(name)
    if config.chart_type == ChartType.HEATMAP and config.z:
        columns.append(config.z)
    elif config.chart_type == ChartType.RETENTION:
        columns.extend(c for c in (config.cohort_date, config.period_number, config.users) if c)
    elif config.chart_type == ChartType.FUNNEL and config.values:
        columns.append(config.values)
    if config.group_by:
        columns.append(config.group_by)
    derived = set(config.derive or {})
    return [c for c in columns if c not in derived]


def missing_columns(df: pd.DataFrame, required: Iterable[str]) -> List[str]:
    present = {str(col) for col in df.columns}
    return [col for col in required if str(col) not in present]


def enforce_dimensions(df: pd.DataFrame, max_rows: int, max_columns: int) -> None:
    if len(df.index) > max_rows or len(df.columns) > max_columns:
        raise DatasetTooLargeError(
            f"Dataset too large: rows={len(df.index)}, cols={len(df.columns)}, "
            f"limits rows<={max_rows}, cols<={max_columns}"
        )
