from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _kebab(name: str) -> str:
    return name.replace("_", "-")


class ChartType(str, Enum):
    LINE = "line"
    AREA = "area"
    BAR = "bar"
    BAR_STACKED = "bar-stacked"
    HEATMAP = "heatmap"
    SCATTER = "scatter"
    FUNNEL = "funnel"
    RETENTION = "retention"

    @property
    def display_name(self) -> str:
        """CamelCase name used in messages and output filenames (``BarStacked``)."""
        return "".join(part.capitalize() for part in self.value.split("-"))


class AggregationType(str, Enum):
    SUM = "sum"
    COUNT = "count"
    MEAN = "mean"
    MEDIAN = "median"
    MIN = "min"
    MAX = "max"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class OutputFormat(str, Enum):
    PNG = "png"
    SVG = "svg"
    PDF = "pdf"


class LegendPosition(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


class ValueLabelPosition(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class ColorMap(str, Enum):
    VIRIDIS = "viridis"
    PLASMA = "plasma"
    BLUES = "blues"
    REDS = "reds"
    GREENS = "greens"


FilterValue = Union[str, List[str]]


class _SpecModel(BaseModel):
    model_config = ConfigDict(alias_generator=_kebab, populate_by_name=True, frozen=True)


class FilterConfig(_SpecModel):
    include: Optional[Dict[str, FilterValue]] = Field(
        default=None, description="Keep rows whose column equals the value (or any listed value)"
    )
    exclude: Optional[Dict[str, FilterValue]] = Field(
        default=None, description="Drop rows whose column equals the value (or any listed value)"
    )
    expression: Optional[str] = Field(
        default=None, description="Free-text expression; accepted but not evaluated"
    )

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _stringify_values(cls, value: Any) -> Any:
        # YAML happily yields ints/bools for filter values; compare on their text form.
        if not isinstance(value, dict):
            return value
        normalized: Dict[str, Any] = {}
        for column, raw in value.items():
            if isinstance(raw, (list, tuple)):
                normalized[str(column)] = [_scalar_text(item) for item in raw]
            else:
                normalized[str(column)] = _scalar_text(raw)
        return normalized


def _scalar_text(value: Any) -> Any:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    return value


class SortConfig(_SpecModel):
    column: str
    ascending: bool = True


class ChartConfig(_SpecModel):
    chart_type: ChartType = Field(..., alias="type", description="Chart kind")
    title: Optional[str] = None
    data: Optional[str] = Field(default=None, description="CSV path or a name from data.sources")

    x: Optional[str] = None
    y: Optional[str] = None
    z: Optional[str] = Field(default=None, description="Heatmap color intensity column")
    group_by: Optional[str] = None
    agg: Optional[AggregationType] = None

    filter: Optional[FilterConfig] = None
    derive: Optional[Dict[str, str]] = Field(
        default=None, description="New column name -> derive expression such as to_week(date)"
    )
    sort: Optional[List[SortConfig]] = None
    limit: Optional[int] = Field(default=None, ge=0)

    width: Optional[int] = None
    height: Optional[int] = None
    theme: Optional[Theme] = None
    format: Optional[OutputFormat] = None
    scale: Optional[float] = None
    legend_position: Optional[LegendPosition] = None

    stacked: Optional[bool] = None
    horizontal: Optional[bool] = None
    normalize: Optional[bool] = None
    bins: Optional[int] = None
    colormap: Optional[ColorMap] = None
    steps: Optional[List[str]] = None
    step_order: Optional[List[int]] = None
    value_labels: Optional[ValueLabelPosition] = None
    values: Optional[str] = None
    conversion_rates: Optional[bool] = None
    cohort_date: Optional[str] = None
    period_number: Optional[str] = None
    users: Optional[str] = None
    percentage: Optional[bool] = None

    @field_validator("data", mode="before")
    @classmethod
    def _path_to_text(cls, value: Any) -> Any:
        if isinstance(value, Path):
            return str(value)
        return value

    @property
    def display_title(self) -> str:
        return self.title or "Chart"

    @property
    def output_format(self) -> OutputFormat:
        return self.format or OutputFormat.PNG


class DataConfig(_SpecModel):
    default: Optional[str] = None
    sources: Optional[Dict[str, str]] = None


class ChartSpec(_SpecModel):
    data: Optional[DataConfig] = None
    charts: List[ChartConfig]

    @field_validator("charts")
    @classmethod
    def _at_least_one_chart(cls, charts: List[ChartConfig]) -> List[ChartConfig]:
        if not charts:
            raise ValueError("Chart specification must contain at least one chart")
        return charts

    def resolve_data_path(self, chart: ChartConfig, override: Optional[Path] = None) -> Optional[Path]:
        """Pick the data file for ``chart``: its own ``data`` (or named source), the override, then the default."""
        if chart.data:
            sources = (self.data.sources if self.data else None) or {}
            return Path(sources.get(chart.data, chart.data))
        if override is not None:
            return override
        if self.data and self.data.default:
            return Path(self.data.default)
        return None
