import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import typer

from chartsmith.config.observability import logger, set_verbosity
from chartsmith.config.settings import settings
from chartsmith.schemas.chart import (
    AggregationType,
    ChartConfig,
    ChartType,
    ColorMap,
    FilterConfig,
    OutputFormat,
    Theme,
    ValueLabelPosition,
)
from chartsmith.services.exceptions import ChartError, ConfigValidationError
from chartsmith.services.render_service import process_single_chart, render_batch
from chartsmith.services.spec_loader import load_spec

app = typer.Typer(
    name="chartsmith",
    help="Turn CSV data into PNG, SVG or PDF charts.",
    add_completion=False,
)

# Presentation options shared by every subcommand, set by the callback.
state: Dict[str, Any] = {"theme": None, "scale": None, "format": None}

# A bare column name, then = or !=, then the value(s). Anything else is an expression.
FILTER_PATTERN = re.compile(r"^\s*([^=!<>]+?)\s*(!=|=)\s*([^=].*)$")

StepOrderResolver = Callable[[List[str]], List[int]]


def prompt_step_order(steps: List[str]) -> List[int]:
    """Ask on stdin for the drawing order of the funnel steps; empty keeps declaration order."""
    typer.echo("Funnel steps:")
    for index, step in enumerate(steps):
        typer.echo(f"  {index}: {step}")
    answer = typer.prompt(
        "Step order (comma-separated indices, empty for declaration order)", default="", show_default=False
    )
    if not answer.strip():
        return list(range(len(steps)))
    return parse_step_order(answer)


# Swapped out by callers (and tests) that cannot prompt.
step_order_resolver: StepOrderResolver = prompt_step_order


def parse_step_order(text: str) -> List[int]:
    try:
        return [int(part.strip()) for part in text.split(",") if part.strip()]
    except ValueError as exc:
        raise ConfigValidationError(f"Invalid step order '{text}': expected comma-separated indices", field="step_order") from exc


def _split_values(raw: str) -> Any:
    values = [value.strip() for value in raw.split("|")]
    return values[0] if len(values) == 1 else values


def parse_filters(filters: Optional[List[str]]) -> Optional[FilterConfig]:
    """``col=a|b`` includes, ``col!=a|b`` excludes, anything else is kept as a free-text expression."""
    if not filters:
        return None
    include: Dict[str, Any] = {}
    exclude: Dict[str, Any] = {}
    expressions: List[str] = []
    for text in filters:
        match = FILTER_PATTERN.match(text)
        if match is None:
            expressions.append(text)
            continue
        column, operator, raw = match.groups()
        target = exclude if operator == "!=" else include
        target[column] = _split_values(raw)
    return FilterConfig(
        include=include or None,
        exclude=exclude or None,
        expression=" and ".join(expressions) if expressions else None,
    )


def _fail(message: str) -> None:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _render_single(chart_type: ChartType, input_path: Path, out: Optional[Path], **fields: Any) -> None:
    try:
        config = ChartConfig(
            chart_type=chart_type,
            theme=state["theme"] or Theme.LIGHT,
            format=state["format"] or OutputFormat.PNG,
            scale=state["scale"],
            **fields,
        )
        output = out or Path(f"{input_path.stem}-{chart_type.value}.{config.output_format.value}")
        process_single_chart(input_path, config, output)
    except ChartError as exc:
        _fail(str(exc))
    typer.secho(f"Chart saved to {output}", fg=typer.colors.GREEN)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress all output except errors"),
    theme: Optional[Theme] = typer.Option(None, "--theme", help="Chart theme (default: light)"),
    scale: Optional[float] = typer.Option(None, "--scale", help="Pixel scale factor for PNG/PDF output"),
    output_format: Optional[OutputFormat] = typer.Option(None, "--format", help="Output format (default: png)"),
) -> None:
    set_verbosity(verbose=verbose, quiet=quiet)
    state.update(theme=theme, scale=scale, format=output_format)


@app.command()
def line(
    input_path: Path = typer.Option(..., "--input", "-i", help="Input CSV file"),
    x: str = typer.Option(..., "--x", "-x", help="X-axis column"),
    y: str = typer.Option(..., "--y", "-y", help="Y-axis column"),
    group: Optional[str] = typer.Option(None, "--group", "-g", help="Group by column"),
    agg: AggregationType = typer.Option(AggregationType.SUM, "--agg", "-a", help="Aggregation applied per group"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f", help="col=a|b, col!=a|b or an expression"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output file"),
    width: int = typer.Option(1400, "--width"),
    height: int = typer.Option(800, "--height"),
) -> None:
    """Line chart for time series data."""
    _render_single(
        ChartType.LINE, input_path, out,
        x=x, y=y, group_by=group, agg=agg, filter=parse_filters(filters), title=title, width=width, height=height,
    )


@app.command()
def area(
    input_path: Path = typer.Option(..., "--input", "-i", help="Input CSV file"),
    x: str = typer.Option(..., "--x", "-x", help="X-axis column"),
    y: str = typer.Option(..., "--y", "-y", help="Y-axis column"),
    group: Optional[str] = typer.Option(None, "--group", "-g", help="Group by column"),
    agg: AggregationType = typer.Option(AggregationType.SUM, "--agg", "-a"),
    stacked: bool = typer.Option(False, "--stacked", help="Accepted for compatibility, not used yet"),
    normalize: bool = typer.Option(False, "--normalize", help="Accepted for compatibility, not used yet"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    out: Optional[Path] = typer.Option(None, "--out", "-o"),
    width: int = typer.Option(1400, "--width"),
    height: int = typer.Option(800, "--height"),
) -> None:
    """Area chart for composition over time."""
    _render_single(
        ChartType.AREA, input_path, out,
        x=x, y=y, group_by=group, agg=agg, stacked=stacked, normalize=normalize,
        filter=parse_filters(filters), title=title, width=width, height=height,
    )


@app.command()
def bar(
    input_path: Path = typer.Option(..., "--input", "-i", help="Input CSV file"),
    x: str = typer.Option(..., "--x", "-x", help="Category column"),
    y: str = typer.Option(..., "--y", "-y", help="Value column"),
    group: Optional[str] = typer.Option(None, "--group", "-g"),
    agg: AggregationType = typer.Option(AggregationType.SUM, "--agg", "-a"),
    horizontal: bool = typer.Option(False, "--horizontal", help="Accepted for compatibility, not used yet"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    out: Optional[Path] = typer.Option(None, "--out", "-o"),
    width: int = typer.Option(1400, "--width"),
    height: int = typer.Option(800, "--height"),
) -> None:
    """Bar chart for categorical comparisons."""
    _render_single(
        ChartType.BAR, input_path, out,
        x=x, y=y, group_by=group, agg=agg, horizontal=horizontal,
        filter=parse_filters(filters), title=title, width=width, height=height,
    )


@app.command("bar-stacked")
def bar_stacked(
    input_path: Path = typer.Option(..., "--input", "-i", help="Input CSV file"),
    x: str = typer.Option(..., "--x", "-x", help="Category column"),
    y: str = typer.Option(..., "--y", "-y", help="Value column"),
    group: str = typer.Option(..., "--group", "-g", help="Column whose values become the stacked segments"),
    agg: Optional[AggregationType] = typer.Option(None, "--agg", "-a", help="Collapse rows per group first"),
    normalize: bool = typer.Option(False, "--normalize", help="Accepted for compatibility, not used yet"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    out: Optional[Path] = typer.Option(None, "--out", "-o"),
    width: int = typer.Option(1400, "--width"),
    height: int = typer.Option(800, "--height"),
) -> None:
    """Stacked bar chart for composition analysis."""
    _render_single(
        ChartType.BAR_STACKED, input_path, out,
        x=x, y=y, group_by=group, agg=agg, normalize=normalize,
        filter=parse_filters(filters), title=title, width=width, height=height,
    )


@app.command()
def heatmap(
    input_path: Path = typer.Option(..., "--input", "-i", help="Input CSV file"),
    x: str = typer.Option(..., "--x", "-x"),
    y: str = typer.Option(..., "--y", "-y"),
    z: str = typer.Option(..., "--z", "-z", help="Color intensity column"),
    bins: Optional[int] = typer.Option(None, "--bins", help="Quantise intensity into this many levels"),
    colormap: Optional[ColorMap] = typer.Option(None, "--colormap"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    out: Optional[Path] = typer.Option(None, "--out", "-o"),
    width: int = typer.Option(1400, "--width"),
    height: int = typer.Option(800, "--height"),
) -> None:
    """Heatmap for 2D data."""
    _render_single(
        ChartType.HEATMAP, input_path, out,
        x=x, y=y, z=z, bins=bins, colormap=colormap,
        filter=parse_filters(filters), title=title, width=width, height=height,
    )


@app.command()
def scatter(
    input_path: Path = typer.Option(..., "--input", "-i", help="Input CSV file"),
    x: str = typer.Option(..., "--x", "-x"),
    y: str = typer.Option(..., "--y", "-y"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    out: Optional[Path] = typer.Option(None, "--out", "-o"),
    width: int = typer.Option(1400, "--width"),
    height: int = typer.Option(800, "--height"),
) -> None:
    """Scatter plot for correlation analysis."""
    _render_single(
        ChartType.SCATTER, input_path, out,
        x=x, y=y, filter=parse_filters(filters), title=title, width=width, height=height,
    )


@app.command()
def funnel(
    input_path: Path = typer.Option(..., "--input", "-i", help="Input CSV file"),
    steps: str = typer.Option(..., "--steps", "-s", help="Comma-separated step names"),
    values: str = typer.Option(..., "--values", help="Value column, one row per step"),
    step_order: Optional[str] = typer.Option(None, "--step-order", help="Comma-separated indices, e.g. 0,2,1"),
    value_labels: ValueLabelPosition = typer.Option(ValueLabelPosition.RIGHT, "--value-labels"),
    conversion_rates: bool = typer.Option(False, "--conversion-rates", help="Show step-to-step conversion"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    out: Optional[Path] = typer.Option(None, "--out", "-o"),
    width: int = typer.Option(1400, "--width"),
    height: int = typer.Option(800, "--height"),
) -> None:
    """Funnel chart for conversion analysis."""
    step_names = [step.strip() for step in steps.split(",") if step.strip()]
    if not step_names:
        _fail("No steps provided")
    try:
        order = parse_step_order(step_order) if step_order else step_order_resolver(step_names)
    except ChartError as exc:
        _fail(str(exc))
    _render_single(
        ChartType.FUNNEL, input_path, out,
        steps=step_names, step_order=order, values=values, value_labels=value_labels,
        conversion_rates=conversion_rates, title=title, width=width, height=height,
    )


@app.command()
def retention(
    input_path: Path = typer.Option(..., "--input", "-i", help="Input CSV file"),
    cohort_date: str = typer.Option(..., "--cohort-date", help="Cohort column"),
    period_number: str = typer.Option(..., "--period-number", help="Period column (0, 1, 2, ...)"),
    users: str = typer.Option(..., "--users", "-u", help="Active users column"),
    percentage: bool = typer.Option(False, "--percentage", help="Print the percentage in every cell"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    out: Optional[Path] = typer.Option(None, "--out", "-o"),
    width: int = typer.Option(1400, "--width"),
    height: int = typer.Option(800, "--height"),
) -> None:
    """Retention matrix for cohort analysis."""
    _render_single(
        ChartType.RETENTION, input_path, out,
        cohort_date=cohort_date, period_number=period_number, users=users, percentage=percentage,
        title=title, width=width, height=height,
    )


@app.command()
def render(
    spec: Path = typer.Option(..., "--spec", "-s", help="YAML or JSON chart specification"),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help="Data file used when a chart names none"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output directory"),
    parallel: Optional[int] = typer.Option(None, "--parallel", "-p", help="Accepted for compatibility, not used yet"),
) -> None:
    """Batch render every chart of a specification file."""
    if parallel:
        logger.info("--parallel %d ignored, charts render sequentially", parallel)
    try:
        chart_spec = load_spec(spec)
    except ChartError as exc:
        _fail(str(exc))

    overrides = {key: value for key, value in state.items() if value is not None}
    if overrides:
        chart_spec = chart_spec.model_copy(
            update={
                "charts": [
                    chart.model_copy(update={k: v for k, v in overrides.items() if getattr(chart, k) is None})
                    for chart in chart_spec.charts
                ]
            }
        )

    output_dir = out or settings.output_dir
    result = render_batch(chart_spec, output_dir, data)
    typer.echo(f"Rendered {result.successful} chart(s) to {output_dir}, {result.failed} failed")
    if not result.ok:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
