import re
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import pandas as pd

from chartsmith.config.observability import log_error, log_event, logger, timed
from chartsmith.config.settings import settings
from chartsmith.schemas.chart import ChartConfig, ChartSpec, LegendPosition
from chartsmith.services import data_loader
from chartsmith.services.exceptions import ChartError, ConfigValidationError, DataError, RenderError, TransformError
from chartsmith.services.transform import apply_transforms
from chartsmith.services.validators import required_columns, validate
from chartsmith.viz import backend, layout
from chartsmith.viz.canvas import Canvas
from chartsmith.viz.registry import factory
from chartsmith.viz.theme import resolve_style, to_css
import chartsmith.viz  # noqa: F401 ensures default renderers registered

SLUG_PATTERN = re.compile(r"[^\w-]")


@dataclass
class BatchResult:
    successful: int = 0
    failed: int = 0
    outputs: List[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0


def slugify(text: str) -> str:
    return SLUG_PATTERN.sub("-", text.lower())


def generate_output_filename(config: ChartConfig, index: int) -> str:
    """``{slug(title or chart_N)}-{TypeName}.{ext}``, N counting from 1."""
    stem = slugify(config.title or f"chart_{index + 1}")
    return f"{stem}-{config.chart_type.display_name}.{config.output_format.value}"


def render_chart(frame: pd.DataFrame, config: ChartConfig, output_path: Path) -> Path:
    """Draw an already transformed frame and write the image to ``output_path``."""
    renderer = factory.get(config.chart_type)
    if renderer is None:
        raise RenderError(f"No renderer registered for chart type '{config.chart_type.value}'")

    width = config.width or settings.default_width
    height = config.height or settings.default_height
    style = resolve_style(config.theme)
    legend_position = config.legend_position or LegendPosition.RIGHT

    canvas = Canvas(
        width=width,
        height=height,
        background=to_css(style.colors.background.canvas),
        font_family=style.typography.font_family,
    )
    root = canvas.root()
    root.fill(style.colors.background.canvas)
    chart_region, legend_region = layout.split(root, legend_position)

    renderer.validate_requirements(config)
    with timed(f"render_{config.chart_type.value}"):
        renderer.render(frame, config, chart_region, style, config.display_title, legend_position)
        layout.draw_legend(legend_region, renderer.legend_items(frame, config), style)

    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RenderError(f"Failed to create output directory {output_path.parent}: {exc}") from exc
    with timed("encode_image"):
        backend.save(canvas, output_path, config.output_format, config.scale or 1.0)
    log_event("chart_rendered", chart_type=config.chart_type.value, path=str(output_path))
    return output_path


def process_single_chart(data_path: Path, config: ChartConfig, output_path: Path) -> Path:
    """validate -> load CSV -> check columns -> transform -> render."""
    validate(config)
    try:
        with timed("load_dataset"):
            df = data_loader.load_csv(data_path)
    except DataError as exc:
        raise DataError(f"Failed to load data from {data_path}: {exc}") from exc

    try:
        data_loader.validate_columns(df, required_columns(config))
    except DataError as exc:
        raise DataError(f"Column validation failed for chart '{config.title or 'unnamed'}': {exc}") from exc

    context = f"chart '{config.title or 'unnamed'}' ({data_path})"
    try:
        with timed("apply_transforms"):
            transformed = apply_transforms(df, config)
    except TransformError as exc:
        raise TransformError(f"Transform failed for {context}: {exc}") from exc
    logger.debug("Transformed %d rows into %d for %s", len(df), len(transformed), config.display_title)

    try:
        return render_chart(transformed, config, output_path)
    except ConfigValidationError as exc:
        raise ConfigValidationError(f"Invalid options for {context}: {exc.message}", field=exc.field) from exc
    except ChartError as exc:
        raise RenderError(f"Rendering failed for {context}: {exc}") from exc


def render_batch(spec: ChartSpec, output_dir: Path, data_override: Optional[Path] = None) -> BatchResult:
    """Render every chart of the spec in order, carrying on past individual failures."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    result = BatchResult()

    for index, chart in enumerate(spec.charts):
        title = chart.title or f"chart_{index + 1}"
        output_path = output_dir / generate_output_filename(chart, index)
        try:
            data_path = spec.resolve_data_path(chart, Path(data_override) if data_override is not None else None)
            if data_path is None:
                raise ConfigValidationError(f"No data source specified for chart '{title}'", field="data")
            process_single_chart(Path(data_path), chart, output_path)
        except ChartError as exc:
            result.failed += 1
            log_error("chart_failed", str(exc), title=title)
            continue
        except Exception as exc:
            logger.exception("Unexpected error while rendering %s", title)
            error = RenderError(f"Unexpected error while rendering chart '{title}': {exc}")
            result.failed += 1
            log_error("chart_failed", str(error), title=title)
            continue
        result.successful += 1
        result.outputs.append(output_path)
        logger.info("Generated chart: %s", output_path)

    log_event("batch_complete", successful=result.successful, failed=result.failed)
    return result


def render_upload(data: bytes, filename: Optional[str], config: ChartConfig) -> bytes:
    """Same pipeline as ``process_single_chart`` for an in-memory CSV; returns the encoded image."""
    validate(config)
    with timed("load_upload"):
        df = data_loader.read_bytes_to_df(data, filename)
    data_loader.validate_columns(df, required_columns(config))
    with timed("apply_transforms"):
        transformed = apply_transforms(df, config)
    with tempfile.TemporaryDirectory(prefix="chartsmith-") as tmp:
        output_path = render_chart(transformed, config, Path(tmp) / f"chart.{config.output_format.value}")
        return output_path.read_bytes()
