import json
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from chartsmith.config.observability import log_event
from chartsmith.schemas.chart import ChartSpec
from chartsmith.services.exceptions import ConfigValidationError, DataError


def _read_document(path: Path) -> Dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DataError(f"Failed to read spec file {path}: {exc}") from exc

    try:
        if path.suffix.lower() == ".json":
            payload = json.loads(raw)
        else:
            payload = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DataError(f"Failed to parse spec file {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigValidationError(f"Spec file {path} must contain a mapping with a 'charts' list")
    return payload


def parse_spec(payload: Dict[str, Any]) -> ChartSpec:
    try:
        return ChartSpec.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        message = first["msg"].removeprefix("Value error, ")
        raise ConfigValidationError(f"Invalid chart specification at '{location}': {message}", field=location) from exc


def load_spec(path: Path) -> ChartSpec:
    """Read a YAML (or ``.json``) chart specification document.

    Per-chart rules (required fields, bounds, filters) are checked later, chart
    by chart, so one bad entry does not block the rest of a batch.
    """
    path = Path(path)
    spec = parse_spec(_read_document(path))
    log_event("spec_loaded", path=str(path), charts=len(spec.charts))
    return spec
