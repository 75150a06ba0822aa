import json
from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from chartsmith.config.observability import log_event
from chartsmith.schemas.chart import ChartConfig, ChartType, OutputFormat
from chartsmith.schemas.errors import ErrorCode
from chartsmith.services import render_service
from chartsmith.services.error_builder import build_error
from chartsmith.viz.registry import factory

router = APIRouter(tags=["render"])

MEDIA_TYPES = {
    OutputFormat.PNG: "image/png",
    OutputFormat.SVG: "image/svg+xml",
    OutputFormat.PDF: "application/pdf",
}


def _bad_request(code: str, message: str, details: Optional[list[str]] = None) -> JSONResponse:
    error = build_error(code=code, message=message, details=details, supported_chart_types=factory.list_keys())
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error)


@router.get("/charts/supported-types", response_model=list[str])
async def supported_types() -> list[str]:
    return factory.list_keys()


@router.post("/render/{chart_type}")
async def render(
    chart_type: str,
    data_file: UploadFile = File(...),
    config: Optional[str] = Form(None),
) -> Response:
    try:
        kind = ChartType(chart_type)
    except ValueError:
        error = build_error(
            code=ErrorCode.INVALID_CHART_TYPE,
            message=f"Unsupported chart type: {chart_type}",
            supported_chart_types=factory.list_keys(),
        )
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=error)

    try:
        payload = json.loads(config) if config else {}
    except json.JSONDecodeError as exc:
        return _bad_request(ErrorCode.PAYLOAD_ERROR, "Invalid JSON payload in config", [str(exc)])
    if not isinstance(payload, dict):
        return _bad_request(ErrorCode.PAYLOAD_ERROR, "Config must be a JSON object")

    try:
        chart = ChartConfig.model_validate({**payload, "type": kind.value})
    except ValidationError as exc:
        details = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
        return _bad_request(ErrorCode.VALIDATION_ERROR, "Invalid chart config", details)

    log_event("render.request_parsed", chart_type=kind.value, filename=data_file.filename)
    content = await data_file.read()
    image = await run_in_threadpool(render_service.render_upload, content, data_file.filename, chart)
    return Response(content=image, media_type=MEDIA_TYPES[chart.output_format])
