from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chartsmith.api.render import router as render_router
from chartsmith.config.observability import log_error
from chartsmith.config.settings import settings
from chartsmith.schemas.errors import ErrorCode
from chartsmith.services.data_loader import UnsupportedFileType
from chartsmith.services.error_builder import build_error
from chartsmith.services.exceptions import (
    ChartError,
    ColumnNotFoundError,
    ConfigValidationError,
    DatasetTooLargeError,
    RenderError,
    TransformError,
)

app = FastAPI(title="chartsmith rendering API")


def _parse_cors_origins(value: str) -> tuple[list[str], bool]:
    raw = (value or "").strip()
    if raw == "*":
        # Credentials are not compatible with wildcard origins.
        return ["*"], False
    return [o.strip() for o in raw.split(",") if o.strip()], True


origins, allow_credentials = _parse_cors_origins(settings.cors_allow_origins)
if origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(render_router, prefix="/api")


def _error_code(exc: ChartError) -> tuple[str, int]:
    # Order matters: ColumnNotFoundError is both a DataError and a TransformError.
    if isinstance(exc, ConfigValidationError):
        return ErrorCode.VALIDATION_ERROR, status.HTTP_400_BAD_REQUEST
    if isinstance(exc, ColumnNotFoundError):
        return ErrorCode.MISSING_REQUIRED_COLUMNS, status.HTTP_400_BAD_REQUEST
    if isinstance(exc, UnsupportedFileType):
        return ErrorCode.INVALID_FILE_TYPE, status.HTTP_400_BAD_REQUEST
    if isinstance(exc, DatasetTooLargeError):
        return ErrorCode.DATASET_TOO_LARGE, status.HTTP_400_BAD_REQUEST
    if isinstance(exc, TransformError):
        return ErrorCode.TRANSFORM_ERROR, status.HTTP_400_BAD_REQUEST
    if isinstance(exc, RenderError):
        return ErrorCode.RENDER_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR
    return ErrorCode.PAYLOAD_ERROR, status.HTTP_400_BAD_REQUEST


@app.exception_handler(ChartError)
async def chart_error_handler(request: Request, exc: ChartError) -> JSONResponse:
    code, status_code = _error_code(exc)
    details = [exc.column] if isinstance(exc, ColumnNotFoundError) else []
    log_error(code, str(exc), path=request.url.path)
    return JSONResponse(status_code=status_code, content=build_error(code=code, message=str(exc), details=details))


@app.get("/health", tags=["health"])
async def health() -> dict:
    return {"status": "ok"}
