from typing import List, Optional

from pydantic import BaseModel, Field


class ErrorCode:
    INVALID_CHART_TYPE = "invalid_chart_type"
    VALIDATION_ERROR = "validation_error"
    MISSING_REQUIRED_COLUMNS = "missing_required_columns"
    INVALID_FILE_TYPE = "invalid_file_type"
    PAYLOAD_ERROR = "payload_error"
    DATASET_TOO_LARGE = "dataset_too_large"
    TRANSFORM_ERROR = "transform_error"
    RENDER_ERROR = "render_error"


class ErrorResponse(BaseModel):
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable description")
    details: Optional[List[str]] = Field(default=None, description="Specific field issues")
    supported_chart_types: Optional[List[str]] = Field(
        default=None, description="Available chart types when an invalid chart type is provided"
    )
