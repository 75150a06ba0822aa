from typing import List, Optional

from chartsmith.schemas.errors import ErrorResponse


def build_error(
    code: str,
    message: str,
    details: Optional[List[str]] = None,
    supported_chart_types: Optional[List[str]] = None,
) -> dict:
    return ErrorResponse(
        code=code,
        message=message,
        details=details or [],
        supported_chart_types=supported_chart_types,
    ).model_dump()
