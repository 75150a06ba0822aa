import json
from typing import Optional, Sequence


class ChartError(Exception):
    """Base class for every failure raised while turning a chart config into an image."""


class ConfigValidationError(ChartError, ValueError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class DataError(ChartError):
    pass


class TransformError(ChartError):
    pass


class RenderError(ChartError):
    pass


class UnsupportedExpressionError(TransformError):
    def __init__(self, expression: str, reason: Optional[str] = None):
        message = f"Unsupported derive expression: {expression}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.expression = expression


class ColumnNotFoundError(DataError, TransformError):
    def __init__(self, column: str, available: Sequence[str], suggestion: Optional[str] = None):
        message = f"Column '{column}' not found. Available columns: {json.dumps([str(c) for c in available], ensure_ascii=False)}"
        if suggestion:
            message = f"{message}\nDid you mean '{suggestion}'?"
        super().__init__(message)
        self.column = column
        self.available = list(available)
        self.suggestion = suggestion


class DatasetTooLargeError(DataError, ValueError):
    pass
