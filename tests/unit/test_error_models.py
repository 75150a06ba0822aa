import pytest

from chartsmith.schemas.errors import ErrorCode, ErrorResponse
from chartsmith.services.error_builder import build_error
from chartsmith.services.exceptions import (
    ChartError,
    ColumnNotFoundError,
    DataError,
    TransformError,
    UnsupportedExpressionError,
)


def test_error_builder_structures_payload():
    payload = build_error(ErrorCode.INVALID_CHART_TYPE, "bad type", ["detail"], ["bar", "line"])
    assert payload["code"] == "invalid_chart_type"
    assert payload["message"] == "bad type"
    assert payload["details"] == ["detail"]
    assert payload["supported_chart_types"] == ["bar", "line"]


def test_error_response_defaults():
    response = ErrorResponse(code="render_error", message="boom")
    assert response.details is None
    assert response.supported_chart_types is None


def test_column_not_found_is_data_and_transform_error():
    exc = ColumnNotFoundError("x", ["a", "b"])
    assert isinstance(exc, DataError)
    assert isinstance(exc, TransformError)
    assert str(exc) == 'Column \'x\' not found. Available columns: ["a", "b"]'


def test_unsupported_expression_message():
    exc = UnsupportedExpressionError("explode(x)", "unknown function 'explode'")
    assert str(exc) == "Unsupported derive expression: explode(x) (unknown function 'explode')"
    assert exc.expression == "explode(x)"
    with pytest.raises(ChartError):
        raise exc
