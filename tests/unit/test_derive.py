import pandas as pd
import pytest

from chartsmith.services.derive import (
    DeriveExpression,
    apply_derived_columns,
    parse_derivations,
    parse_derive_expression,
)
from chartsmith.services.exceptions import ColumnNotFoundError, UnsupportedExpressionError


def test_parse_single_argument_call():
    expression = parse_derive_expression(" to_week( created_at ) ")
    assert expression == DeriveExpression(function="to_week", columns=("created_at",))
    assert str(expression) == "to_week(created_at)"


def test_parse_two_argument_call():
    expression = parse_derive_expression("source_medium(source, medium)")
    assert expression.columns == ("source", "medium")


@pytest.mark.parametrize(
    "text",
    ["to_year(date)", "to_week(a, b)", "source_medium(a)", "to_week()", "date + 1", "to_week(to_month(d))"],
)
def test_unsupported_forms(text):
    with pytest.raises(UnsupportedExpressionError, match="Unsupported derive expression"):
        parse_derive_expression(text)


def test_date_functions():
    df = pd.DataFrame({"at": ["2023-03-15 13:45:00", "2023-03-19 08:00:00"]})
    derived = apply_derived_columns(
        df,
        parse_derivations(
            {"week": "to_week(at)", "month": "to_month(at)", "hour": "to_hour(at)", "day": "weekday(at)"}
        ),
    )
    assert derived["week"].tolist() == [pd.Timestamp("2023-03-13"), pd.Timestamp("2023-03-13")]
    assert derived["month"].tolist() == [pd.Timestamp("2023-03-01"), pd.Timestamp("2023-03-01")]
    assert derived["hour"].tolist() == [13, 8]
    assert derived["day"].tolist() == [2, 6]
    assert "week" not in df.columns


def test_source_medium_concatenates():
    df = pd.DataFrame({"source": ["google", "newsletter"], "medium": ["cpc", "email"]})
    derived = apply_derived_columns(df, parse_derivations({"sm": "source_medium(source, medium)"}))
    assert derived["sm"].tolist() == ["google / cpc", "newsletter / email"]


def test_missing_input_column():
    df = pd.DataFrame({"a": [1]})
    with pytest.raises(ColumnNotFoundError):
        apply_derived_columns(df, parse_derivations({"w": "to_week(date)"}))
