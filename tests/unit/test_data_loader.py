from pathlib import Path

import pandas as pd
import pytest

from chartsmith.services import data_loader
from chartsmith.services.exceptions import ColumnNotFoundError, DataError

FIXTURES = Path(__file__).parent.parent / "fixtures"


def test_read_csv_with_autodetect():
    data = (FIXTURES / "sales.csv").read_bytes()
    df = data_loader.read_bytes_to_df(data, "sales.csv")
    assert not df.empty
    assert {"date", "region", "revenue"}.issubset(df.columns)


def test_semicolon_separator_detected():
    df = data_loader.read_bytes_to_df(b"a;b\n1;2\n3;4\n", "data.csv")
    assert list(df.columns) == ["a", "b"]
    assert df["b"].tolist() == [2, 4]


def test_reject_unsupported_extension():
    with pytest.raises(data_loader.UnsupportedFileType):
        data_loader.read_bytes_to_df(b"bad", "data.xlsx")


def test_date_columns_are_parsed():
    df = data_loader.load_csv(FIXTURES / "sales.csv")
    assert pd.api.types.is_datetime64_any_dtype(df["date"])


def test_missing_file_raises_data_error(tmp_path):
    with pytest.raises(DataError, match="Failed to open CSV file"):
        data_loader.load_csv(tmp_path / "nope.csv")


@pytest.mark.parametrize(
    "requested, expected",
    [("Revenue", "revenue"), ("rev", "revenue"), ("regoin", "region"), ("zzzzzzzz", None)],
)
def test_suggest_column_name(requested, expected):
    assert data_loader.suggest_column_name(["date", "region", "revenue"], requested) == expected


def test_levenshtein_distance():
    assert data_loader.levenshtein_distance("kitten", "sitting") == 3
    assert data_loader.levenshtein_distance("", "abc") == 3


def test_validate_columns_lists_available_and_suggests():
    df = pd.DataFrame({"date": [], "users": []})
    with pytest.raises(ColumnNotFoundError) as excinfo:
        data_loader.validate_columns(df, ["date", "user"])
    message = str(excinfo.value)
    assert message.startswith("Column 'user' not found. Available columns: [\"date\", \"users\"]")
    assert "Did you mean 'users'?" in message
