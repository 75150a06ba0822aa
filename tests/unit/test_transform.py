import pandas as pd
import pytest

from chartsmith.schemas.chart import AggregationType, ChartConfig, ChartType, FilterConfig, SortConfig
from chartsmith.services.exceptions import ColumnNotFoundError, UnsupportedExpressionError
from chartsmith.services.transform import apply_filters, apply_grouping, apply_sorting, apply_transforms, cell_text


@pytest.fixture
def frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "channel": ["A", "B", "C", "A", "D"],
            "region": ["n", "s", "n", "s", "n"],
            "value": [1, 2, 3, 4, 5],
        }
    )


def _config(**fields) -> ChartConfig:
    return ChartConfig(chart_type=ChartType.BAR, x="channel", y="value", **fields)


def test_include_list_keeps_union(frame):
    result = apply_filters(frame, FilterConfig(include={"channel": ["A", "B"]}))
    assert result["channel"].tolist() == ["A", "B", "A"]


def test_exclude_list_keeps_rows_matching_none(frame):
    result = apply_filters(frame, FilterConfig(exclude={"channel": ["A", "B"]}))
    assert result["channel"].tolist() == ["C", "D"]


def test_entries_across_columns_compose_with_and(frame):
    result = apply_filters(frame, FilterConfig(include={"channel": "A", "region": "s"}))
    assert result["value"].tolist() == [4]


def test_numeric_filter_values_compare_on_text(frame):
    result = apply_filters(frame, FilterConfig.model_validate({"include": {"value": [2, 5]}}))
    assert result["value"].tolist() == [2, 5]


def test_expression_filter_is_ignored_with_warning(frame, caplog):
    with caplog.at_level("WARNING", logger="chartsmith"):
        result = apply_filters(frame, FilterConfig(expression="value > 2"))
    assert len(result) == len(frame)
    assert "value > 2" in caplog.text


def test_filter_on_unknown_column_lists_columns(frame):
    with pytest.raises(ColumnNotFoundError) as excinfo:
        apply_filters(frame, FilterConfig(include={"chanel": "A"}))
    assert '["channel", "region", "value"]' in str(excinfo.value)


def test_date_cells_compare_as_iso_text():
    df = pd.DataFrame({"day": pd.to_datetime(["2023-01-01", "2023-01-02"])})
    assert cell_text(df["day"]).tolist() == ["2023-01-01", "2023-01-02"]
    stamps = pd.DataFrame({"at": pd.to_datetime(["2023-01-01 10:30:00", "2023-01-02"])})
    assert cell_text(stamps["at"]).tolist() == ["2023-01-01 10:30:00", "2023-01-02 00:00:00"]


def test_grouping_sums_numeric_columns(frame):
    result = apply_grouping(frame, "region", AggregationType.SUM)
    assert result["region"].tolist() == ["n", "s"]
    assert result["value"].tolist() == [9, 6]
    assert "channel" not in result.columns


def test_grouping_count_counts_every_column(frame):
    result = apply_grouping(frame, "region", AggregationType.COUNT)
    assert result["channel"].tolist() == [3, 2]
    assert result["value"].tolist() == [3, 2]


def test_sorting_is_stable_multi_key(frame):
    result = apply_sorting(frame, [SortConfig(column="region"), SortConfig(column="value", ascending=False)])
    assert result["value"].tolist() == [5, 3, 1, 4, 2]


def test_pipeline_order_and_input_untouched(frame):
    original = frame.copy()
    config = _config(
        filter=FilterConfig(exclude={"channel": "D"}),
        group_by="region",
        agg=AggregationType.SUM,
        sort=[SortConfig(column="value", ascending=False)],
        limit=1,
    )
    result = apply_transforms(frame, config)
    assert result["region"].tolist() == ["s"]
    assert result["value"].tolist() == [6]
    pd.testing.assert_frame_equal(frame, original)


def test_grouping_needs_both_group_by_and_agg(frame):
    result = apply_transforms(frame, _config(group_by="region"))
    assert len(result) == len(frame)


def test_unsupported_derive_fails_before_filtering(frame):
    config = _config(filter=FilterConfig(include={"missing": "x"}), derive={"w": "explode(channel)"})
    with pytest.raises(UnsupportedExpressionError):
        apply_transforms(frame, config)


def test_limit_keeps_first_rows(frame):
    result = apply_transforms(frame, _config(limit=2))
    assert result["channel"].tolist() == ["A", "B"]
