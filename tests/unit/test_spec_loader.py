import json

import pytest

from chartsmith.schemas.chart import ChartType, OutputFormat
from chartsmith.services.exceptions import ConfigValidationError, DataError
from chartsmith.services.spec_loader import load_spec, parse_spec

SPEC_YAML = """
data:
  default: sales.csv
  sources:
    funnel: funnel.csv
charts:
  - type: line
    title: Revenue
    x: date
    y: revenue
    group-by: region
    agg: sum
    format: svg
  - type: funnel
    data: funnel
    steps: [Visit, Signup]
    values: users
    step-order: [1, 0]
    filter:
      include:
        region: [1, north]
"""


def test_load_yaml_spec(tmp_path):
    path = tmp_path / "charts.yaml"
    path.write_text(SPEC_YAML, encoding="utf-8")
    spec = load_spec(path)

    line, funnel = spec.charts
    assert line.chart_type == ChartType.LINE
    assert line.group_by == "region"
    assert line.output_format == OutputFormat.SVG
    assert funnel.step_order == [1, 0]
    assert funnel.filter.include == {"region": ["1", "north"]}
    assert spec.resolve_data_path(funnel).name == "funnel.csv"
    assert spec.resolve_data_path(line).name == "sales.csv"


def test_load_json_spec(tmp_path):
    path = tmp_path / "charts.json"
    path.write_text(json.dumps({"charts": [{"type": "scatter", "x": "a", "y": "b"}]}), encoding="utf-8")
    spec = load_spec(path)
    assert spec.charts[0].chart_type == ChartType.SCATTER
    assert spec.resolve_data_path(spec.charts[0]) is None


def test_empty_chart_list_is_rejected():
    with pytest.raises(ConfigValidationError, match="at least one chart"):
        parse_spec({"charts": []})


def test_unknown_chart_type_is_rejected():
    with pytest.raises(ConfigValidationError, match="charts.0"):
        parse_spec({"charts": [{"type": "pie"}]})


def test_missing_or_broken_file(tmp_path):
    with pytest.raises(DataError):
        load_spec(tmp_path / "absent.yaml")
    broken = tmp_path / "broken.yaml"
    broken.write_text("charts: [", encoding="utf-8")
    with pytest.raises(DataError):
        load_spec(broken)


def test_non_mapping_document(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- type: line\n", encoding="utf-8")
    with pytest.raises(ConfigValidationError):
        load_spec(path)
