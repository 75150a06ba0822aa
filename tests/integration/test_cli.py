import pytest
from typer.testing import CliRunner

from chartsmith.cli import app, parse_filters, parse_step_order
from chartsmith.services.exceptions import ConfigValidationError

runner = CliRunner()


def test_line_command(tmp_path, fixtures_dir):
    out = tmp_path / "line.png"
    result = runner.invoke(
        app,
        ["--theme", "dark", "line", "-i", str(fixtures_dir / "sales.csv"), "-x", "date", "-y", "revenue", "-o", str(out)],
    )
    assert result.exit_code == 0, result.output
    assert "Chart saved to" in result.output
    assert out.read_bytes().startswith(b"\x89PNG")


def test_svg_format_option(tmp_path, fixtures_dir):
    out = tmp_path / "scatter.svg"
    result = runner.invoke(
        app,
        ["--format", "svg", "scatter", "-i", str(fixtures_dir / "sales.csv"), "-x", "units", "-y", "revenue", "-o", str(out)],
    )
    assert result.exit_code == 0, result.output
    assert b"<svg" in out.read_bytes()


def test_funnel_prompts_for_order(tmp_path, fixtures_dir):
    out = tmp_path / "funnel.png"
    result = runner.invoke(
        app,
        ["funnel", "-i", str(fixtures_dir / "funnel.csv"), "-s", "Visit,Signup,Trial,Purchase", "--values", "users", "-o", str(out)],
        input="\n",
    )
    assert result.exit_code == 0, result.output
    assert "0: Visit" in result.output
    assert out.exists()


def test_funnel_rejects_bad_order(tmp_path, fixtures_dir):
    result = runner.invoke(
        app,
        [
            "funnel", "-i", str(fixtures_dir / "funnel.csv"), "-s", "Visit,Signup,Trial,Purchase",
            "--values", "users", "--step-order", "0,1", "-o", str(tmp_path / "funnel.png"),
        ],
    )
    assert result.exit_code == 1
    assert not (tmp_path / "funnel.png").exists()


def test_missing_column_fails(tmp_path, fixtures_dir):
    result = runner.invoke(
        app,
        ["bar", "-i", str(fixtures_dir / "sales.csv"), "-x", "regoin", "-y", "revenue", "-o", str(tmp_path / "bar.png")],
    )
    assert result.exit_code == 1


def test_render_command(tmp_path, fixtures_dir):
    spec = tmp_path / "charts.yaml"
    spec.write_text(
        f"""
data:
  default: {fixtures_dir / 'sales.csv'}
charts:
  - type: bar
    title: Revenue by region
    x: region
    y: revenue
  - type: retention
    data: {fixtures_dir / 'retention.csv'}
    cohort-date: cohort
    period-number: period
    users: users
""",
        encoding="utf-8",
    )
    out = tmp_path / "out"
    result = runner.invoke(app, ["--format", "svg", "render", "-s", str(spec), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "Rendered 2 chart(s)" in result.output
    assert sorted(path.name for path in out.iterdir()) == ["chart_2-Retention.svg", "revenue-by-region-Bar.svg"]


def test_render_command_reports_failures(tmp_path):
    spec = tmp_path / "charts.yaml"
    spec.write_text("charts:\n  - type: line\n    x: a\n    y: b\n", encoding="utf-8")
    result = runner.invoke(app, ["render", "-s", str(spec), "-o", str(tmp_path / "out")])
    assert result.exit_code == 1
    assert "1 failed" in result.output


def test_parse_filters():
    config = parse_filters(["region=North|South", "channel!=paid", "revenue > 10"])
    assert config.include == {"region": ["North", "South"]}
    assert config.exclude == {"channel": "paid"}
    assert config.expression == "revenue > 10"
    assert parse_filters(None) is None


def test_parse_step_order():
    assert parse_step_order("2, 0,1") == [2, 0, 1]
    with pytest.raises(ConfigValidationError):
        parse_step_order("a,b")


def test_comparison_filters_are_expressions():
    config = parse_filters(["users>=100", "a==b", "x <= 3", "channel != paid"])
    assert config.include is None
    assert config.exclude == {"channel": "paid"}
    assert config.expression == "users>=100 and a==b and x <= 3"


def test_comparison_filter_does_not_break_render(tmp_path, fixtures_dir):
    out = tmp_path / "filtered.png"
    result = runner.invoke(
        app,
        [
            "line", "-i", str(fixtures_dir / "sales.csv"), "-x", "date", "-y", "revenue",
            "-f", "revenue>=100", "-f", "region=North|South", "-o", str(out),
        ],
    )
    assert result.exit_code == 0, result.output
    assert out.exists()
