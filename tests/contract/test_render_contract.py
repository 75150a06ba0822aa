import json

import pytest

from chartsmith.schemas.chart import ChartType

CONFIGS = {
    ChartType.LINE: {"x": "date", "y": "revenue"},
    ChartType.AREA: {"x": "date", "y": "units"},
    ChartType.BAR: {"x": "product", "y": "revenue"},
    ChartType.BAR_STACKED: {"x": "region", "y": "revenue", "group_by": "channel"},
    ChartType.SCATTER: {"x": "units", "y": "revenue"},
}


@pytest.mark.parametrize("chart_type", list(CONFIGS))
def test_render_returns_png(client, fixtures_dir, chart_type):
    response = client.post(
        f"/api/render/{chart_type.value}",
        files={"data_file": ("sales.csv", (fixtures_dir / "sales.csv").read_bytes(), "text/csv")},
        data={"config": json.dumps({**CONFIGS[chart_type], "title": "Sales"})},
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")


def test_render_svg_media_type(client, fixtures_dir):
    response = client.post(
        "/api/render/funnel",
        files={"data_file": ("funnel.csv", (fixtures_dir / "funnel.csv").read_bytes(), "text/csv")},
        data={"config": json.dumps({"steps": ["Visit", "Signup", "Trial", "Purchase"], "values": "users", "format": "svg"})},
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert b"<svg" in response.content
