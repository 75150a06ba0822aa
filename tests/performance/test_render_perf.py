import os
import time

import pandas as pd
import pytest

from chartsmith.schemas.chart import ChartConfig, ChartType
from chartsmith.services.render_service import render_chart

pytestmark = [
    pytest.mark.performance,
    pytest.mark.skipif(os.getenv("RUN_PERF_TESTS") != "1", reason="set RUN_PERF_TESTS=1 to run timing checks"),
]


def test_scatter_render_time(tmp_path):
    index = pd.RangeIndex(5000)
    frame = pd.DataFrame({"x": (index * 37) % 1009 / 10.0, "y": (index * 53) % 997 / 10.0})
    config = ChartConfig(chart_type=ChartType.SCATTER, x="x", y="y")
    start = time.perf_counter()
    render_chart(frame, config, tmp_path / "scatter.png")
    assert time.perf_counter() - start < 10.0
