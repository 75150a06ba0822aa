import math
from datetime import datetime

import numpy as np
import pandas as pd
import pytest

from chartsmith.viz.numeric import cell_label, extract_numeric, numeric_or_zero


@pytest.mark.parametrize(
    "value, expected",
    [(3, 3.0), (2.5, 2.5), (np.int64(7), 7.0), (np.float32(1.5), 1.5), (np.uint32(4), 4.0)],
)
def test_numbers_extract(value, expected):
    assert extract_numeric(value) == expected


@pytest.mark.parametrize(
    "value",
    [True, np.bool_(False), "12", None, math.nan, np.nan, math.inf, -np.inf, pd.Timestamp("2023-01-01"), datetime(2023, 1, 1)],
)
def test_non_numbers_extract_none(value):
    assert extract_numeric(value) is None
    assert numeric_or_zero(value) == 0.0


def test_cell_label_formats_dates():
    assert cell_label(pd.Timestamp("2023-01-05")) == "2023-01-05"
    assert cell_label(pd.Timestamp("2023-01-05 08:30:00")) == "2023-01-05 08:30:00"
    assert cell_label(None) == ""
    assert cell_label(42) == "42"
