"""Numeric extraction from heterogeneous data frame cells.

Renderers read cells one at a time, the way the frame hands them out: Python
or numpy ints and floats, strings, timestamps, booleans and missing values.
Only finite ints and floats count as numbers. Everything else (including
booleans, NaN, infinities and None) yields ``None`` and the renderer falls
back to ``0.0`` through ``numeric_or_zero`` unless it documents otherwise.
"""
import math
import numbers
from typing import Any, Optional

import pandas as pd


def extract_numeric(value: Any) -> Optional[float]:
    if value is None or isinstance(value, (bool, str)):
        return None
    # numpy.bool_ is not a numbers.Number subclass, so it drops out below.
    if isinstance(value, numbers.Integral):
        return float(value)
    if isinstance(value, numbers.Real):
        result = float(value)
        return result if math.isfinite(result) else None
    return None


def numeric_or_zero(value: Any) -> float:
    result = extract_numeric(value)
    return 0.0 if result is None else result


def cell_label(value: Any) -> str:
    """Text form of a cell for axis labels, legend entries and grouping keys."""
    if value is None:
        return ""
    if isinstance(value, pd.Timestamp):
        if value == value.normalize():
            return value.strftime("%Y-%m-%d")
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value)
