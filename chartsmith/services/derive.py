"""Derived-column expressions.

An expression is a single function call over column names, e.g. ``to_week(date)``
or ``source_medium(source, medium)``. Expressions are parsed into a
``DeriveExpression`` before any data is touched, so an unsupported form fails
the pipeline up front with ``UnsupportedExpressionError``.
"""
import re
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Tuple

import pandas as pd

from chartsmith.config.observability import logger
from chartsmith.services.exceptions import ColumnNotFoundError, UnsupportedExpressionError

CALL_PATTERN = re.compile(r"^\s*(?P<name>[a-z_]+)\s*\((?P<args>[^()]*)\)\s*$")


def _as_datetime(series: pd.Series) -> pd.Series:
    if pd.api.types.is_datetime64_any_dtype(series):
        return series
    return pd.to_datetime(series, errors="coerce")


def to_week(series: pd.Series) -> pd.Series:
    stamps = _as_datetime(series).dt.normalize()
    return stamps - pd.to_timedelta(stamps.dt.weekday, unit="D")


def to_month(series: pd.Series) -> pd.Series:
    stamps = _as_datetime(series)
    return stamps.dt.to_period("M").dt.to_timestamp()


def to_hour(series: pd.Series) -> pd.Series:
    return _as_datetime(series).dt.hour


def weekday(series: pd.Series) -> pd.Series:
    return _as_datetime(series).dt.weekday


def source_medium(source: pd.Series, medium: pd.Series) -> pd.Series:
    try:
        return source.astype(str) + " / " + medium.astype(str)
    except (TypeError, ValueError) as exc:
        logger.warning("source_medium concatenation failed, keeping source values: %s", exc)
        return source


FUNCTIONS: Dict[str, Tuple[int, Callable[..., pd.Series]]] = {
    "to_week": (1, to_week),
    "to_month": (1, to_month),
    "to_hour": (1, to_hour),
    "weekday": (1, weekday),
    "source_medium": (2, source_medium),
}


@dataclass(frozen=True)
class DeriveExpression:
    function: str
    columns: Tuple[str, ...]

    def evaluate(self, df: pd.DataFrame) -> pd.Series:
        for column in self.columns:
            if column not in df.columns:
                raise ColumnNotFoundError(column, [str(c) for c in df.columns])
        _, func = FUNCTIONS[self.function]
        return func(*(df[column] for column in self.columns))

    def __str__(self) -> str:
        return f"{self.function}({', '.join(self.columns)})"


def parse_derive_expression(expression: str) -> DeriveExpression:
    match = CALL_PATTERN.match(expression)
    if not match:
        raise UnsupportedExpressionError(expression)
    name = match.group("name")
    if name not in FUNCTIONS:
        raise UnsupportedExpressionError(expression, f"unknown function '{name}'")
    arity, _ = FUNCTIONS[name]
    columns = tuple(part.strip() for part in match.group("args").split(",")) if match.group("args").strip() else ()
    if len(columns) != arity or not all(columns):
        raise UnsupportedExpressionError(
            expression, f"{name} expects {arity} column name{'s' if arity > 1 else ''}, got {len(columns)}"
        )
    return DeriveExpression(function=name, columns=columns)


def parse_derivations(derivations: Mapping[str, str]) -> Dict[str, DeriveExpression]:
    return {name: parse_derive_expression(expr) for name, expr in derivations.items()}


def apply_derived_columns(df: pd.DataFrame, derivations: Mapping[str, DeriveExpression]) -> pd.DataFrame:
    result = df.copy()
    for name, expression in derivations.items():
        result[name] = expression.evaluate(result)
        logger.debug("Derived column %s = %s", name, expression)
    return result
