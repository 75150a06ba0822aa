import csv
import io
import os
import re
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from chartsmith.config.observability import logger
from chartsmith.config.settings import settings
from chartsmith.services.exceptions import ColumnNotFoundError, DataError
from chartsmith.services.validators import enforce_dimensions, missing_columns

DATE_COLUMN_HINTS = (
    "date",
    "time",
    "timestamp",
    "created",
    "updated",
    "modified",
    "first_seen",
    "last_seen",
)
ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
ISO_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}:\d{2}")


class UnsupportedFileType(DataError, ValueError):
    pass


def _detect_separator(sample: str) -> str:
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=";,|\t")
        return dialect.delimiter
    except csv.Error:
        return ","


def _is_date_like(column: str) -> bool:
    lowered = column.lower()
    return any(hint in lowered for hint in DATE_COLUMN_HINTS)


def _parse_date_columns(df: pd.DataFrame) -> pd.DataFrame:
    for column in df.columns:
        if not pd.api.types.is_string_dtype(df[column]) or not _is_date_like(str(column)):
            continue
        sample = df[column].dropna().astype(str).str.strip()
        if sample.empty:
            continue
        first = sample.iloc[0]
        if ISO_DATETIME.match(first) or ISO_DATE.match(first):
            parsed = pd.to_datetime(df[column], errors="coerce")
            if parsed.notna().sum() == df[column].notna().sum():
                df[column] = parsed
                logger.debug("Parsed column %s as datetime", column)
    return df


def read_bytes_to_df(data: bytes, filename: Optional[str]) -> pd.DataFrame:
    extension = os.path.splitext(filename or "")[1].lower()
    if extension not in {".csv", ".tsv", ".txt", ""}:
        raise UnsupportedFileType(f"Unsupported file type: {extension}")
    sample = data[:1024].decode(errors="ignore")
    sep = _detect_separator(sample)
    try:
        df = pd.read_csv(io.BytesIO(data), sep=sep)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise DataError(f"Failed to parse CSV data from {filename or 'upload'}: {exc}") from exc
    enforce_dimensions(df, max_rows=settings.max_rows, max_columns=settings.max_columns)
    return _parse_date_columns(df)


def load_csv(path: Path) -> pd.DataFrame:
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise DataError(f"Failed to open CSV file: {path}: {exc}") from exc
    return read_bytes_to_df(data, Path(path).name)


def suggest_column_name(available: Sequence[str], requested: str) -> Optional[str]:
    """Best-effort guess for a mistyped column: case-insensitive match, then substring, then edit distance <= 3."""
    requested_lower = requested.lower()
    for column in available:
        if column.lower() == requested_lower:
            return column
    for column in available:
        column_lower = column.lower()
        if column_lower in requested_lower or requested_lower in column_lower:
            return column

    best_match: Optional[str] = None
    best_distance = 4
    for column in available:
        distance = levenshtein_distance(requested_lower, column.lower())
        if distance < best_distance:
            best_distance = distance
            best_match = column
    return best_match


def levenshtein_distance(first: str, second: str) -> int:
    previous = list(range(len(second) + 1))
    for i, c1 in enumerate(first, start=1):
        current = [i]
        for j, c2 in enumerate(second, start=1):
            cost = 0 if c1 == c2 else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def get_column_names(df: pd.DataFrame) -> List[str]:
    return [str(col) for col in df.columns]


def validate_columns(df: pd.DataFrame, required: Sequence[str]) -> None:
    missing = missing_columns(df, required)
    if missing:
        available = get_column_names(df)
        raise ColumnNotFoundError(missing[0], available, suggest_column_name(available, missing[0]))
