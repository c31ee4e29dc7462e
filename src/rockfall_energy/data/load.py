from __future__ import annotations

import csv
import logging
import os
from pathlib import Path

import numpy as np
import pandas as pd

from ..errors import LoadError
from ..schema import COLUMN_MAP, NUMERIC_COLUMNS, REQUIRED_COLUMNS

logger = logging.getLogger(__name__)

CSV_SUFFIXES = {".csv", ".txt"}
EXCEL_SUFFIXES = {".xlsx"}


def _check_field_counts(path: Path) -> None:
    with open(path, "r", newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header is None:
            raise LoadError(f"{path} is empty.")
        for row in reader:
            if not row:
                continue
            if len(row) != len(header):
                raise LoadError(
                    f"{path}: line {reader.line_num} has {len(row)} fields, header has {len(header)}."
                )


def _read_table(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        return pd.read_excel(path)
    _check_field_counts(path)
    return pd.read_csv(path, encoding="utf-8-sig", skip_blank_lines=True)


def _to_snake_case(name: str) -> str:
    out = []
    for i, ch in enumerate(name):
        if ch.isupper() and i > 0 and (name[i - 1].islower() or name[i - 1].isdigit()):
            out.append("_")
        out.append(ch.lower())
    return "".join(out).replace(" ", "_")


def _clean_cell(value):
    if isinstance(value, str):
        value = value.strip()
        return value if value else np.nan
    return value


def _rename_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]
    mapping = {c: COLUMN_MAP.get(c, _to_snake_case(c)) for c in df.columns}
    return df.rename(columns=mapping)


def load_raw_records(path: str | os.PathLike) -> pd.DataFrame:
    """Read the field-test file into a DataFrame, keeping file order.

    Required columns are matched by name, so their order in the file does not
    matter. Numeric columns are coerced; blank cells become NaN.
    """
    path = Path(path)
    if not path.exists():
        raise LoadError(f"Raw data file not found: {path}")
    if path.suffix.lower() not in CSV_SUFFIXES | EXCEL_SUFFIXES:
        raise LoadError(f"Unsupported file type '{path.suffix}' for {path}")

    try:
        df = _read_table(path)
    except LoadError:
        raise
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        raise LoadError(f"Could not read {path}: {exc}") from exc

    df = _rename_columns(df)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise LoadError(f"{path} is missing required columns: {missing}")

    for col in df.columns:
        if not pd.api.types.is_numeric_dtype(df[col]):
            df[col] = df[col].map(_clean_cell)
    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)

    logger.info("Loaded %d raw records from %s", len(df), path)
    return df.reset_index(drop=True)


__all__ = ["load_raw_records", "COLUMN_MAP", "REQUIRED_COLUMNS", "NUMERIC_COLUMNS"]
