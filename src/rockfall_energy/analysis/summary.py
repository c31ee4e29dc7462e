from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

QUANTILE_LEVELS = (0.025, 0.5, 0.975)


def _round1(x: float) -> str:
    # Same text as R's round(x, 1): no trailing ".0".
    text = f"{x:.1f}"
    if text == "-0.0":
        text = "0.0"
    return text[:-2] if text.endswith(".0") else text


@dataclass
class ColumnSummary:
    """Descriptive statistics and a density histogram for one numeric column.

    ``densities`` are bucket heights such that ``sum(densities * widths) == 1``;
    ``edges`` has one more entry than ``densities``.
    """

    label: str
    n: int
    n_missing: int
    mean: float
    sd: float
    quantiles: Dict[float, float]
    edges: np.ndarray = field(repr=False)
    densities: np.ndarray = field(repr=False)

    @property
    def widths(self) -> np.ndarray:
        return np.diff(self.edges)

    @property
    def title(self) -> str:
        return f"Mean = {_round1(self.mean)} , SD = {_round1(self.sd)}"

    def to_row(self) -> Dict[str, float]:
        row = {k: v for k, v in asdict(self).items() if k not in {"edges", "densities", "quantiles"}}
        for q, val in self.quantiles.items():
            row[f"q{q * 100:g}"] = val
        return row


def _clean(values: Iterable, label: Optional[str]) -> tuple[np.ndarray, int]:
    arr = pd.to_numeric(pd.Series(list(values), dtype=object), errors="coerce").to_numpy(dtype=float)
    if np.isinf(arr).any():
        raise ValueError(f"'{label}' contains infinite values; exclude or flag those rows before summarizing.")
    present = arr[~np.isnan(arr)]
    return present, int(arr.size - present.size)


def summarize_column(values: Iterable, n_buckets: int, label: Optional[str] = None) -> ColumnSummary:
    if n_buckets < 1:
        raise ValueError(f"n_buckets must be >= 1, got {n_buckets}")
    data, n_missing = _clean(values, label)
    if data.size == 0:
        raise ValueError(f"No non-missing values to summarize for '{label}'.")

    sd = float(np.std(data, ddof=1)) if data.size > 1 else float("nan")
    qs = np.quantile(data, QUANTILE_LEVELS)
    densities, edges = np.histogram(data, bins=n_buckets, density=True)
    if label is None:
        label = getattr(values, "name", None) or "value"
    return ColumnSummary(
        label=str(label),
        n=int(data.size),
        n_missing=n_missing,
        mean=float(np.mean(data)),
        sd=sd,
        quantiles={level: float(q) for level, q in zip(QUANTILE_LEVELS, qs)},
        edges=edges,
        densities=densities,
    )


def describe_table(df: pd.DataFrame, columns: Sequence[str], n_buckets: int = 20) -> pd.DataFrame:
    rows: List[Dict[str, float]] = []
    for col in columns:
        if col not in df.columns:
            continue
        try:
            summary = summarize_column(df[col], n_buckets, label=col)
        except ValueError as exc:
            logger.warning("Skipping %s in summary table: %s", col, exc)
            continue
        rows.append(summary.to_row())
    return pd.DataFrame(rows).set_index("label") if rows else pd.DataFrame()


__all__ = ["ColumnSummary", "summarize_column", "describe_table", "QUANTILE_LEVELS"]
