from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from ..analysis.summary import describe_table, summarize_column
from ..config import load_config
from ..utils.io import ensure_dirs, load_processed_dataset
from ..visualization.plots import PlotStyle, draw_correlation, draw_pairs, draw_summary_histogram

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_COLUMNS: List[str] = [
    "total_energy",
    "translational_kinetic_energy",
    "rotational_kinetic_energy",
    "energy_ratio",
    "slope_length",
]

PAIR_COLUMNS: List[str] = [
    "total_energy",
    "slope_height",
    "slope_angle",
    "slope_length",
    "weight",
]


def scan_dataset(config_path: str | os.PathLike | None = None, style: Optional[PlotStyle] = None) -> Dict[str, Path]:
    """Write descriptive tables and figures for the processed dataset."""
    cfg: Dict[str, Any] = load_config(config_path)
    df = load_processed_dataset(cfg["paths"])
    style = style or PlotStyle()
    report_cfg = cfg.get("report") or {}
    n_buckets = int(report_cfg.get("n_buckets", 20))
    summary_cols = list(report_cfg.get("summary_columns", DEFAULT_SUMMARY_COLUMNS))

    out_tabs = Path(cfg["paths"]["outputs"]) / "tables"
    out_figs = Path(cfg["paths"]["outputs"]) / "figs"
    ensure_dirs(out_tabs, out_figs)

    written: Dict[str, Path] = {}
    written["describe"] = out_tabs / "describe.csv"
    describe_table(df, summary_cols, n_buckets=n_buckets).to_csv(written["describe"])

    written["missing_values"] = out_tabs / "missing_values.csv"
    df.isna().sum().sort_values(ascending=False).to_csv(written["missing_values"])

    written["material_counts"] = out_tabs / "material_counts.csv"
    df["slope_material"].astype(object).value_counts(dropna=False).to_csv(written["material_counts"])

    written["group_counts"] = out_tabs / "test_group_counts.csv"
    df.groupby("test_group_code").size().rename("n").to_csv(written["group_counts"])

    for col in summary_cols:
        if col not in df.columns:
            logger.warning("Summary column '%s' not in dataset; skipped.", col)
            continue
        try:
            summary = summarize_column(df[col], n_buckets, label=col)
        except ValueError as exc:
            logger.warning("Skipping histogram for %s: %s", col, exc)
            continue
        written[f"hist_{col}"] = draw_summary_histogram(summary, out_figs / f"hist_{col}.png", style)

    numeric = [c for c in PAIR_COLUMNS if c in df.columns]
    written["pairs"] = draw_pairs(df, numeric, out_figs / "pairs.png", style)
    written["correlation"] = draw_correlation(df, numeric, out_figs / "corr_heatmap.png", style)

    logger.info("Scan complete: tables in %s, figures in %s", out_tabs, out_figs)
    return written


__all__ = ["scan_dataset", "DEFAULT_SUMMARY_COLUMNS"]
