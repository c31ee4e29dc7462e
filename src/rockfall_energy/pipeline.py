from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from .config import NormalizationPolicy, load_config
from .data.load import load_raw_records
from .data.normalize import normalize_records
from .features.derive import data_quality_summary, derive_features, energy_ratio_anomalies
from .utils.io import ensure_dirs, save_processed_dataset

logger = logging.getLogger(__name__)


def raw_data_path(cfg: Dict[str, Any]) -> Path:
    return Path(cfg["paths"]["raw"]) / cfg["data"]["file"]


def build_dataset(path: str | os.PathLike, policy: Optional[NormalizationPolicy] = None) -> pd.DataFrame:
    """Load, normalize and derive features for one raw file."""
    policy = policy or NormalizationPolicy()
    raw = load_raw_records(path)
    normalized = normalize_records(raw, policy)
    derived = derive_features(normalized, on_degenerate=policy.on_degenerate)
    logger.info("Built dataset: %d raw rows -> %d modelling rows", len(raw), len(derived))
    return derived


def run_preprocess(config_path: str | os.PathLike | None = None) -> Tuple[pd.DataFrame, Path]:
    cfg = load_config(config_path)
    policy = NormalizationPolicy.from_config(cfg)
    df = build_dataset(raw_data_path(cfg), policy)

    out_path = save_processed_dataset(df, Path(cfg["paths"]["processed"]))

    tables_dir = Path(cfg["paths"]["outputs"]) / "tables"
    ensure_dirs(tables_dir)
    anomalies = energy_ratio_anomalies(df)
    anomalies.to_csv(tables_dir / "energy_ratio_anomalies.csv", index=False)
    quality = data_quality_summary(df)
    pd.Series(
        {k: v for k, v in quality.items() if k != "material_counts"}, name="value"
    ).to_csv(tables_dir / "data_quality.csv")
    if len(anomalies):
        logger.warning(
            "%d rows have energy_ratio > 1; listed in %s",
            len(anomalies),
            tables_dir / "energy_ratio_anomalies.csv",
        )
    return df, out_path


__all__ = ["build_dataset", "run_preprocess", "raw_data_path"]
