from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

import pandas as pd

logger = logging.getLogger(__name__)


def ensure_dirs(*dirs: Path) -> None:
    for d in dirs:
        Path(d).mkdir(parents=True, exist_ok=True)


def save_processed_dataset(df: pd.DataFrame, processed_dir: Path, basename: str = "dataset") -> Path:
    processed_dir = Path(processed_dir)
    processed_dir.mkdir(parents=True, exist_ok=True)
    out_parquet = processed_dir / f"{basename}.parquet"
    try:
        df.to_parquet(out_parquet, index=False)
        logger.info("Saved processed dataset to %s shape=%s", out_parquet, df.shape)
        return out_parquet
    except (ImportError, ValueError) as exc:
        out_csv = processed_dir / f"{basename}.csv"
        df.to_csv(out_csv, index=False)
        logger.info("Parquet unavailable (%s); saved CSV to %s shape=%s", exc, out_csv, df.shape)
        return out_csv


def load_processed_dataset(paths_cfg: Dict[str, str]) -> pd.DataFrame:
    processed_dir = Path(paths_cfg["processed"])
    parq = processed_dir / "dataset.parquet"
    csv_ = processed_dir / "dataset.csv"
    if parq.exists():
        return pd.read_parquet(parq)
    if csv_.exists():
        return pd.read_csv(csv_)
    raise FileNotFoundError(f"No processed dataset found in {processed_dir}")


__all__ = ["ensure_dirs", "save_processed_dataset", "load_processed_dataset"]
