#!/usr/bin/env python3
"""
run_pipeline.py
~~~~~~~~~~~~~~~
Runs the staged workflow end to end:

02_preprocess   → cleaned dataset with derived energy features
01_scan         → summary tables and figures
03_train_models → fitted models, resampled metrics, parity plots

The scan reads the processed dataset, so preprocessing runs first.
"""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path
from typing import Iterable, Sequence

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from rockfall_energy.config import load_config
from rockfall_energy.pipeline import raw_data_path


def _run(step: Sequence[str]) -> None:
    print(f"\nRunning: {' '.join(step)}")
    subprocess.run(step, check=True)


def _ensure_dataset(config_path: str) -> Path:
    dataset = raw_data_path(load_config(config_path))
    if not dataset.exists():
        raise FileNotFoundError(
            f"Expected dataset at '{dataset}'. Place the field-test CSV under data/raw/ and rerun."
        )
    return dataset


def build_steps(config_path: str, train: bool = True) -> Iterable[list[str]]:
    exe = [sys.executable]
    steps = [
        exe + ["scripts/02_preprocess.py", "--config", config_path],
        exe + ["scripts/01_scan.py", "--config", config_path],
    ]
    if train:
        steps.append(exe + ["scripts/03_train_models.py", "--config", config_path])
    return steps


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the full rockfall energy pipeline.")
    parser.add_argument("--config", default="config.yaml", help="Path to config file.")
    parser.add_argument("--skip-train", action="store_true", help="Stop after the scan stage.")
    args = parser.parse_args()

    _ensure_dataset(args.config)
    for step in build_steps(args.config, train=not args.skip_train):
        _run(step)

    print("\nPipeline complete. See outputs/ and models/ for artefacts.")


if __name__ == "__main__":
    main()
