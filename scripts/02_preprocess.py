"""
02_preprocess.py
~~~~~~~~~~~~~~~~
Turns the raw field-test file into the modelling dataset:

* load the rock-roll records and check their columns;
* drop rows without a slope angle, treat missing rotational energy as zero,
  add slope-material indicators (policy in config.yaml);
* derive total energy, slope length, potential energy and energy ratio;
* persist the dataset plus a table of rows whose energy ratio exceeds 1.
"""

import argparse
import logging
import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from rockfall_energy.config import DEFAULT_CONFIG_PATH
from rockfall_energy.pipeline import run_preprocess


def main():
    ap = argparse.ArgumentParser(description="Clean the raw rockfall data and derive energy features.")
    ap.add_argument(
        "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    args = ap.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    df, out_path = run_preprocess(Path(args.config))
    print(f"Preprocessing complete. {len(df)} rows saved at: {out_path}")


if __name__ == "__main__":
    main()
