"""
01_scan.py
~~~~~~~~~~
Exploratory stage for the processed rockfall dataset:

* summary table (mean, SD, 2.5/50/97.5 % quantiles) for the energy columns;
* density histograms with quantile markers, one per summary column;
* scatter matrix coloured by slope material and a correlation heatmap.

Run after 02_preprocess.py, which writes the processed dataset this stage reads.
"""

import argparse
import logging
import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from rockfall_energy.config import DEFAULT_CONFIG_PATH
from rockfall_energy.data import scan_dataset


def main():
    ap = argparse.ArgumentParser(description="Describe the processed rockfall dataset (tables + figures).")
    ap.add_argument(
        "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    args = ap.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    written = scan_dataset(Path(args.config))
    for name, path in written.items():
        print(f" {name:<28} → {path}")


if __name__ == "__main__":
    main()
