"""
03_train_models.py
~~~~~~~~~~~~~~~~~~
Fits the impact-energy models (linear, log-linear, k-NN, radial SVM) with
repeated k-fold resampling and writes:

* one joblib pack per model under models/checkpoints;
* resampled RMSE / R² per model (JSON + comparison CSV);
* out-of-fold parity plots.
"""

import argparse
import logging
import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from rockfall_energy.config import DEFAULT_CONFIG_PATH
from rockfall_energy.models import MODEL_FAMILIES, train_energy_models


def main() -> None:
    parser = argparse.ArgumentParser(description="Train the rockfall impact-energy models.")
    parser.add_argument(
        "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--family",
        action="append",
        choices=list(MODEL_FAMILIES),
        default=None,
        help="Model family to fit; repeat for several (default: families in config).",
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    result = train_energy_models(config_path=Path(args.config), families=args.family)

    print("\n=== IMPACT ENERGY MODELS ===")
    for family, model in result.models.items():
        print(f" {family:<11} RMSE={model.rmse:.2f} (±{model.rmse_sd:.2f})  R2={model.r2:.3f}  {model.best_params or ''}")
        print(f"             pack → {result.model_paths[family]}")
    print(f" Comparison → {result.comparison_path}")
    print(f" Metrics    → {result.metrics_path}")


if __name__ == "__main__":
    main()
