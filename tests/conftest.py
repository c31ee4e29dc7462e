import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
import yaml

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from rockfall_energy.config import load_config
from rockfall_energy.errors import DataQualityWarning
from rockfall_energy.pipeline import run_preprocess

MATERIALS = ["Rock", "Colluvium", "Weathered Rock"]

# Row positions in the sample file with a deliberate defect.
MISSING_ANGLE_ROW = 5
MISSING_ROTATIONAL_ROW = 7
ANOMALY_ROW = 11


def _sample_rows(n: int = 40, seed: int = 7):
    rng = np.random.default_rng(seed)
    rows = []
    for i in range(n):
        height = float(rng.uniform(20, 120))
        angle = float(rng.uniform(30, 60))
        weight = float(rng.uniform(200, 4000))
        potential = height * weight / 2000
        total = potential * float(rng.uniform(0.2, 0.8))
        rotational = round(total * 0.1, 3)
        rows.append(
            {
                "TestGroup": f"G{i // 8 + 1}",
                "SlopeMaterial": MATERIALS[i % 3],
                "SlopeHeight": round(height, 2),
                "SlopeAngle": round(angle, 1),
                "Weight": round(weight, 1),
                "TranslationalKineticEnergy": round(total - rotational, 3),
                "RotationalKineticEnergy": rotational,
            }
        )
    rows[MISSING_ANGLE_ROW]["SlopeAngle"] = None
    rows[MISSING_ROTATIONAL_ROW]["RotationalKineticEnergy"] = None
    anomaly = rows[ANOMALY_ROW]
    anomaly["TranslationalKineticEnergy"] = round(2.0 * anomaly["SlopeHeight"] * anomaly["Weight"] / 2000, 3)
    return rows


@pytest.fixture
def sample_rows():
    return _sample_rows()


@pytest.fixture
def raw_csv(tmp_path, sample_rows) -> Path:
    path = tmp_path / "raw" / "rockfall_field_tests.csv"
    path.parent.mkdir(parents=True)
    # Column order differs from the canonical one on purpose.
    cols = [
        "Weight",
        "TestGroup",
        "SlopeAngle",
        "SlopeMaterial",
        "RotationalKineticEnergy",
        "SlopeHeight",
        "TranslationalKineticEnergy",
    ]
    pd.DataFrame(sample_rows)[cols].to_csv(path, index=False)
    return path


@pytest.fixture
def make_records():
    """Factory for already-renamed record tables."""

    def _make(*rows):
        base = {
            "test_group": "G1",
            "slope_material": "Rock",
            "slope_height": 40.0,
            "slope_angle": 30.0,
            "weight": 2000.0,
            "translational_kinetic_energy": 10.0,
            "rotational_kinetic_energy": 1.0,
        }
        return pd.DataFrame([{**base, **row} for row in (rows or ({},))])

    return _make


@pytest.fixture
def config_path(tmp_path, raw_csv) -> Path:
    cfg = {
        "paths": {
            "raw": str(raw_csv.parent),
            "processed": str(tmp_path / "processed"),
            "outputs": str(tmp_path / "outputs"),
            "models": str(tmp_path / "models"),
        },
        "data": {"file": raw_csv.name},
        "policy": {
            "drop_missing_slope_angle": True,
            "rotational_energy_fill": 0.0,
            "unknown_material": "warn",
            "on_degenerate": "raise",
        },
        "report": {"n_buckets": 10},
        "models": {
            "target": "total_energy",
            "predictors": ["slope_height", "slope_angle", "weight"],
            "families": ["linear", "log_linear", "knn", "svm_radial"],
            "resampling": {"n_splits": 3, "n_repeats": 2, "random_state": 0},
        },
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(cfg))
    return path


@pytest.fixture
def cfg(config_path):
    return load_config(config_path)


@pytest.fixture
def processed_df(config_path):
    with pytest.warns(DataQualityWarning):
        df, _ = run_preprocess(config_path)
    return df
