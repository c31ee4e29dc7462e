from __future__ import annotations

import numpy as np
import pandas as pd

from rockfall_energy.schema import INDICATOR_COLUMNS

REQUIRED_COLUMNS = {
    "test_group",
    "test_group_code",
    "slope_material",
    "slope_height",
    "slope_angle",
    "weight",
    "translational_kinetic_energy",
    "rotational_kinetic_energy",
    "is_rock",
    "is_colluvium",
    "is_weathered_rock",
    "total_energy",
    "slope_length",
    "potential_energy",
    "energy_ratio",
}


def test_processed_dataset_has_expected_columns(processed_df: pd.DataFrame):
    missing = REQUIRED_COLUMNS - set(processed_df.columns)
    assert not missing, f"Missing columns: {sorted(missing)}"


def test_slope_angle_and_rotational_energy_are_populated(processed_df: pd.DataFrame):
    assert processed_df["slope_angle"].notna().all()
    assert processed_df["rotational_kinetic_energy"].notna().all()


def test_physical_ranges(processed_df: pd.DataFrame):
    assert (processed_df["slope_angle"] > 0).all() and (processed_df["slope_angle"] < 90).all()
    assert (processed_df["slope_height"] > 0).all()
    assert (processed_df["weight"] > 0).all()
    assert (processed_df["total_energy"] >= 0).all()
    assert np.isfinite(processed_df["slope_length"]).all()
    assert (processed_df["slope_length"] >= processed_df["slope_height"]).all()


def test_indicators_are_binary_and_exclusive(processed_df: pd.DataFrame):
    flags = processed_df[INDICATOR_COLUMNS]
    assert flags.isin([0, 1]).all().all()
    assert (flags.sum(axis=1) == 1).all()


def test_total_energy_is_sum_of_components(processed_df: pd.DataFrame):
    expected = processed_df["translational_kinetic_energy"] + processed_df["rotational_kinetic_energy"]
    np.testing.assert_allclose(processed_df["total_energy"], expected)
