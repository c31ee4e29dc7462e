from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import pytest

from rockfall_energy.analysis.summary import describe_table, summarize_column


def test_symmetric_sample():
    summary = summarize_column([1, 2, 3, 4, 5], 5)
    assert summary.mean == pytest.approx(3.0)
    assert summary.sd == pytest.approx(np.sqrt(2.5))
    lo, mid, hi = (summary.quantiles[q] for q in (0.025, 0.5, 0.975))
    assert mid == pytest.approx(3.0)
    assert lo < mid < hi
    assert mid - lo == pytest.approx(hi - mid)
    assert len(summary.densities) == 5
    assert len(summary.edges) == 6


def test_density_areas_sum_to_one():
    values = np.random.default_rng(3).gamma(2.0, 10.0, size=300)
    summary = summarize_column(values, 17)
    assert float(np.sum(summary.densities * summary.widths)) == pytest.approx(1.0)


def test_missing_values_are_ignored():
    summary = summarize_column(pd.Series([1.0, None, 3.0, np.nan], name="energy"), 2)
    assert summary.n == 2
    assert summary.n_missing == 2
    assert summary.mean == pytest.approx(2.0)
    assert summary.label == "energy"


def test_title_matches_histogram_heading():
    summary = summarize_column([1, 2, 3, 4, 5], 5, label="x")
    assert summary.title == "Mean = 3 , SD = 1.6"
    assert summarize_column([0.5, 1.0, 2.2], 3).title == "Mean = 1.2 , SD = 0.9"


def test_invalid_inputs():
    with pytest.raises(ValueError):
        summarize_column([1, 2, 3], 0)
    with pytest.raises(ValueError):
        summarize_column([np.nan, None], 3)


def test_describe_table(processed_df):
    table = describe_table(processed_df, ["total_energy", "energy_ratio", "not_a_column"], n_buckets=8)
    assert list(table.index) == ["total_energy", "energy_ratio"]
    assert {"mean", "sd", "q2.5", "q50", "q97.5", "n", "n_missing"} <= set(table.columns)


def test_infinite_values_are_rejected_by_name():
    with pytest.raises(ValueError, match="'ratio' contains infinite values"):
        summarize_column([1.0, np.inf, 3.0], 3, label="ratio")


def test_describe_table_skips_unusable_columns(caplog):
    caplog.set_level(logging.WARNING, logger="rockfall_energy.analysis.summary")
    df = pd.DataFrame(
        {
            "total_energy": [10.0, 12.0, 15.0],
            "rotational_kinetic_energy": [np.nan, np.nan, np.nan],
            "energy_ratio": [0.5, np.inf, 0.7],
        }
    )
    table = describe_table(df, ["total_energy", "rotational_kinetic_energy", "energy_ratio"], n_buckets=3)
    assert list(table.index) == ["total_energy"]
    assert "rotational_kinetic_energy" in caplog.text
    assert "energy_ratio" in caplog.text
