from __future__ import annotations

import logging
import warnings
from typing import Any, Dict

import numpy as np
import pandas as pd

from ..config import DEGENERATE_MODES
from ..errors import DataQualityWarning, DivisionByZero
from ..schema import MATERIAL_FLAGS

logger = logging.getLogger(__name__)

# Weight is in pounds; dividing by 2000 puts potential energy in the same
# ton-ft units as the measured kinetic energies.
POUNDS_PER_TON = 2000.0

DERIVED_COLUMNS = [
    "total_energy",
    "slope_length",
    "potential_energy",
    "energy_ratio",
    "log_total_energy",
]


def _degenerate_mask(sin_angle: pd.Series, potential: pd.Series) -> pd.Series:
    near_zero = pd.Series(np.isclose(sin_angle.to_numpy(), 0.0, atol=1e-12), index=sin_angle.index)
    return near_zero | (potential == 0)


def derive_features(df: pd.DataFrame, on_degenerate: str = "raise") -> pd.DataFrame:
    """Append energy and geometry columns to a normalized table.

    A zero slope angle or zero potential energy leaves slope length or energy
    ratio undefined. ``on_degenerate`` decides what happens to such rows:
    ``"raise"`` raises :class:`DivisionByZero`, ``"exclude"`` drops them and
    ``"flag"`` keeps them with NaN in the undefined columns and
    ``is_degenerate`` set.

    Rows whose energy ratio exceeds 1 are kept; a :class:`DataQualityWarning`
    reports how many there are.
    """
    if on_degenerate not in DEGENERATE_MODES:
        raise ValueError(f"on_degenerate must be one of {DEGENERATE_MODES}, got '{on_degenerate}'")

    out = df.copy()
    angle_rad = np.deg2rad(out["slope_angle"].astype(float))
    sin_angle = np.sin(angle_rad)
    potential = out["slope_height"].astype(float) * out["weight"].astype(float) / POUNDS_PER_TON

    degenerate = _degenerate_mask(sin_angle, potential)
    if degenerate.any():
        rows = out.index[degenerate].tolist()
        if on_degenerate == "raise":
            raise DivisionByZero(
                f"{len(rows)} rows have zero slope angle or zero potential energy: {rows}",
                rows=rows,
            )
        if on_degenerate == "exclude":
            logger.warning("Excluded %d degenerate rows: %s", len(rows), rows)
            keep = ~degenerate
            out = out.loc[keep].reset_index(drop=True)
            sin_angle = sin_angle[keep].reset_index(drop=True)
            potential = potential[keep].reset_index(drop=True)
            degenerate = degenerate[keep].reset_index(drop=True)
        else:
            logger.warning("Flagged %d degenerate rows: %s", len(rows), rows)

    out["total_energy"] = out["translational_kinetic_energy"] + out["rotational_kinetic_energy"]
    out["slope_length"] = (out["slope_height"] / sin_angle.where(~degenerate)).astype(float)
    out["potential_energy"] = potential
    out["energy_ratio"] = (out["total_energy"] / potential.where(~degenerate)).astype(float)
    positive = out["total_energy"] > 0
    out["log_total_energy"] = np.log(out["total_energy"].where(positive))
    if on_degenerate == "flag":
        out["is_degenerate"] = degenerate.astype(bool)

    n_anomalies = int((out["energy_ratio"] > 1.0).sum())
    if n_anomalies:
        warnings.warn(
            f"{n_anomalies} rows have energy_ratio > 1 (impact energy above potential energy).",
            DataQualityWarning,
            stacklevel=2,
        )
    return out


def energy_ratio_anomalies(df: pd.DataFrame, threshold: float = 1.0) -> pd.DataFrame:
    """Rows whose impact energy exceeds ``threshold`` times the potential energy."""
    if "energy_ratio" not in df.columns:
        raise KeyError("energy_ratio not found; run derive_features first.")
    return df.loc[df["energy_ratio"] > threshold].copy()


def data_quality_summary(df: pd.DataFrame) -> Dict[str, Any]:
    material_counts = {
        name: int(df[flag].sum()) for name, flag in MATERIAL_FLAGS.items() if flag in df.columns
    }
    return {
        "n_rows": int(len(df)),
        "n_energy_ratio_above_1": int(len(energy_ratio_anomalies(df))),
        "n_degenerate": int(df["is_degenerate"].sum()) if "is_degenerate" in df.columns else 0,
        "n_unmatched_material": int(len(df) - sum(material_counts.values())),
        "material_counts": material_counts,
    }


__all__ = [
    "derive_features",
    "energy_ratio_anomalies",
    "data_quality_summary",
    "DERIVED_COLUMNS",
    "POUNDS_PER_TON",
]
