from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd

from ..config import NormalizationPolicy
from ..errors import NormalizationError
from ..schema import INDICATOR_COLUMNS, KNOWN_MATERIALS, MATERIAL_FLAGS, REQUIRED_COLUMNS

logger = logging.getLogger(__name__)


def _first_seen_codes(values: pd.Series) -> pd.Series:
    codes, _ = pd.factorize(values, sort=False, use_na_sentinel=True)
    return pd.Series(codes, index=values.index, dtype="int64")


def _as_category(values: pd.Series, categories: Optional[List] = None) -> pd.Series:
    plain = values.astype(object).where(values.notna(), None)
    if categories is None:
        categories = list(pd.unique(plain.dropna()))
    return pd.Series(pd.Categorical(plain, categories=categories), index=values.index, name=values.name)


def _as_text(values: pd.Series) -> pd.Series:
    return values.astype(object).map(lambda v: v if pd.isna(v) else str(v))


def _unknown_materials(material: pd.Series) -> List[str]:
    present = material.dropna().astype(str)
    return sorted(set(present) - set(KNOWN_MATERIALS))


def normalize_records(
    df: pd.DataFrame, policy: Optional[NormalizationPolicy] = None
) -> pd.DataFrame:
    """Type and filter raw records; returns a new DataFrame.

    Group codes follow first-seen order so they stay stable when the output is
    normalized again.
    """
    policy = policy or NormalizationPolicy()
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise NormalizationError(f"Cannot normalize: missing columns {missing}")

    out = df.copy()

    if policy.drop_missing_slope_angle:
        mask = out["slope_angle"].isna()
        dropped = int(mask.sum())
        if dropped:
            logger.info("Dropped %d rows with missing slope_angle.", dropped)
        out = out.loc[~mask].reset_index(drop=True)

    if policy.rotational_energy_fill is not None:
        n_filled = int(out["rotational_kinetic_energy"].isna().sum())
        if n_filled:
            logger.info(
                "Filled %d missing rotational_kinetic_energy values with %s.",
                n_filled,
                policy.rotational_energy_fill,
            )
        out["rotational_kinetic_energy"] = out["rotational_kinetic_energy"].fillna(
            policy.rotational_energy_fill
        )

    out["slope_material"] = _as_text(out["slope_material"])
    unknown = _unknown_materials(out["slope_material"])
    if unknown:
        if policy.unknown_material == "raise":
            raise NormalizationError(f"Unknown slope materials: {unknown}")
        if policy.unknown_material == "warn":
            logger.warning(
                "Unknown slope materials %s; their indicator flags are all 0.", unknown
            )

    out["test_group"] = _as_category(out["test_group"])
    out["test_group_code"] = _first_seen_codes(out["test_group"].astype(object))
    material_categories = KNOWN_MATERIALS + unknown
    out["slope_material"] = _as_category(out["slope_material"], material_categories)

    material_text = out["slope_material"].astype(object)
    for category, flag in MATERIAL_FLAGS.items():
        out[flag] = (material_text == category).astype("int64")

    return out


__all__ = ["normalize_records", "MATERIAL_FLAGS", "KNOWN_MATERIALS", "INDICATOR_COLUMNS"]
