from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_CONFIG_PATH = Path("config.yaml")

UNKNOWN_MATERIAL_MODES = ("warn", "ignore", "raise")
DEGENERATE_MODES = ("raise", "exclude", "flag")


def load_config(path: str | os.PathLike | None = None) -> Dict[str, Any]:
    cfg_path = Path(path) if path else DEFAULT_CONFIG_PATH
    with open(cfg_path, "r") as f:
        return yaml.safe_load(f) or {}


def _as_bool(section: Dict[str, Any], key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


@dataclass(frozen=True)
class NormalizationPolicy:
    """Data-cleaning choices applied before features are derived.

    The defaults reproduce the field-test report: rows without a slope angle
    are dropped and a missing rotational energy counts as zero. Both are
    provisional simplifications, so they stay switchable from ``config.yaml``.
    """

    drop_missing_slope_angle: bool = True
    rotational_energy_fill: Optional[float] = 0.0
    unknown_material: str = "warn"
    on_degenerate: str = "raise"

    def __post_init__(self):
        if self.unknown_material not in UNKNOWN_MATERIAL_MODES:
            raise ValueError(
                f"unknown_material must be one of {UNKNOWN_MATERIAL_MODES}, got '{self.unknown_material}'"
            )
        if self.on_degenerate not in DEGENERATE_MODES:
            raise ValueError(
                f"on_degenerate must be one of {DEGENERATE_MODES}, got '{self.on_degenerate}'"
            )

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "NormalizationPolicy":
        policy_cfg = cfg.get("policy") or {}
        fill = policy_cfg.get("rotational_energy_fill", 0.0)
        return cls(
            drop_missing_slope_angle=_as_bool(policy_cfg, "drop_missing_slope_angle", True),
            rotational_energy_fill=None if fill is None else float(fill),
            unknown_material=str(policy_cfg.get("unknown_material", "warn")),
            on_degenerate=str(policy_cfg.get("on_degenerate", "raise")),
        )


__all__ = [
    "load_config",
    "DEFAULT_CONFIG_PATH",
    "NormalizationPolicy",
    "UNKNOWN_MATERIAL_MODES",
    "DEGENERATE_MODES",
]
