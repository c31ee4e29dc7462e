from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, List

import joblib
import numpy as np
import pandas as pd


@dataclass
class RegressorAdapter:
    """
    Wraps a saved energy model pack: {"model", "features", "target", "family"}.
    """

    pack: Dict

    def __post_init__(self):
        self.model = self.pack["model"]
        self.features: List[str] = list(self.pack["features"])
        self.target: str = self.pack.get("target", "total_energy")
        self.family: str = self.pack.get("family", self.model.__class__.__name__)

    @classmethod
    def load(cls, path: str | os.PathLike) -> "RegressorAdapter":
        return cls(joblib.load(path))

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        X = X[self.features].copy()
        for col in X.columns:
            X[col] = pd.to_numeric(X[col], errors="coerce")
        return np.asarray(self.model.predict(X), dtype=float)


__all__ = ["RegressorAdapter"]
