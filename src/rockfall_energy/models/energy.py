from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import joblib
import numpy as np
import pandas as pd
from sklearn.base import clone
from sklearn.compose import TransformedTargetRegressor
from sklearn.linear_model import LinearRegression
from sklearn.model_selection import GridSearchCV, KFold, RepeatedKFold, cross_val_predict, cross_validate
from sklearn.neighbors import KNeighborsRegressor
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.svm import SVR

from ..config import load_config
from ..utils.io import ensure_dirs, load_processed_dataset
from ..visualization.plots import PlotStyle, draw_parity

logger = logging.getLogger(__name__)

MODEL_FAMILIES: Tuple[str, ...] = ("linear", "log_linear", "knn", "svm_radial")

DEFAULT_TARGET = "total_energy"
DEFAULT_PREDICTORS: Tuple[str, ...] = ("slope_height", "slope_angle", "weight")

KNN_NEIGHBORS = [3, 5, 7, 9, 11, 13, 15]
SVR_C = [0.25, 0.5, 1.0, 2.0, 4.0, 8.0, 16.0, 32.0]
SVR_GAMMA = ["scale", 0.1, 0.5, 1.0]

SCORING = {"rmse": "neg_root_mean_squared_error", "r2": "r2"}


@dataclass(frozen=True)
class ModelSpec:
    """Target column and predictor columns, by name."""

    target: str = DEFAULT_TARGET
    predictors: Tuple[str, ...] = DEFAULT_PREDICTORS

    def columns(self) -> List[str]:
        return [self.target, *self.predictors]


@dataclass(frozen=True)
class ResamplingConfig:
    n_splits: int = 10
    n_repeats: int = 3
    random_state: int = 42

    def splitter(self) -> RepeatedKFold:
        return RepeatedKFold(n_splits=self.n_splits, n_repeats=self.n_repeats, random_state=self.random_state)

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "ResamplingConfig":
        res = (cfg.get("models") or {}).get("resampling") or {}
        return cls(
            n_splits=int(res.get("n_splits", 10)),
            n_repeats=int(res.get("n_repeats", 3)),
            random_state=int(res.get("random_state", 42)),
        )


@dataclass
class FittedModel:
    family: str
    spec: ModelSpec
    estimator: Any
    rmse: float
    rmse_sd: float
    r2: float
    r2_sd: float
    n_rows: int
    best_params: Dict[str, Any] = field(default_factory=dict)

    def predict(self, new_rows: pd.DataFrame) -> np.ndarray:
        missing = [c for c in self.spec.predictors if c not in new_rows.columns]
        if missing:
            raise KeyError(f"Missing predictor columns: {missing}")
        X = new_rows[list(self.spec.predictors)].astype(float)
        return np.asarray(self.estimator.predict(X), dtype=float)

    def metrics(self) -> Dict[str, float]:
        return {
            "RMSE": self.rmse,
            "RMSE_sd": self.rmse_sd,
            "R2": self.r2,
            "R2_sd": self.r2_sd,
            "n_rows": self.n_rows,
        }


def _make_estimator(family: str, n_train_min: int) -> Tuple[Any, Dict[str, list]]:
    if family == "linear":
        return LinearRegression(), {}
    if family == "log_linear":
        model = TransformedTargetRegressor(
            regressor=LinearRegression(), func=np.log, inverse_func=np.exp, check_inverse=False
        )
        return model, {}
    if family == "knn":
        pipe = Pipeline([("scale", StandardScaler()), ("knn", KNeighborsRegressor())])
        ks = [k for k in KNN_NEIGHBORS if k <= n_train_min] or [max(1, n_train_min)]
        return pipe, {"knn__n_neighbors": ks}
    if family == "svm_radial":
        pipe = Pipeline([("scale", StandardScaler()), ("svr", SVR(kernel="rbf"))])
        return pipe, {"svr__C": SVR_C, "svr__gamma": SVR_GAMMA}
    raise ValueError(f"Unknown model family '{family}'. Expected one of {MODEL_FAMILIES}.")


def _prepare_matrix(df: pd.DataFrame, spec: ModelSpec, family: str) -> Tuple[pd.DataFrame, pd.Series]:
    missing = [c for c in spec.columns() if c not in df.columns]
    if missing:
        raise KeyError(f"Columns not in dataset: {missing}")
    X = pd.DataFrame({c: pd.to_numeric(df[c], errors="coerce") for c in spec.predictors})
    y = pd.to_numeric(df[spec.target], errors="coerce")
    mask = (~X.isna().any(axis=1)) & (~y.isna()) & np.isfinite(y)
    if family == "log_linear":
        mask &= y > 0
    dropped = int((~mask).sum())
    if dropped:
        logger.info("%s: dropped %d rows with missing or unusable values.", family, dropped)
    return X.loc[mask].reset_index(drop=True), y.loc[mask].reset_index(drop=True)


def fit_energy_model(
    df: pd.DataFrame,
    family: str,
    spec: Optional[ModelSpec] = None,
    resampling: Optional[ResamplingConfig] = None,
) -> FittedModel:
    """Fit one model family with repeated k-fold resampling.

    RMSE and R² are averaged over the resampling folds on the target scale
    (the log-linear model is scored after back-transforming). Tuned families
    pick the parameters with the lowest mean RMSE and are refit on all rows.
    """
    spec = spec or ModelSpec()
    resampling = resampling or ResamplingConfig()
    if family not in MODEL_FAMILIES:
        raise ValueError(f"Unknown model family '{family}'. Expected one of {MODEL_FAMILIES}.")

    X, y = _prepare_matrix(df, spec, family)
    n = len(X)
    if n < max(resampling.n_splits, 2):
        raise ValueError(f"{family}: {n} usable rows is fewer than {resampling.n_splits} folds.")
    n_train_min = n - int(np.ceil(n / resampling.n_splits))

    estimator, grid = _make_estimator(family, n_train_min)
    cv = resampling.splitter()
    if grid:
        search = GridSearchCV(estimator, grid, cv=cv, scoring=SCORING, refit="rmse")
        search.fit(X, y)
        best = search.best_index_
        res = search.cv_results_
        rmse = -float(res["mean_test_rmse"][best])
        rmse_sd = float(res["std_test_rmse"][best])
        r2 = float(res["mean_test_r2"][best])
        r2_sd = float(res["std_test_r2"][best])
        fitted = search.best_estimator_
        best_params = dict(search.best_params_)
    else:
        scores = cross_validate(estimator, X, y, cv=cv, scoring=SCORING)
        rmse = -float(np.mean(scores["test_rmse"]))
        rmse_sd = float(np.std(scores["test_rmse"]))
        r2 = float(np.mean(scores["test_r2"]))
        r2_sd = float(np.std(scores["test_r2"]))
        fitted = clone(estimator).fit(X, y)
        best_params = {}

    logger.info("%s: RMSE=%.3f R2=%.3f over %d rows", family, rmse, r2, n)
    return FittedModel(
        family=family,
        spec=spec,
        estimator=fitted,
        rmse=rmse,
        rmse_sd=rmse_sd,
        r2=r2,
        r2_sd=r2_sd,
        n_rows=n,
        best_params=best_params,
    )


def out_of_fold_predictions(model: FittedModel, df: pd.DataFrame, resampling: ResamplingConfig) -> Tuple[pd.Series, np.ndarray]:
    X, y = _prepare_matrix(df, model.spec, model.family)
    cv = KFold(n_splits=resampling.n_splits, shuffle=True, random_state=resampling.random_state)
    return y, cross_val_predict(clone(model.estimator), X, y, cv=cv)


@dataclass
class EnergyModelsResult:
    models: Dict[str, FittedModel]
    comparison_path: Path
    metrics_path: Path
    model_paths: Dict[str, Path]
    parity_plots: Dict[str, Path]


def _spec_from_config(cfg: Dict[str, Any]) -> ModelSpec:
    models_cfg = cfg.get("models") or {}
    return ModelSpec(
        target=str(models_cfg.get("target", DEFAULT_TARGET)),
        predictors=tuple(models_cfg.get("predictors", DEFAULT_PREDICTORS)),
    )


def train_energy_models(
    config_path: str | os.PathLike | None = None,
    families: Optional[Sequence[str]] = None,
    style: Optional[PlotStyle] = None,
) -> EnergyModelsResult:
    cfg = load_config(config_path)
    paths_cfg = cfg["paths"]
    outs_dir = Path(paths_cfg["outputs"]) / "tables"
    figs_dir = Path(paths_cfg["outputs"]) / "figs"
    models_dir = Path(paths_cfg.get("models", "models")) / "checkpoints"
    ensure_dirs(outs_dir, figs_dir, models_dir)

    df = load_processed_dataset(paths_cfg)
    spec = _spec_from_config(cfg)
    resampling = ResamplingConfig.from_config(cfg)
    families = list(families or (cfg.get("models") or {}).get("families", MODEL_FAMILIES))
    style = style or PlotStyle()

    models: Dict[str, FittedModel] = {}
    model_paths: Dict[str, Path] = {}
    parity_plots: Dict[str, Path] = {}
    for family in families:
        model = fit_energy_model(df, family, spec=spec, resampling=resampling)
        models[family] = model

        pack = {
            "model": model.estimator,
            "features": list(spec.predictors),
            "target": spec.target,
            "family": family,
            "best_params": model.best_params,
        }
        model_paths[family] = models_dir / f"energy_{family}.joblib"
        joblib.dump(pack, model_paths[family])

        y_obs, y_oof = out_of_fold_predictions(model, df, resampling)
        parity_plots[family] = draw_parity(
            y_obs,
            y_oof,
            figs_dir / f"energy_{family}_parity.png",
            style,
            title=f"{family}: out-of-fold predictions",
        )

    comparison = pd.DataFrame({fam: m.metrics() for fam, m in models.items()}).T
    comparison.index.name = "family"
    comparison_path = outs_dir / "energy_model_comparison.csv"
    comparison.to_csv(comparison_path)

    metrics_path = outs_dir / "energy_model_metrics.json"
    with open(metrics_path, "w") as f:
        json.dump(
            {
                "target": spec.target,
                "predictors": list(spec.predictors),
                "resampling": {
                    "method": "repeatedcv",
                    "n_splits": resampling.n_splits,
                    "n_repeats": resampling.n_repeats,
                    "random_state": resampling.random_state,
                },
                "models": {
                    fam: {**m.metrics(), "best_params": {k: str(v) for k, v in m.best_params.items()}}
                    for fam, m in models.items()
                },
            },
            f,
            indent=2,
        )

    return EnergyModelsResult(
        models=models,
        comparison_path=comparison_path,
        metrics_path=metrics_path,
        model_paths=model_paths,
        parity_plots=parity_plots,
    )


__all__ = [
    "MODEL_FAMILIES",
    "ModelSpec",
    "ResamplingConfig",
    "FittedModel",
    "EnergyModelsResult",
    "fit_energy_model",
    "out_of_fold_predictions",
    "train_energy_models",
]
