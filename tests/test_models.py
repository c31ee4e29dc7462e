from __future__ import annotations

import numpy as np
import pytest

from rockfall_energy.models.energy import (
    MODEL_FAMILIES,
    ModelSpec,
    ResamplingConfig,
    fit_energy_model,
    out_of_fold_predictions,
)

RESAMPLING = ResamplingConfig(n_splits=3, n_repeats=2, random_state=0)


@pytest.mark.parametrize("family", MODEL_FAMILIES)
def test_fit_returns_model_with_predict(processed_df, family):
    model = fit_energy_model(processed_df, family, resampling=RESAMPLING)
    assert np.isfinite(model.rmse) and model.rmse > 0
    assert np.isfinite(model.r2)
    preds = model.predict(processed_df.head(5))
    assert preds.shape == (5,)
    assert np.isfinite(preds).all()


def test_log_linear_predicts_on_energy_scale(processed_df):
    model = fit_energy_model(processed_df, "log_linear", resampling=RESAMPLING)
    preds = model.predict(processed_df)
    assert (preds > 0).all()
    # Back-transformed predictions should be in the same range as the target.
    assert preds.max() < 10 * processed_df["total_energy"].max()


def test_tuned_families_report_best_params(processed_df):
    knn = fit_energy_model(processed_df, "knn", resampling=RESAMPLING)
    svm = fit_energy_model(processed_df, "svm_radial", resampling=RESAMPLING)
    assert "knn__n_neighbors" in knn.best_params
    assert {"svr__C", "svr__gamma"} <= set(svm.best_params)


def test_fixed_seed_is_reproducible(processed_df):
    a = fit_energy_model(processed_df, "knn", resampling=RESAMPLING)
    b = fit_energy_model(processed_df, "knn", resampling=RESAMPLING)
    assert a.rmse == pytest.approx(b.rmse)
    assert a.best_params == b.best_params


def test_custom_spec(processed_df):
    spec = ModelSpec(target="total_energy", predictors=("slope_length", "weight", "is_rock"))
    model = fit_energy_model(processed_df, "linear", spec=spec, resampling=RESAMPLING)
    assert model.spec.predictors == ("slope_length", "weight", "is_rock")
    with pytest.raises(KeyError):
        model.predict(processed_df[["weight"]])


def test_too_few_rows(processed_df):
    with pytest.raises(ValueError, match="folds"):
        fit_energy_model(processed_df.head(2), "linear", resampling=RESAMPLING)


def test_unknown_family(processed_df):
    with pytest.raises(ValueError, match="Unknown model family"):
        fit_energy_model(processed_df, "random_forest", resampling=RESAMPLING)


def test_out_of_fold_predictions_cover_every_row(processed_df):
    model = fit_energy_model(processed_df, "linear", resampling=RESAMPLING)
    y, preds = out_of_fold_predictions(model, processed_df, RESAMPLING)
    assert len(y) == len(preds) == len(processed_df)
