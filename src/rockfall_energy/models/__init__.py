"""Model training utilities."""

from .energy import (
    MODEL_FAMILIES,
    FittedModel,
    ModelSpec,
    ResamplingConfig,
    fit_energy_model,
    train_energy_models,
)

__all__ = [
    "MODEL_FAMILIES",
    "FittedModel",
    "ModelSpec",
    "ResamplingConfig",
    "fit_energy_model",
    "train_energy_models",
]
