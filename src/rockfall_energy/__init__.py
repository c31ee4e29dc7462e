"""Rockfall impact-energy case study: data preparation, summaries and models."""

from .config import NormalizationPolicy, load_config
from .errors import DataQualityWarning, DivisionByZero, LoadError, NormalizationError
from .pipeline import build_dataset, run_preprocess

__all__ = [
    "NormalizationPolicy",
    "load_config",
    "LoadError",
    "NormalizationError",
    "DivisionByZero",
    "DataQualityWarning",
    "build_dataset",
    "run_preprocess",
]
