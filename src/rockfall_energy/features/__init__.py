"""Physics-derived features."""

from .derive import data_quality_summary, derive_features, energy_ratio_anomalies

__all__ = ["derive_features", "energy_ratio_anomalies", "data_quality_summary"]
