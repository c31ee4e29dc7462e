"""Data ingestion, normalization and exploratory scan."""

from .load import load_raw_records
from .normalize import normalize_records
from .scan import scan_dataset

__all__ = ["load_raw_records", "normalize_records", "scan_dataset"]
