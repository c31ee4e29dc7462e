"""Utility helpers for IO, model adapters, and directory management."""

from .io import ensure_dirs, load_processed_dataset, save_processed_dataset

__all__ = ["ensure_dirs", "load_processed_dataset", "save_processed_dataset"]
