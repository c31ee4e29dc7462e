"""Exception and warning types raised by the rockfall data pipeline.

Loader and normalizer errors abort a run. Data-quality findings are warnings:
the affected rows stay in the table and can be queried afterwards.
"""

from __future__ import annotations

from typing import Iterable, List


class RockfallDataError(Exception):
    """Base class for pipeline failures."""


class LoadError(RockfallDataError):
    """Raw file is missing, unreadable, malformed, or lacks required columns."""


class NormalizationError(RockfallDataError):
    """Input table cannot be normalized under the active policy."""


class DivisionByZero(RockfallDataError, ZeroDivisionError):
    """A derived quantity is undefined for some rows (zero slope angle or zero potential energy)."""

    def __init__(self, message: str, rows: Iterable = ()):
        super().__init__(message)
        self.rows: List = list(rows)


class DataQualityWarning(UserWarning):
    """Non-fatal anomaly in the data, e.g. impact energy above potential energy."""


__all__ = [
    "RockfallDataError",
    "LoadError",
    "NormalizationError",
    "DivisionByZero",
    "DataQualityWarning",
]
