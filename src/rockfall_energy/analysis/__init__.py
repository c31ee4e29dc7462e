"""Descriptive statistics."""

from .summary import ColumnSummary, describe_table, summarize_column

__all__ = ["ColumnSummary", "summarize_column", "describe_table"]
