from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from ..analysis.summary import ColumnSummary
from ..schema import KNOWN_MATERIALS


def _default_material_colors() -> Dict[str, str]:
    return {"Rock": "#8F2727", "Colluvium": "#DCBCBC", "Weathered Rock": "#7C0000"}


@dataclass(frozen=True)
class PlotStyle:
    """Colors and layout shared by every figure.

    Passed explicitly to each drawing function. ``material_colors`` must cover
    every known slope material.
    """

    dark: str = "#8F2727"
    dark_highlight: str = "#7C0000"
    light: str = "#DCBCBC"
    light_highlight: str = "#C79999"
    unknown_color: str = "#999999"
    figsize: Tuple[float, float] = (6.0, 4.0)
    margins: Tuple[float, float, float, float] = (0.12, 0.12, 0.95, 0.88)
    dpi: int = 200
    material_colors: Dict[str, str] = field(default_factory=_default_material_colors)

    def __post_init__(self):
        missing = [m for m in KNOWN_MATERIALS if m not in self.material_colors]
        if missing:
            raise ValueError(f"material_colors has no entry for: {missing}")

    def color_for(self, material) -> str:
        return self.material_colors.get(material, self.unknown_color)


def _savefig(fig, path: Path, style: PlotStyle) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=style.dpi, bbox_inches="tight")
    plt.close(fig)
    return path


def _new_figure(style: PlotStyle, figsize=None):
    fig, ax = plt.subplots(figsize=figsize or style.figsize)
    left, bottom, right, top = style.margins
    fig.subplots_adjust(left=left, bottom=bottom, right=right, top=top)
    return fig, ax


def draw_summary_histogram(summary: ColumnSummary, out_png: Path, style: PlotStyle) -> Path:
    fig, ax = _new_figure(style)
    ax.bar(
        summary.edges[:-1],
        summary.densities,
        width=summary.widths,
        align="edge",
        color=style.dark,
        edgecolor=style.dark_highlight,
    )
    for q in summary.quantiles.values():
        ax.axvline(q, linestyle="--", linewidth=1.25, color="black")
    ax.set_xlim(summary.edges[0], summary.edges[-1])
    ax.set_yticks([])
    ax.set_ylabel("")
    ax.set_xlabel(summary.label)
    ax.set_title(summary.title)
    return _savefig(fig, out_png, style)


def _material_palette(df: pd.DataFrame, style: PlotStyle) -> Dict[str, str]:
    present = df["slope_material"].dropna().astype(str).unique()
    return {m: style.color_for(m) for m in present}


def draw_pairs(df: pd.DataFrame, columns: Sequence[str], out_png: Path, style: PlotStyle) -> Path:
    cols = [c for c in columns if c in df.columns]
    data = df[cols].copy()
    hue = None
    palette = None
    if "slope_material" in df.columns:
        data["slope_material"] = df["slope_material"].astype(object)
        palette = _material_palette(df, style)
        hue = "slope_material" if palette else None
    grid = sns.pairplot(data.dropna(subset=cols), vars=cols, hue=hue, palette=palette, corner=False)
    return _savefig(grid.figure, out_png, style)


def draw_correlation(df: pd.DataFrame, columns: Sequence[str], out_png: Path, style: PlotStyle) -> Path:
    cols = [c for c in columns if c in df.columns]
    corr = df[cols].apply(pd.to_numeric, errors="coerce").corr()
    fig, ax = _new_figure(style, figsize=(1.0 + 0.8 * len(cols), 0.8 * len(cols)))
    sns.heatmap(corr, cmap="coolwarm", center=0, vmin=-1, vmax=1, annot=True, fmt=".2f", ax=ax)
    ax.set_title("Correlation matrix")
    return _savefig(fig, out_png, style)


def draw_parity(y_true, y_pred, out_png: Path, style: PlotStyle, title: str = "Predicted vs observed") -> Path:
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    fig, ax = _new_figure(style, figsize=(5, 5))
    ax.scatter(y_true, y_pred, s=10, color=style.dark, alpha=0.7)
    lo = float(min(np.min(y_true), np.min(y_pred)))
    hi = float(max(np.max(y_true), np.max(y_pred)))
    ax.plot([lo, hi], [lo, hi], color=style.light_highlight, linestyle="--")
    ax.set_xlabel("Observed total energy")
    ax.set_ylabel("Predicted total energy")
    ax.set_title(title)
    return _savefig(fig, out_png, style)


__all__ = ["PlotStyle", "draw_summary_histogram", "draw_pairs", "draw_correlation", "draw_parity"]
