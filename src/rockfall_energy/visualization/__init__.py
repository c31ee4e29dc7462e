from .plots import PlotStyle, draw_correlation, draw_pairs, draw_parity, draw_summary_histogram

__all__ = ["PlotStyle", "draw_summary_histogram", "draw_pairs", "draw_correlation", "draw_parity"]
