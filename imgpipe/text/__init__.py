"""
Text module - Font handles and multi-line text layout.
"""

from imgpipe.text.font import Font
from imgpipe.text.layout import (
    Scale,
    LineLayout,
    VMetrics,
    v_metrics,
    font_height,
    measure_line_width,
    split_lines,
    wrap_text,
    layout_text,
    render_line_mask,
    draw_text,
)

__all__ = [
    "Font",
    "Scale",
    "LineLayout",
    "VMetrics",
    "v_metrics",
    "font_height",
    "measure_line_width",
    "split_lines",
    "wrap_text",
    "layout_text",
    "render_line_mask",
    "draw_text",
]
