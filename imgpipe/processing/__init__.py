"""
Processing module - Resizing, compositing and color adjustments.

This module provides:
- Resize dispatch: named filters, Fit/Exact/Fill modes, thumbnails, crops
- Compositor: overlay, tile, color blend, flips and rotations
- Color: brightness, contrast, hue rotation, invert, grayscale, blur, unsharpen
"""

from imgpipe.processing.resize import (
    FILTERS,
    ResizeMode,
    filter_from_name,
    resize_dimensions,
    scale,
    resize,
    thumbnail,
    crop,
)
from imgpipe.processing.compositor import (
    overlay,
    tile,
    color_blend,
    flip_horizontal,
    flip_vertical,
    rotate90,
    rotate180,
    rotate270,
)
from imgpipe.processing.color import (
    brightness_curve,
    contrast_curve,
    invert_curve,
    create_lut,
    apply_lut,
    apply_curve,
    brighten,
    adjust_contrast,
    invert,
    hue_rotation_matrix,
    hue_rotate,
    grayscale,
    blur,
    unsharpen,
)

__all__ = [
    # Resize
    "FILTERS",
    "ResizeMode",
    "filter_from_name",
    "resize_dimensions",
    "scale",
    "resize",
    "thumbnail",
    "crop",
    # Compositing
    "overlay",
    "tile",
    "color_blend",
    "flip_horizontal",
    "flip_vertical",
    "rotate90",
    "rotate180",
    "rotate270",
    # Color
    "brightness_curve",
    "contrast_curve",
    "invert_curve",
    "create_lut",
    "apply_lut",
    "apply_curve",
    "brighten",
    "adjust_contrast",
    "invert",
    "hue_rotation_matrix",
    "hue_rotate",
    "grayscale",
    "blur",
    "unsharpen",
]
