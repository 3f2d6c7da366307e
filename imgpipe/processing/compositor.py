"""
Pixel-level compositing: overlay, tile, color blend, flips and rotations.

All functions return a new PixelBuffer and leave their inputs untouched.
"""

import logging

import numpy as np

from imgpipe.core.buffer import (
    LUMA_WEIGHTS,
    PixelBuffer,
    convert,
    to_unit_float,
    from_unit_float,
)

logger = logging.getLogger(__name__)


def clip_region(
    canvas_w: int,
    canvas_h: int,
    layer_w: int,
    layer_h: int,
    x: int,
    y: int,
) -> tuple[slice, slice, slice, slice] | None:
    """
    Intersect a layer placed at (x, y) with the canvas.

    Returns:
        (canvas_rows, canvas_cols, layer_rows, layer_cols) slices, or None
        if the layer lies entirely outside the canvas
    """
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + layer_w, canvas_w), min(y + layer_h, canvas_h)
    if x1 <= x0 or y1 <= y0:
        return None
    return (
        slice(y0, y1),
        slice(x0, x1),
        slice(y0 - y, y1 - y),
        slice(x0 - x, x1 - x),
    )


def overlay(canvas: PixelBuffer, layer: PixelBuffer, x: int, y: int) -> PixelBuffer:
    """
    Alpha-composite ``layer`` over ``canvas`` with its top-left at (x, y).

    Offsets may be negative or past the canvas edge; whatever falls outside
    the canvas is dropped with a warning. The layer's alpha (if any) weights
    the blend. If the canvas has alpha, it becomes a_top + a_bottom * (1 - a_top).
    """
    region = clip_region(canvas.width, canvas.height, layer.width, layer.height, x, y)
    if region is None:
        logger.warning(
            "Overlay %dx%d at (%d, %d) lies outside the %dx%d canvas",
            layer.width, layer.height, x, y, canvas.width, canvas.height,
        )
        return canvas.copy()
    rows, cols, lrows, lcols = region
    if (lrows.stop - lrows.start, lcols.stop - lcols.start) != (layer.height, layer.width):
        logger.warning(
            "Overlay %dx%d at (%d, %d) clipped to the %dx%d canvas",
            layer.width, layer.height, x, y, canvas.width, canvas.height,
        )

    top_color = to_unit_float(convert(layer, canvas.kind).color[lrows, lcols])
    if layer.has_alpha:
        top_alpha = to_unit_float(layer.pixels[lrows, lcols, -1:])
    else:
        top_alpha = np.ones(top_color.shape[:2] + (1,), dtype=np.float32)

    result = canvas.pixels.copy()
    bottom = to_unit_float(canvas.pixels[rows, cols])
    bottom_color = bottom[:, :, :canvas.kind.color_channels]

    if canvas.has_alpha:
        bottom_alpha = bottom[:, :, -1:]
        out_alpha = top_alpha + bottom_alpha * (1.0 - top_alpha)
        weighted = top_color * top_alpha + bottom_color * bottom_alpha * (1.0 - top_alpha)
        out_color = np.divide(
            weighted,
            out_alpha,
            out=np.zeros_like(weighted),
            where=out_alpha > 0,
        )
        blended = np.concatenate([out_color, out_alpha], axis=2)
    else:
        blended = top_color * top_alpha + bottom_color * (1.0 - top_alpha)

    result[rows, cols] = from_unit_float(blended, canvas.kind)
    return canvas.with_pixels(result)


def tile(canvas: PixelBuffer, pattern: PixelBuffer) -> PixelBuffer:
    """
    Repeat ``pattern`` across the canvas from the origin, overwriting it.

    The pattern is converted to the canvas kind; the canvas keeps its size.
    """
    pattern = convert(pattern, canvas.kind)
    reps_y = -(-canvas.height // pattern.height)
    reps_x = -(-canvas.width // pattern.width)
    tiled = np.tile(pattern.pixels, (reps_y, reps_x, 1))
    return canvas.with_pixels(tiled[:canvas.height, :canvas.width])


def color_blend(buffer: PixelBuffer, r: int, g: int, b: int) -> PixelBuffer:
    """
    Average every color channel 50/50 with a constant color.

    For 8-bit kinds each channel becomes ``orig // 2 + c // 2`` (integer
    division on both halves). Alpha is left as is. Gray kinds blend with
    the luma of the color.
    """
    rgb = np.array([r, g, b], dtype=np.float32)
    if buffer.kind.color_channels == 1:
        constant = np.array([np.rint(rgb @ LUMA_WEIGHTS)], dtype=np.float32)
    else:
        constant = rgb

    result = buffer.pixels.copy()
    cc = buffer.kind.color_channels
    if buffer.is_float:
        result[:, :, :cc] = result[:, :, :cc] / 2.0 + (constant / 255.0) / 2.0
    else:
        half = (constant.astype(np.uint8) // 2).astype(np.uint8)
        result[:, :, :cc] = result[:, :, :cc] // 2 + half
    return buffer.with_pixels(result)


def flip_horizontal(buffer: PixelBuffer) -> PixelBuffer:
    """Mirror left to right."""
    return buffer.with_pixels(buffer.pixels[:, ::-1])


def flip_vertical(buffer: PixelBuffer) -> PixelBuffer:
    """Mirror top to bottom."""
    return buffer.with_pixels(buffer.pixels[::-1, :])


def rotate90(buffer: PixelBuffer) -> PixelBuffer:
    """Rotate 90 degrees clockwise (width and height swap)."""
    return buffer.with_pixels(np.rot90(buffer.pixels, k=-1))


def rotate180(buffer: PixelBuffer) -> PixelBuffer:
    """Rotate 180 degrees."""
    return buffer.with_pixels(np.rot90(buffer.pixels, k=2))


def rotate270(buffer: PixelBuffer) -> PixelBuffer:
    """Rotate 270 degrees clockwise (width and height swap)."""
    return buffer.with_pixels(np.rot90(buffer.pixels, k=1))
