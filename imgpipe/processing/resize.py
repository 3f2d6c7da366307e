"""
Resize dispatch: resampling filters, resize modes, thumbnails and crops.

Filter names map onto OpenCV interpolation flags:

    Nearest     cv2.INTER_NEAREST
    Triangle    cv2.INTER_LINEAR (bilinear)
    CatmullRom  cv2.INTER_CUBIC
    Gaussian    Gaussian prefilter + cv2.INTER_LINEAR
    Lanczos3    cv2.INTER_LANCZOS4
"""

import logging
import math
from enum import Enum

import cv2
import numpy as np
from scipy.ndimage import gaussian_filter

from imgpipe.core.buffer import PixelBuffer
from imgpipe.core.errors import (
    InvalidGeometryError,
    InvalidResizeFilterError,
    InvalidResizeModeError,
)

logger = logging.getLogger(__name__)

FILTERS: dict[str, int] = {
    "Nearest": cv2.INTER_NEAREST,
    "Triangle": cv2.INTER_LINEAR,
    "CatmullRom": cv2.INTER_CUBIC,
    "Gaussian": cv2.INTER_LINEAR,
    "Lanczos3": cv2.INTER_LANCZOS4,
}


class ResizeMode(Enum):
    """How the target box is interpreted."""
    FIT = "fit"      # Preserve aspect ratio, fit inside the box
    EXACT = "exact"  # Stretch to the box
    FILL = "fill"    # Preserve aspect ratio, cover the box, crop overflow

    @classmethod
    def from_name(cls, name: "str | ResizeMode") -> "ResizeMode":
        if isinstance(name, ResizeMode):
            return name
        try:
            return cls(name.lower())
        except ValueError:
            raise InvalidResizeModeError(
                f"Unknown resize mode: {name!r}. Available: {[m.value for m in cls]}"
            ) from None


def filter_from_name(name: str) -> int:
    """
    Look up the interpolation flag for a filter name.

    Raises:
        InvalidResizeFilterError: If the name is not a known filter
    """
    if name not in FILTERS:
        raise InvalidResizeFilterError(
            f"Unknown resize filter: {name!r}. Available: {list(FILTERS)}"
        )
    return FILTERS[name]


def resize_dimensions(
    width: int,
    height: int,
    nwidth: int,
    nheight: int,
    fill: bool,
) -> tuple[int, int]:
    """
    Compute the aspect-preserving size for a (nwidth, nheight) box.

    With ``fill`` the result covers the box, otherwise it fits inside it.
    Both sides are rounded half up and never smaller than 1.
    """
    wratio = nwidth / width
    hratio = nheight / height
    ratio = max(wratio, hratio) if fill else min(wratio, hratio)
    return (max(_round_half_up(width * ratio), 1), max(_round_half_up(height * ratio), 1))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _check_target(w: int, h: int) -> None:
    if w <= 0 or h <= 0:
        raise InvalidGeometryError(f"Target size must be positive, got {w}x{h}")


def _gaussian_prefilter(pixels: np.ndarray, sx: float, sy: float) -> np.ndarray:
    """Low-pass each channel with a sigma matched to the scale factors."""
    sigma = (0.5 * max(1.0, sy), 0.5 * max(1.0, sx), 0)
    blurred = gaussian_filter(pixels.astype(np.float32), sigma=sigma)
    if pixels.dtype == np.uint8:
        return np.clip(np.rint(blurred), 0, 255).astype(np.uint8)
    return blurred


def scale(buffer: PixelBuffer, w: int, h: int, filter_name: str = "Triangle") -> PixelBuffer:
    """Resample to exactly w x h with a named filter."""
    interpolation = filter_from_name(filter_name)
    _check_target(w, h)
    pixels = buffer.pixels
    if filter_name == "Gaussian":
        pixels = _gaussian_prefilter(pixels, buffer.width / w, buffer.height / h)
    return buffer.with_pixels(cv2.resize(pixels, (w, h), interpolation=interpolation))


def resize(
    buffer: PixelBuffer,
    w: int,
    h: int,
    filter_name: str,
    mode: ResizeMode | str = ResizeMode.FIT,
) -> PixelBuffer:
    """
    Resize according to ``mode``.

    Args:
        buffer: Source buffer
        w: Target box width
        h: Target box height
        filter_name: Resampling filter name (see FILTERS)
        mode: Fit, Exact or Fill

    Returns:
        New buffer. Exact and Fill always return exactly w x h.

    Raises:
        InvalidResizeFilterError: If the filter name is unknown
        InvalidGeometryError: If w or h is not positive
    """
    filter_from_name(filter_name)
    _check_target(w, h)
    mode = ResizeMode.from_name(mode)

    if mode == ResizeMode.EXACT:
        return scale(buffer, w, h, filter_name)

    if mode == ResizeMode.FIT:
        nw, nh = resize_dimensions(buffer.width, buffer.height, w, h, fill=False)
        return scale(buffer, nw, nh, filter_name)

    # Fill: cover the box, then crop the centered w x h window
    nw, nh = resize_dimensions(buffer.width, buffer.height, w, h, fill=True)
    covered = scale(buffer, nw, nh, filter_name)
    x = (covered.width - w) // 2
    y = (covered.height - h) // 2
    return covered.with_pixels(covered.pixels[y:y + h, x:x + w])


def thumbnail(buffer: PixelBuffer, w: int, h: int, exact: bool = False) -> PixelBuffer:
    """
    Downscale with area averaging.

    With ``exact`` the result is exactly w x h. Otherwise the aspect ratio
    is kept and the image is only ever shrunk: a buffer already inside the
    box is returned unchanged.
    """
    _check_target(w, h)
    if exact:
        nw, nh = w, h
    elif buffer.width <= w and buffer.height <= h:
        return buffer.copy()
    else:
        nw, nh = resize_dimensions(buffer.width, buffer.height, w, h, fill=False)
    return buffer.with_pixels(cv2.resize(buffer.pixels, (nw, nh), interpolation=cv2.INTER_AREA))


def crop(buffer: PixelBuffer, x: int, y: int, w: int, h: int) -> PixelBuffer:
    """
    Extract a w x h region at (x, y).

    The region is clamped to the buffer bounds; a warning is logged when
    clamping changes it.

    Raises:
        InvalidGeometryError: If the clamped region is empty
    """
    x0 = min(max(x, 0), buffer.width)
    y0 = min(max(y, 0), buffer.height)
    x1 = min(max(x + w, 0), buffer.width)
    y1 = min(max(y + h, 0), buffer.height)

    if (x0, y0, x1 - x0, y1 - y0) != (x, y, w, h):
        logger.warning(
            "Crop region (%d, %d, %d, %d) exceeds %dx%d buffer; clamped to (%d, %d, %d, %d)",
            x, y, w, h, buffer.width, buffer.height, x0, y0, x1 - x0, y1 - y0,
        )
    if x1 <= x0 or y1 <= y0:
        raise InvalidGeometryError(
            f"Crop region ({x}, {y}, {w}, {h}) is empty within {buffer.width}x{buffer.height}"
        )
    return buffer.with_pixels(buffer.pixels[y0:y1, x0:x1].copy())
