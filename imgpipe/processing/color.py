"""
Color adjustments and filters for pixel buffers.

Per-channel adjustments are expressed as curves on 0-1 values. 8-bit
buffers apply them through a 256-entry lookup table (cv2.LUT); float
buffers evaluate the curve directly. Curves touch color channels only,
alpha is carried through unchanged.
"""

import math
from typing import Callable

import cv2
import numpy as np

from imgpipe.core.buffer import PixelBuffer, PixelKind, convert

Curve = Callable[[np.ndarray], np.ndarray]


def brightness_curve(value: int) -> Curve:
    """Add ``value`` (in 8-bit units) to every channel."""
    offset = value / 255.0
    return lambda x: x + offset


def contrast_curve(contrast: float) -> Curve:
    """
    Scale distances from mid-gray.

    Args:
        contrast: Percentage change; 0 = no change, negative flattens
    """
    percent = ((100.0 + contrast) / 100.0) ** 2
    return lambda x: (x - 0.5) * percent + 0.5


def invert_curve() -> Curve:
    """Map every value v to 1 - v."""
    return lambda x: 1.0 - x


def create_lut(curve: Curve) -> np.ndarray:
    """
    Sample a curve into an 8-bit lookup table.

    Returns:
        256-entry uint8 LUT for use with cv2.LUT()
    """
    identity = np.arange(256, dtype=np.float32) / 255.0
    return np.clip(np.rint(curve(identity) * 255.0), 0, 255).astype(np.uint8)


def apply_lut(buffer: PixelBuffer, lut: np.ndarray) -> PixelBuffer:
    """Apply a LUT to the color channels of an 8-bit buffer."""
    color = np.ascontiguousarray(buffer.color)
    mapped = cv2.LUT(color, lut).reshape(color.shape)
    result = buffer.pixels.copy()
    result[:, :, :buffer.kind.color_channels] = mapped
    return buffer.with_pixels(result)


def apply_curve(buffer: PixelBuffer, curve: Curve) -> PixelBuffer:
    """Apply a curve to the color channels, with automatic type handling."""
    if not buffer.is_float:
        return apply_lut(buffer, create_lut(curve))
    result = buffer.pixels.copy()
    cc = buffer.kind.color_channels
    result[:, :, :cc] = np.clip(curve(result[:, :, :cc]), 0.0, 1.0)
    return buffer.with_pixels(result)


def brighten(buffer: PixelBuffer, value: int) -> PixelBuffer:
    return apply_curve(buffer, brightness_curve(value))


def adjust_contrast(buffer: PixelBuffer, contrast: float) -> PixelBuffer:
    return apply_curve(buffer, contrast_curve(contrast))


def invert(buffer: PixelBuffer) -> PixelBuffer:
    return apply_curve(buffer, invert_curve())


def hue_rotation_matrix(degrees: float) -> np.ndarray:
    """
    Luminance-preserving hue rotation matrix for RGB column vectors.

    Args:
        degrees: Rotation angle on the color wheel
    """
    cosv = math.cos(math.radians(degrees))
    sinv = math.sin(math.radians(degrees))
    return np.array([
        [0.213 + cosv * 0.787 - sinv * 0.213,
         0.715 - cosv * 0.715 - sinv * 0.715,
         0.072 - cosv * 0.072 + sinv * 0.928],
        [0.213 - cosv * 0.213 + sinv * 0.143,
         0.715 + cosv * 0.285 + sinv * 0.140,
         0.072 - cosv * 0.072 - sinv * 0.283],
        [0.213 - cosv * 0.213 - sinv * 0.787,
         0.715 - cosv * 0.715 + sinv * 0.715,
         0.072 + cosv * 0.928 + sinv * 0.072],
    ], dtype=np.float32)


def hue_rotate(buffer: PixelBuffer, degrees: int) -> PixelBuffer:
    """Rotate hue by ``degrees``. Gray buffers are returned unchanged."""
    if buffer.kind.color_channels != 3:
        return buffer.copy()
    matrix = hue_rotation_matrix(degrees)
    rgb = buffer.color.astype(np.float32) @ matrix.T
    result = buffer.pixels.copy()
    if buffer.is_float:
        result[:, :, :3] = np.clip(rgb, 0.0, 1.0)
    else:
        result[:, :, :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    return buffer.with_pixels(result)


def grayscale(buffer: PixelBuffer) -> PixelBuffer:
    """Convert to 8-bit luminance (L8). Alpha is dropped."""
    return convert(buffer, PixelKind.L8)


def blur(buffer: PixelBuffer, sigma: float) -> PixelBuffer:
    """
    Gaussian blur over all channels.

    Args:
        sigma: Standard deviation in pixels; values <= 0 leave the image as is
    """
    if sigma <= 0:
        return buffer.copy()
    blurred = cv2.GaussianBlur(
        buffer.pixels, (0, 0), sigmaX=sigma, borderType=cv2.BORDER_REPLICATE
    )
    return buffer.with_pixels(blurred)


def unsharpen(buffer: PixelBuffer, sigma: float, threshold: int) -> PixelBuffer:
    """
    Unsharp mask.

    For each channel, diff = |original - blurred|. Where diff exceeds
    ``threshold`` (8-bit units) the channel becomes original + diff,
    clamped; elsewhere it is unchanged.
    """
    blurred = blur(buffer, sigma).pixels
    scale = 1.0 if buffer.is_float else 255.0
    original = buffer.pixels.astype(np.float32) / scale
    diff = np.abs(original - blurred.astype(np.float32) / scale)
    sharpened = np.where(diff > threshold / 255.0, np.clip(original + diff, 0.0, 1.0), original)
    if buffer.is_float:
        return buffer.with_pixels(sharpened.astype(np.float32))
    return buffer.with_pixels(np.clip(np.rint(sharpened * 255.0), 0, 255).astype(np.uint8))
