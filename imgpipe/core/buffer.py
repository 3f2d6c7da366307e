"""
Pixel buffers for the imgpipe framework.

A PixelBuffer is an (H, W, C) numpy array tagged with its PixelKind.
Channels are always stored in RGB(A) order; BGR only exists inside the
codec module where OpenCV is called.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from imgpipe.core.errors import InvalidGeometryError, InvalidImageTypeError

# Rec. 709 luma weights, as used for grayscale conversion.
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float32)


class PixelKind(Enum):
    """Supported channel layouts. Values are the serialized type names."""
    RGB8 = "RgbImage"
    RGBA8 = "RgbaImage"
    L8 = "GrayImage"
    LA8 = "GrayAlphaImage"
    RGB32F = "Rgb32FImage"
    RGBA32F = "Rgba32FImage"

    @classmethod
    def from_name(cls, name: str) -> "PixelKind":
        """
        Look up a kind by serialized name ("RgbImage") or short name ("rgb8").

        Raises:
            InvalidImageTypeError: If the name is not recognized
        """
        for kind in cls:
            if name == kind.value or name.lower() == kind.name.lower():
                return kind
        available = [k.value for k in cls]
        raise InvalidImageTypeError(f"Unknown image type: {name!r}. Available: {available}")

    @property
    def channels(self) -> int:
        return _KIND_LAYOUT[self][0]

    @property
    def color_channels(self) -> int:
        """Number of channels excluding alpha."""
        return _KIND_LAYOUT[self][0] - (1 if self.has_alpha else 0)

    @property
    def has_alpha(self) -> bool:
        return _KIND_LAYOUT[self][1]

    @property
    def is_float(self) -> bool:
        return _KIND_LAYOUT[self][2] == np.float32

    @property
    def dtype(self) -> type:
        return _KIND_LAYOUT[self][2]

    @property
    def max_value(self) -> float:
        """Full-scale channel value (255 or 1.0)."""
        return 1.0 if self.is_float else 255


# kind -> (channels, has_alpha, dtype)
_KIND_LAYOUT = {
    PixelKind.RGB8: (3, False, np.uint8),
    PixelKind.RGBA8: (4, True, np.uint8),
    PixelKind.L8: (1, False, np.uint8),
    PixelKind.LA8: (2, True, np.uint8),
    PixelKind.RGB32F: (3, False, np.float32),
    PixelKind.RGBA32F: (4, True, np.float32),
}


@dataclass
class PixelBuffer:
    """
    A rectangular grid of pixels with a fixed channel layout.

    Operations treat buffers as values: they return a new PixelBuffer
    rather than writing into the one they were given.
    """
    pixels: np.ndarray  # Shape (H, W, C), RGB(A) order
    kind: PixelKind

    def __post_init__(self):
        if self.pixels.ndim == 2:
            self.pixels = self.pixels[:, :, np.newaxis]
        if self.pixels.ndim != 3 or self.pixels.shape[2] != self.kind.channels:
            raise ValueError(
                f"Pixel array of shape {self.pixels.shape} does not match {self.kind.name}"
            )
        if self.pixels.shape[0] == 0 or self.pixels.shape[1] == 0:
            raise InvalidGeometryError(
                f"Buffer must be at least 1x1, got {self.pixels.shape[1]}x{self.pixels.shape[0]}"
            )
        if self.pixels.dtype != self.kind.dtype:
            self.pixels = self.pixels.astype(self.kind.dtype)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)

    @property
    def has_alpha(self) -> bool:
        return self.kind.has_alpha

    @property
    def is_float(self) -> bool:
        return self.kind.is_float

    @property
    def color_channels(self) -> int:
        return self.kind.color_channels

    @property
    def color(self) -> np.ndarray:
        """View of the color channels (alpha excluded)."""
        return self.pixels[:, :, :self.kind.color_channels]

    @property
    def alpha(self) -> np.ndarray | None:
        """View of the alpha channel as (H, W), or None."""
        if not self.has_alpha:
            return None
        return self.pixels[:, :, -1]

    def with_pixels(self, pixels: np.ndarray) -> "PixelBuffer":
        """Return a new buffer of the same kind holding ``pixels``."""
        return PixelBuffer(np.ascontiguousarray(pixels), self.kind)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels.copy(), self.kind)

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height}, {self.kind.name})"


def new_buffer(h: int, w: int, kind: PixelKind | str) -> PixelBuffer:
    """
    Allocate a zero-initialized buffer.

    Args:
        h: Height in pixels
        w: Width in pixels
        kind: PixelKind or its name

    Raises:
        InvalidImageTypeError: If ``kind`` is an unknown name
        InvalidGeometryError: If either dimension is not positive
    """
    if isinstance(kind, str):
        kind = PixelKind.from_name(kind)
    if h <= 0 or w <= 0:
        raise InvalidGeometryError(f"Buffer must be at least 1x1, got {w}x{h}")
    return PixelBuffer(np.zeros((h, w, kind.channels), dtype=kind.dtype), kind)


def fill_color(color: tuple[int, int, int], size: tuple[int, int]) -> PixelBuffer:
    """Create an RGB8 buffer of ``size`` (width, height) filled with ``color``."""
    w, h = size
    if w <= 0 or h <= 0:
        raise InvalidGeometryError(f"Buffer must be at least 1x1, got {w}x{h}")
    pixels = np.empty((h, w, 3), dtype=np.uint8)
    pixels[:, :] = np.asarray(color, dtype=np.uint8)
    return PixelBuffer(pixels, PixelKind.RGB8)


def to_unit_float(pixels: np.ndarray) -> np.ndarray:
    """Normalize uint8 or float32 channel data to float32 in 0-1."""
    if pixels.dtype == np.uint8:
        return pixels.astype(np.float32) / 255.0
    return pixels.astype(np.float32)


def from_unit_float(values: np.ndarray, kind: PixelKind) -> np.ndarray:
    """Inverse of to_unit_float for the dtype of ``kind``."""
    if kind.is_float:
        return values.astype(np.float32)
    return np.clip(np.rint(values * 255.0), 0, 255).astype(np.uint8)


def luma(rgb: np.ndarray) -> np.ndarray:
    """Weighted luminance of an (..., 3) float array, returned as (..., 1)."""
    return (rgb.astype(np.float32) @ LUMA_WEIGHTS)[..., np.newaxis]


def convert(buffer: PixelBuffer, kind: PixelKind) -> PixelBuffer:
    """
    Convert a buffer to another channel layout and/or sample type.

    Gray to color replicates the gray channel; color to gray uses luma.
    Alpha is dropped or added (fully opaque) as needed.
    """
    if buffer.kind == kind:
        return buffer

    color = to_unit_float(buffer.color)
    if color.shape[2] == 1 and kind.color_channels == 3:
        color = np.repeat(color, 3, axis=2)
    elif color.shape[2] == 3 and kind.color_channels == 1:
        color = luma(color)

    parts = [color]
    if kind.has_alpha:
        if buffer.has_alpha:
            parts.append(to_unit_float(buffer.pixels[:, :, -1:]))
        else:
            parts.append(np.ones(color.shape[:2] + (1,), dtype=np.float32))

    return PixelBuffer(from_unit_float(np.concatenate(parts, axis=2), kind), kind)


def color_for_kind(rgba: tuple[int, ...], kind: PixelKind) -> np.ndarray:
    """
    Express an 8-bit RGB or RGBA color in the channel layout of ``kind``.

    Returns a float32 array of length ``kind.channels`` in the kind's own
    value range (0-255 for 8-bit kinds, 0-1 for float kinds).
    """
    values = np.asarray(rgba, dtype=np.float32) / 255.0
    rgb = values[:3]
    alpha = values[3] if len(values) > 3 else 1.0
    if kind.color_channels == 1:
        channels = [float(rgb @ LUMA_WEIGHTS)]
    else:
        channels = list(rgb)
    if kind.has_alpha:
        channels.append(alpha)
    return np.asarray(channels, dtype=np.float32) * kind.max_value
