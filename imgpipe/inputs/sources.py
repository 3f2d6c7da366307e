"""
Image and font source descriptors.

A source describes where pixels (or font data) come from. Each source
object can be resolved exactly once; see imgpipe.inputs.resolver.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from imgpipe.core.buffer import PixelBuffer, PixelKind
from imgpipe.core.errors import InputAlreadyUsedError


@dataclass
class Source:
    """Base class for single-use source descriptors."""
    _consumed: bool = field(default=False, init=False, repr=False, compare=False)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def consume(self) -> None:
        """Mark the source as used. A second call raises InputAlreadyUsedError."""
        if self._consumed:
            raise InputAlreadyUsedError(f"{type(self).__name__} has already been resolved")
        self._consumed = True


# =============================================================================
# Image sources
# =============================================================================

@dataclass
class ImageSource(Source):
    """Base class for image sources."""


@dataclass
class BufferSource(ImageSource):
    """An already-decoded buffer."""
    buffer: PixelBuffer


@dataclass
class ColorSource(ImageSource):
    """A solid RGB color of ``size`` (width, height)."""
    r: int
    g: int
    b: int
    size: tuple[int, int]


@dataclass
class BytesSource(ImageSource):
    """Encoded image bytes; the format is detected from content."""
    data: bytes


@dataclass
class FileSource(ImageSource):
    """An encoded image on disk."""
    path: str | Path


@dataclass
class NewSource(ImageSource):
    """A zero-filled buffer of the named pixel kind."""
    h: int
    w: int
    kind: PixelKind | str = PixelKind.RGB8


# =============================================================================
# Font sources
# =============================================================================

@dataclass
class FontSource(Source):
    """Base class for font sources."""


@dataclass
class FontHandleSource(FontSource):
    """An already-loaded Font handle."""
    font: Any


@dataclass
class FontFileSource(FontSource):
    """A TrueType/OpenType font file on disk."""
    path: str | Path


@dataclass
class FontBytesSource(FontSource):
    """Raw TrueType/OpenType font data."""
    data: bytes


# =============================================================================
# Image input: a source plus its own operations
# =============================================================================

@dataclass
class ImageInput:
    """
    An image source together with operations applied right after it is
    resolved. Used for the pipeline input as well as for overlay layers and
    tile patterns.

    Example:
        >>> layer = ImageInput(ColorSource(255, 0, 0, (10, 10)), [Rotate90()])
        >>> buffer = layer.get_image()
    """
    source: ImageSource
    operations: list = field(default_factory=list)

    def get_image(self) -> PixelBuffer:
        """Resolve the source and apply this input's operations in order."""
        from imgpipe.inputs.resolver import resolve
        from imgpipe.pipeline.operations import apply_operation

        buffer = resolve(self.source)
        for operation in self.operations:
            buffer = apply_operation(operation, buffer)
        return buffer
