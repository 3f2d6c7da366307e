"""
Font handles backed by Pillow's FreeType binding.

Text sizes in imgpipe are pixel heights: a face built for ``pixel_height``
spans exactly that many pixels from descender to ascender. Pillow sizes
faces by em, so the conversion factor is measured once per font at a
large reference size.
"""

from functools import lru_cache
from io import BytesIO

from PIL import ImageFont

from imgpipe.core.codec import read_file
from imgpipe.core.errors import InvalidFontError

# Size used to validate font data when a handle is created
_PROBE_SIZE = 16

# Em size at which the ascent/descent ratio is measured
_REFERENCE_SIZE = 1000


class Font:
    """
    Immutable, reusable font handle.

    Holds the raw TrueType/OpenType bytes and hands out FreeType faces
    at a given pixel height. Invalid data is rejected on construction.

    Example:
        >>> font = Font.from_file("DejaVuSans.ttf")
        >>> face = font.face(24)
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        try:
            ImageFont.truetype(BytesIO(self._data), _PROBE_SIZE)
        except (OSError, ValueError) as exc:
            raise InvalidFontError(f"Font data could not be parsed: {exc}") from exc

    @classmethod
    def from_file(cls, path) -> "Font":
        return cls(read_file(path))

    @property
    def data(self) -> bytes:
        return self._data

    def reference_metrics(self) -> tuple[float, float, float]:
        """
        Ascent, descent and line gap per pixel of height.

        Scaled by a pixel height these give the vertical metrics at that
        height; ascent + descent is always 1.0. Descent is positive here.
        """
        return _reference_metrics(self._data)

    def em_size(self, pixel_height: float) -> float:
        """Pillow em size whose ascent + descent equals ``pixel_height``."""
        ascent, descent, _ = _raw_reference_metrics(self._data)
        return pixel_height * _REFERENCE_SIZE / (ascent + descent)

    def face(self, pixel_height: float) -> ImageFont.FreeTypeFont:
        """Return a FreeType face spanning ``pixel_height`` pixels."""
        return _load_face(self._data, round(self.em_size(pixel_height), 3))

    def __repr__(self) -> str:
        family, style = _load_face(self._data, _PROBE_SIZE).getname()
        return f"Font({family} {style})"


@lru_cache(maxsize=32)
def _load_face(data: bytes, size: float) -> ImageFont.FreeTypeFont:
    return ImageFont.truetype(BytesIO(data), size)


@lru_cache(maxsize=32)
def _raw_reference_metrics(data: bytes) -> tuple[int, int, int]:
    face = _load_face(data, _REFERENCE_SIZE)
    ascent, descent = face.getmetrics()
    if ascent + descent <= 0:
        raise InvalidFontError("Font has no vertical extent")
    # FreeType's size height already includes the line gap
    height = getattr(face.font, "height", ascent + descent)
    return ascent, descent, height


def _reference_metrics(data: bytes) -> tuple[float, float, float]:
    ascent, descent, height = _raw_reference_metrics(data)
    extent = float(ascent + descent)
    return ascent / extent, descent / extent, max(0, height - ascent - descent) / extent
