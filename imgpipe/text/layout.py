"""
Multi-line text layout and rendering.

Geometry:
- Every line is centered horizontally on the midpoint on its own:
  x = mid.x - int(width) // 2, where width is the sum of glyph advances.
- The block is centered vertically by line index: line i of N sits at
  y = mid.y + int((i - (N - 1) / 2) * line_height), y being the top of
  the line box (ascender line).
- line_height = ascent - descent + line_gap, the same for every line.
- Empty lines are skipped but still count toward N and keep their index.

Glyph rasterization is delegated to Pillow (FreeType). A line is rendered
as a coverage mask at the vertical scale and stretched horizontally when
the scale is anisotropic.
"""

import logging
import textwrap
from dataclasses import dataclass

import cv2
import numpy as np
from PIL import Image, ImageDraw

from imgpipe.core.buffer import PixelBuffer, color_for_kind
from imgpipe.core.errors import InvalidGeometryError
from imgpipe.processing.compositor import clip_region
from imgpipe.text.font import Font

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scale:
    """
    Horizontal and vertical text scale in pixels.

    ``y`` is the pixel height from descender to ascender; ``x`` is the
    same measure horizontally, so ``Scale(2 * s, s)`` draws text twice
    as wide as ``Scale.uniform(s)``.
    """
    x: float
    y: float

    def __post_init__(self):
        if not (self.x > 0 and self.y > 0):
            raise InvalidGeometryError(f"Text scale must be positive, got ({self.x}, {self.y})")

    @classmethod
    def uniform(cls, size: float) -> "Scale":
        return cls(size, size)

    @property
    def stretch(self) -> float:
        """Horizontal stretch applied to glyphs rendered at the vertical scale."""
        return self.x / self.y


@dataclass(frozen=True)
class LineLayout:
    """Placement of one rendered line."""
    index: int
    text: str
    x: int
    y: int
    width: float


@dataclass(frozen=True)
class VMetrics:
    """Vertical font metrics at a given scale (descent is negative)."""
    ascent: float
    descent: float
    line_gap: float

    @property
    def line_height(self) -> float:
        return self.ascent - self.descent + self.line_gap


def v_metrics(font: Font, scale: Scale) -> VMetrics:
    """Return ascent, descent and line gap at the vertical scale."""
    ascent, descent, line_gap = font.reference_metrics()
    return VMetrics(ascent * scale.y, -descent * scale.y, line_gap * scale.y)


def font_height(font: Font, scale: Scale) -> float:
    return v_metrics(font, scale).line_height


def measure_line_width(font: Font, text: str, scale: Scale) -> float:
    """Sum of the horizontal advances of ``text``, trailing advance included."""
    if not text:
        return 0.0
    return font.face(scale.y).getlength(text) * scale.stretch


def split_lines(text: str) -> list[str]:
    """Split on newlines; a trailing newline does not start a new line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def wrap_text(text: str, max_width: int | None) -> str:
    """Word-wrap to ``max_width`` columns unless the text has its own line breaks."""
    if max_width is None or "\n" in text:
        return text
    return textwrap.fill(text, max_width)


def layout_text(
    font: Font,
    text: str,
    scale: Scale,
    mid: tuple[int, int],
) -> list[LineLayout]:
    """
    Compute the origin of every non-empty line.

    Args:
        font: Font handle
        text: Text, possibly containing newlines
        scale: Text scale
        mid: (x, y) midpoint the block is centered on

    Returns:
        One LineLayout per non-empty line, in order
    """
    line_height = font_height(font, scale)
    lines = split_lines(text)
    count = len(lines)
    placed = []
    for index, line in enumerate(lines):
        if not line:
            continue
        width = measure_line_width(font, line, scale)
        x = mid[0] - int(width) // 2
        y = mid[1] + int((index - (count - 1) / 2) * line_height)
        placed.append(LineLayout(index, line, x, y, width))
    return placed


def render_line_mask(font: Font, text: str, scale: Scale) -> tuple[np.ndarray, int, int]:
    """
    Rasterize one line into a coverage mask.

    Returns:
        (mask, dx, dy): float32 coverage in 0-1 and the offset of the mask's
        top-left corner from the line origin (left edge, ascender line)
    """
    face = font.face(scale.y)
    left, top, right, bottom = (int(v) for v in face.getbbox(text, anchor="la"))
    if right <= left or bottom <= top:
        return np.zeros((0, 0), dtype=np.float32), 0, 0

    mask = Image.new("L", (right - left, bottom - top), 0)
    ImageDraw.Draw(mask).text((-left, -top), text, fill=255, font=face, anchor="la")
    coverage = np.asarray(mask, dtype=np.float32) / 255.0

    if scale.x != scale.y:
        width = max(1, int(round(coverage.shape[1] * scale.stretch)))
        coverage = cv2.resize(coverage, (width, coverage.shape[0]), interpolation=cv2.INTER_LINEAR)
        left = int(round(left * scale.stretch))
    return np.clip(coverage, 0.0, 1.0), left, top


def draw_text(
    buffer: PixelBuffer,
    color: tuple[int, int, int, int],
    font: Font,
    text: str,
    scale: Scale,
    mid: tuple[int, int],
) -> PixelBuffer:
    """
    Draw multi-line text centered on ``mid``.

    Each channel (alpha included) is blended toward ``color`` by glyph
    coverage. Pixels outside the buffer are clipped.

    Args:
        buffer: Canvas
        color: RGBA text color, 8-bit components
        font: Font handle
        text: Text, possibly containing newlines
        scale: Text scale
        mid: (x, y) midpoint

    Returns:
        New buffer with the text drawn
    """
    target = color_for_kind(color, buffer.kind)
    canvas = buffer.pixels.astype(np.float32)

    for line in layout_text(font, text, scale, mid):
        coverage, dx, dy = render_line_mask(font, line.text, scale)
        if coverage.size == 0:
            continue
        region = clip_region(
            buffer.width, buffer.height,
            coverage.shape[1], coverage.shape[0],
            line.x + dx, line.y + dy,
        )
        if region is None:
            logger.debug("Line %d (%r) falls outside the canvas", line.index, line.text)
            continue
        rows, cols, mrows, mcols = region
        v = coverage[mrows, mcols][:, :, np.newaxis]
        canvas[rows, cols] = canvas[rows, cols] * (1.0 - v) + target * v

    if buffer.is_float:
        return buffer.with_pixels(canvas)
    return buffer.with_pixels(np.clip(np.rint(canvas), 0, 255).astype(np.uint8))
