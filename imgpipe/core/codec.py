"""
Image codec for the imgpipe framework.

Decoding and encoding are delegated to OpenCV. This is the only module that
deals with OpenCV's BGR channel order; everything it returns or accepts is
a PixelBuffer in RGB(A) order.
"""

import logging
from pathlib import Path

import cv2
import numpy as np

from imgpipe.core.buffer import PixelBuffer, PixelKind, convert
from imgpipe.core.config import settings
from imgpipe.core.errors import CodecError, ImageIOError

logger = logging.getLogger(__name__)

# Output container name -> file extension understood by cv2.imencode
OUTPUT_FORMATS: dict[str, str] = {
    "PNG": ".png",
    "JPEG": ".jpg",
    "JPG": ".jpg",
    "BMP": ".bmp",
    "TIFF": ".tiff",
    "TIF": ".tiff",
    "WEBP": ".webp",
}

# Leading bytes of the containers OpenCV can read
_MAGIC: list[tuple[bytes, str]] = [
    (b"\x89PNG\r\n\x1a\n", "PNG"),
    (b"\xff\xd8\xff", "JPEG"),
    (b"BM", "BMP"),
    (b"II*\x00", "TIFF"),
    (b"MM\x00*", "TIFF"),
    (b"GIF8", "GIF"),
]


def sniff_format(data: bytes) -> str | None:
    """
    Guess the container format from the first bytes of ``data``.

    Returns:
        Format name (e.g. "PNG") or None if unrecognized
    """
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "WEBP"
    for magic, name in _MAGIC:
        if data.startswith(magic):
            return name
    return None


def read_file(path: str | Path) -> bytes:
    """
    Read a whole file into memory.

    Raises:
        ImageIOError: If the file cannot be read
    """
    path = Path(path)
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ImageIOError(f"Cannot read {path}: {exc}") from exc


def decode(data: bytes) -> PixelBuffer:
    """
    Decode an encoded image. The format is detected from the content.

    8-bit images become RGB8/RGBA8/L8 buffers; 16-bit images are
    normalized into the float kinds.

    Raises:
        CodecError: If the bytes are not a decodable image
    """
    fmt = sniff_format(data)
    logger.debug("Decoding %d bytes (detected format: %s)", len(data), fmt or "unknown")

    raw = np.frombuffer(data, dtype=np.uint8)
    try:
        arr = cv2.imdecode(raw, cv2.IMREAD_UNCHANGED) if raw.size else None
    except cv2.error as exc:
        raise CodecError(f"Failed to decode image: {exc}") from exc
    if arr is None:
        raise CodecError(f"Failed to decode image data ({len(data)} bytes, format: {fmt or 'unknown'})")

    if arr.ndim == 2:
        channels = 1
    else:
        channels = arr.shape[2]

    if channels == 3:
        arr = cv2.cvtColor(arr, cv2.COLOR_BGR2RGB)
    elif channels == 4:
        arr = cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)

    if arr.dtype == np.uint8:
        kinds = {1: PixelKind.L8, 3: PixelKind.RGB8, 4: PixelKind.RGBA8}
        return PixelBuffer(arr, kinds[channels])

    # 16-bit and float containers
    if arr.dtype == np.uint16:
        arr = arr.astype(np.float32) / 65535.0
    else:
        arr = arr.astype(np.float32)
    if channels == 1:
        arr = np.repeat(arr.reshape(arr.shape[0], arr.shape[1], 1), 3, axis=2)
        channels = 3
    kinds = {3: PixelKind.RGB32F, 4: PixelKind.RGBA32F}
    return PixelBuffer(arr, kinds[channels])


def load_image_file(path: str | Path) -> PixelBuffer:
    """Read and decode an image file. The extension is not consulted."""
    return decode(read_file(path))


def _prepare_for_encode(buffer: PixelBuffer, fmt: str) -> np.ndarray:
    """Quantize to 8-bit and reorder to BGR(A) for OpenCV."""
    kind = buffer.kind
    if kind == PixelKind.RGB32F:
        kind = PixelKind.RGB8
    elif kind in (PixelKind.RGBA32F, PixelKind.LA8):
        kind = PixelKind.RGBA8
    if fmt in ("JPEG", "JPG") and kind.has_alpha:
        kind = PixelKind.RGB8

    arr = convert(buffer, kind).pixels
    if kind == PixelKind.RGB8:
        return cv2.cvtColor(arr, cv2.COLOR_RGB2BGR)
    if kind == PixelKind.RGBA8:
        return cv2.cvtColor(arr, cv2.COLOR_RGBA2BGRA)
    return arr[:, :, 0]


def encode(buffer: PixelBuffer, fmt: str | None = None, quality: int | None = None) -> bytes:
    """
    Encode a buffer into an image container.

    Args:
        buffer: Buffer to encode
        fmt: Container name (PNG, JPEG, BMP, TIFF, WEBP); settings.output_format when None
        quality: JPEG/WEBP quality 1-100; settings.jpeg_quality when None

    Returns:
        Encoded bytes

    Raises:
        CodecError: If the format is unknown or encoding fails
    """
    fmt = (fmt or settings.output_format).upper()
    if fmt not in OUTPUT_FORMATS:
        raise CodecError(f"Unknown output format: {fmt}. Available: {list(OUTPUT_FORMATS)}")

    quality = settings.jpeg_quality if quality is None else quality
    params: list[int] = []
    if fmt in ("JPEG", "JPG"):
        params = [cv2.IMWRITE_JPEG_QUALITY, int(quality)]
    elif fmt == "WEBP":
        params = [cv2.IMWRITE_WEBP_QUALITY, int(quality)]

    arr = _prepare_for_encode(buffer, fmt)
    try:
        ok, encoded = cv2.imencode(OUTPUT_FORMATS[fmt], arr, params)
    except cv2.error as exc:
        raise CodecError(f"Failed to encode {fmt}: {exc}") from exc
    if not ok:
        raise CodecError(f"Failed to encode {fmt}")
    return encoded.tobytes()


def format_from_path(path: str | Path) -> str:
    """Map a file suffix to an output format name."""
    suffix = Path(path).suffix.lower()
    for name, ext in OUTPUT_FORMATS.items():
        if ext == suffix or f".{name.lower()}" == suffix:
            return name
    raise CodecError(f"Cannot infer output format from {path}")


def save(
    buffer: PixelBuffer,
    path: str | Path,
    fmt: str | None = None,
    quality: int | None = None,
) -> Path:
    """
    Encode and write a buffer to disk.

    Args:
        buffer: Buffer to write
        path: Output path
        fmt: Container name; inferred from the suffix when None
        quality: Lossy quality setting

    Returns:
        The written path
    """
    path = Path(path)
    data = encode(buffer, fmt or format_from_path(path), quality)
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise ImageIOError(f"Cannot write {path}: {exc}") from exc
    logger.debug("Wrote %s (%d bytes)", path, len(data))
    return path
