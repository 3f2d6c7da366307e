"""
Error types raised by imgpipe.

Every failure inside a pipeline surfaces as a subclass of ImgPipeError.
Lower-level exceptions (OSError, cv2.error, binascii.Error, requests
exceptions) are wrapped with ``raise ... from exc`` so the original cause
stays attached.
"""


class ImgPipeError(Exception):
    """Base class for all imgpipe errors."""


class InvalidFontError(ImgPipeError):
    """Font data could not be parsed."""


class InvalidImageTypeError(ImgPipeError, ValueError):
    """Unrecognized pixel kind name for a new buffer."""


class InvalidResizeFilterError(ImgPipeError, ValueError):
    """Unrecognized resampling filter name."""


class InvalidResizeModeError(ImgPipeError, ValueError):
    """Unrecognized resize mode name."""


class InvalidGeometryError(ImgPipeError, ValueError):
    """Zero-sized buffers or targets, a non-positive text scale, or an empty crop region."""


class InputAlreadyUsedError(ImgPipeError):
    """A pipeline or source was applied after it had been consumed."""


class ImageIOError(ImgPipeError, OSError):
    """A file could not be read or written."""


class CodecError(ImgPipeError):
    """Image bytes could not be decoded or a buffer could not be encoded."""


class DecodeError(ImgPipeError):
    """Malformed base64 payload."""


class TransportError(ImgPipeError):
    """A remote resource could not be fetched."""


class ConfigError(ImgPipeError, ValueError):
    """A declarative pipeline document is malformed."""
