"""
Core module - Pixel buffers, codec, errors and configuration.
"""

from imgpipe.core.buffer import (
    PixelBuffer,
    PixelKind,
    new_buffer,
    fill_color,
    convert,
)
from imgpipe.core.codec import decode, encode, save, load_image_file
from imgpipe.core.config import Settings, settings, configure, load_settings
from imgpipe.core.errors import (
    ImgPipeError,
    InvalidFontError,
    InvalidImageTypeError,
    InvalidResizeFilterError,
    InvalidResizeModeError,
    InvalidGeometryError,
    InputAlreadyUsedError,
    ImageIOError,
    CodecError,
    DecodeError,
    TransportError,
    ConfigError,
)

__all__ = [
    "PixelBuffer",
    "PixelKind",
    "new_buffer",
    "fill_color",
    "convert",
    "decode",
    "encode",
    "save",
    "load_image_file",
    "Settings",
    "settings",
    "configure",
    "load_settings",
    "ImgPipeError",
    "InvalidFontError",
    "InvalidImageTypeError",
    "InvalidResizeFilterError",
    "InvalidResizeModeError",
    "InvalidGeometryError",
    "InputAlreadyUsedError",
    "ImageIOError",
    "CodecError",
    "DecodeError",
    "TransportError",
    "ConfigError",
]
