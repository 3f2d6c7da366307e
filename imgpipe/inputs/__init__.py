"""
Inputs module - Image and font sources and their resolution.

This module provides:
- Source descriptors: color, bytes, file, new buffer, in-memory buffer
- Optional sources: base64 payloads and remote urls
- resolve() / resolve_font(): single-use resolution into buffers and fonts
"""

from imgpipe.inputs.sources import (
    ImageInput,
    ImageSource,
    BufferSource,
    ColorSource,
    BytesSource,
    FileSource,
    NewSource,
    FontSource,
    FontHandleSource,
    FontFileSource,
    FontBytesSource,
)
from imgpipe.inputs.resolver import (
    register_resolver,
    register_font_resolver,
    get_source_types,
    resolve,
    resolve_font,
)
from imgpipe.inputs.remote import (
    Base64Source,
    UrlSource,
    FontBase64Source,
    FontUrlSource,
    decode_base64,
    fetch_bytes,
)

__all__ = [
    "ImageInput",
    "ImageSource",
    "BufferSource",
    "ColorSource",
    "BytesSource",
    "FileSource",
    "NewSource",
    "FontSource",
    "FontHandleSource",
    "FontFileSource",
    "FontBytesSource",
    "Base64Source",
    "UrlSource",
    "FontBase64Source",
    "FontUrlSource",
    "register_resolver",
    "register_font_resolver",
    "get_source_types",
    "resolve",
    "resolve_font",
    "decode_base64",
    "fetch_bytes",
]
