"""
Input resolution: turn a source descriptor into a PixelBuffer or Font.

Resolvers are registered per source type. The core sources are handled
here; optional sources (base64, remote urls) register themselves from
imgpipe.inputs.remote.

To add a new source type:
1. Subclass ImageSource (or FontSource) as a dataclass
2. Register a resolver with @register_resolver (or @register_font_resolver)
"""

import logging
from typing import Callable, Type

from imgpipe.core.buffer import PixelBuffer, fill_color, new_buffer
from imgpipe.core.codec import decode, load_image_file
from imgpipe.inputs.sources import (
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
from imgpipe.text.font import Font

logger = logging.getLogger(__name__)

# Registries of resolver functions, keyed by source class
_RESOLVERS: dict[type, Callable[[ImageSource], PixelBuffer]] = {}
_FONT_RESOLVERS: dict[type, Callable[[FontSource], Font]] = {}


def register_resolver(source_type: Type[ImageSource]):
    """Decorator to register the resolver for an image source type."""
    def decorator(func: Callable):
        _RESOLVERS[source_type] = func
        return func
    return decorator


def register_font_resolver(source_type: Type[FontSource]):
    """Decorator to register the resolver for a font source type."""
    def decorator(func: Callable):
        _FONT_RESOLVERS[source_type] = func
        return func
    return decorator


def get_source_types() -> list[str]:
    """Return the names of the image source types that can be resolved."""
    return [t.__name__ for t in _RESOLVERS]


def resolve(source: ImageSource) -> PixelBuffer:
    """
    Resolve an image source into a buffer. Consumes the source.

    Raises:
        InputAlreadyUsedError: If the source was resolved before
        TypeError: If no resolver is registered for the source type
    """
    func = _RESOLVERS.get(type(source))
    if func is None:
        raise TypeError(
            f"No resolver for {type(source).__name__}. Available: {get_source_types()}"
        )
    source.consume()
    buffer = func(source)
    logger.debug("Resolved %s -> %r", type(source).__name__, buffer)
    return buffer


def resolve_font(source: FontSource) -> Font:
    """
    Resolve a font source into a Font handle. Consumes the source.

    Raises:
        InvalidFontError: If the font data does not parse
    """
    func = _FONT_RESOLVERS.get(type(source))
    if func is None:
        available = [t.__name__ for t in _FONT_RESOLVERS]
        raise TypeError(f"No font resolver for {type(source).__name__}. Available: {available}")
    source.consume()
    return func(source)


# =============================================================================
# Built-in image resolvers
# =============================================================================

@register_resolver(BufferSource)
def _resolve_buffer(source: BufferSource) -> PixelBuffer:
    return source.buffer


@register_resolver(ColorSource)
def _resolve_color(source: ColorSource) -> PixelBuffer:
    return fill_color((source.r, source.g, source.b), tuple(source.size))


@register_resolver(BytesSource)
def _resolve_bytes(source: BytesSource) -> PixelBuffer:
    return decode(bytes(source.data))


@register_resolver(FileSource)
def _resolve_file(source: FileSource) -> PixelBuffer:
    return load_image_file(source.path)


@register_resolver(NewSource)
def _resolve_new(source: NewSource) -> PixelBuffer:
    return new_buffer(source.h, source.w, source.kind)


# =============================================================================
# Built-in font resolvers
# =============================================================================

@register_font_resolver(FontHandleSource)
def _resolve_font_handle(source: FontHandleSource) -> Font:
    return source.font


@register_font_resolver(FontFileSource)
def _resolve_font_file(source: FontFileSource) -> Font:
    return Font.from_file(source.path)


@register_font_resolver(FontBytesSource)
def _resolve_font_bytes(source: FontBytesSource) -> Font:
    return Font(source.data)
