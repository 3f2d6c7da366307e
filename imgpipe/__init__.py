"""
imgpipe - Declarative Image Transformation Pipeline
===================================================

Resolve an image source once, apply an ordered list of operations,
encode the result.

Main modules:
- imgpipe.core: Pixel buffers, codec, errors and settings
- imgpipe.inputs: Image and font sources (color, file, bytes, base64, url)
- imgpipe.processing: Resize dispatch, compositing and color adjustments
- imgpipe.text: Font handles and centered multi-line text
- imgpipe.pipeline: Operations, the single-use Pipeline and JSON documents

Quick start:
    >>> from imgpipe import Pipeline, ImageInput, ColorSource, encode
    >>> from imgpipe.pipeline import Resize, Rotate90
    >>> pipeline = Pipeline(
    ...     ImageInput(ColorSource(255, 0, 0, (64, 32))),
    ...     [Resize(w=32, h=32, filter="Lanczos3", mode="fill"), Rotate90()],
    ... )
    >>> png = encode(pipeline.apply_all().get_image(), "PNG")
"""

__version__ = "0.1.0"

# Convenience imports
from imgpipe.core import (
    PixelBuffer,
    PixelKind,
    ImgPipeError,
    decode,
    encode,
    save,
    settings,
    configure,
)
from imgpipe.inputs import ImageInput, ColorSource, FileSource, BytesSource, NewSource
from imgpipe.pipeline import Pipeline, load_document, parse_document
from imgpipe.core.build_info import version_str

__all__ = [
    "__version__",
    "PixelBuffer",
    "PixelKind",
    "ImgPipeError",
    "decode",
    "encode",
    "save",
    "settings",
    "configure",
    "ImageInput",
    "ColorSource",
    "FileSource",
    "BytesSource",
    "NewSource",
    "Pipeline",
    "load_document",
    "parse_document",
    "version_str",
]
