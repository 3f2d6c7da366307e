"""
Pipeline module - Operations, the single-use pipeline and documents.

This module provides:
- Operations registry: one dataclass per operation, dispatched by apply_operation
- Pipeline: resolves an input once and folds operations left to right
- Documents: build pipelines from JSON-style mappings
"""

from imgpipe.pipeline.operations import (
    Operation,
    register_operation,
    get_operations,
    describe_operations,
    get_operation_class,
    apply_operation,
    Thumbnail,
    Resize,
    Crop,
    Overlay,
    Tile,
    DrawText,
    ColorBlend,
    Blur,
    Unsharpen,
    Brighten,
    AdjustContrast,
    HueRotate,
    Invert,
    Grayscale,
    FlipHorizontal,
    FlipVertical,
    Rotate90,
    Rotate180,
    Rotate270,
)
from imgpipe.pipeline.runner import Pipeline, PipelineState, run
from imgpipe.pipeline.document import (
    parse_document,
    parse_image_input,
    parse_operation,
    load_document,
)

__all__ = [
    "Operation",
    "register_operation",
    "get_operations",
    "describe_operations",
    "get_operation_class",
    "apply_operation",
    "Thumbnail",
    "Resize",
    "Crop",
    "Overlay",
    "Tile",
    "DrawText",
    "ColorBlend",
    "Blur",
    "Unsharpen",
    "Brighten",
    "AdjustContrast",
    "HueRotate",
    "Invert",
    "Grayscale",
    "FlipHorizontal",
    "FlipVertical",
    "Rotate90",
    "Rotate180",
    "Rotate270",
    "Pipeline",
    "PipelineState",
    "run",
    "parse_document",
    "parse_image_input",
    "parse_operation",
    "load_document",
]
