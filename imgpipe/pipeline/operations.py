"""
Pipeline operations for imgpipe.

Each operation is a small dataclass describing one step. Its
implementation is a function registered under the operation's serialized
name; apply_operation() dispatches on the operation's type.

To add a new operation:
1. Declare a dataclass subclassing Operation
2. Write a function with signature: func(op, buffer: PixelBuffer) -> PixelBuffer
3. Register it with @register_operation("name", OpClass, "description")

Every implementation returns a new buffer; the input buffer is not
modified.
"""

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Type

from imgpipe.core.buffer import PixelBuffer
from imgpipe.inputs.resolver import resolve_font
from imgpipe.inputs.sources import FontSource, ImageInput
from imgpipe.processing import color, compositor
from imgpipe.processing.resize import ResizeMode, crop, resize, thumbnail
from imgpipe.text.font import Font
from imgpipe.text.layout import Scale, draw_text, wrap_text

# Registry of available operations
_OPERATIONS: Dict[str, Dict[str, Any]] = {}


@dataclass
class Operation:
    """Base class for pipeline operations."""
    name: ClassVar[str] = ""


def register_operation(name: str, op_class: Type[Operation], description: str = ""):
    """Decorator to register the implementation of an operation class."""
    def decorator(func: Callable):
        op_class.name = name
        _OPERATIONS[name] = {
            'class': op_class,
            'func': func,
            'description': description,
        }
        return func
    return decorator


def get_operations() -> list:
    """Return list of available operation names."""
    return list(_OPERATIONS.keys())


def describe_operations() -> dict[str, str]:
    """Return operation names mapped to their descriptions."""
    return {name: entry['description'] for name, entry in _OPERATIONS.items()}


def get_operation_class(name: str) -> Type[Operation]:
    """Get an operation class by its serialized name."""
    if name not in _OPERATIONS:
        raise ValueError(f"Unknown operation: {name}. Available: {get_operations()}")
    return _OPERATIONS[name]['class']


def apply_operation(op: Operation, buffer: PixelBuffer) -> PixelBuffer:
    """Apply one operation to a buffer and return the result."""
    entry = _OPERATIONS.get(type(op).name)
    if entry is None or entry['class'] is not type(op):
        raise TypeError(f"Unregistered operation type: {type(op).__name__}")
    return entry['func'](op, buffer)


# =============================================================================
# Operation types
# =============================================================================

@dataclass
class Thumbnail(Operation):
    w: int
    h: int
    exact: bool = False


@dataclass
class Resize(Operation):
    w: int
    h: int
    filter: str
    mode: ResizeMode | str = ResizeMode.FIT


@dataclass
class Crop(Operation):
    x: int
    y: int
    w: int
    h: int


@dataclass
class Overlay(Operation):
    layer_image_input: ImageInput
    coords: tuple[int, int]


@dataclass
class Tile(Operation):
    tile_image: ImageInput


@dataclass
class DrawText(Operation):
    text: str
    color: tuple[int, int, int, int]
    font: FontSource | Font
    scale: Scale | tuple[float, float]
    mid: tuple[int, int]
    max_width: int | None = None

    def __post_init__(self):
        if not isinstance(self.scale, Scale):
            self.scale = Scale(*self.scale)


@dataclass
class ColorBlend(Operation):
    r: int
    g: int
    b: int


@dataclass
class Blur(Operation):
    sigma: float


@dataclass
class Unsharpen(Operation):
    sigma: float
    threshold: int


@dataclass
class Brighten(Operation):
    value: int


@dataclass
class AdjustContrast(Operation):
    value: float


@dataclass
class HueRotate(Operation):
    value: int


@dataclass
class Invert(Operation):
    pass


@dataclass
class Grayscale(Operation):
    pass


@dataclass
class FlipHorizontal(Operation):
    pass


@dataclass
class FlipVertical(Operation):
    pass


@dataclass
class Rotate90(Operation):
    pass


@dataclass
class Rotate180(Operation):
    pass


@dataclass
class Rotate270(Operation):
    pass


# =============================================================================
# Built-in Operations
# =============================================================================

@register_operation("thumbnail", Thumbnail, "Shrink to fit a box (exact=true: to the box)")
def _thumbnail(op: Thumbnail, buffer: PixelBuffer) -> PixelBuffer:
    return thumbnail(buffer, op.w, op.h, op.exact)


@register_operation("resize", Resize, "Resample with a named filter in fit/exact/fill mode")
def _resize(op: Resize, buffer: PixelBuffer) -> PixelBuffer:
    return resize(buffer, op.w, op.h, op.filter, op.mode)


@register_operation("crop", Crop, "Extract a rectangular region")
def _crop(op: Crop, buffer: PixelBuffer) -> PixelBuffer:
    return crop(buffer, op.x, op.y, op.w, op.h)


@register_operation("overlay", Overlay, "Alpha-composite another image at an offset")
def _overlay(op: Overlay, buffer: PixelBuffer) -> PixelBuffer:
    layer = op.layer_image_input.get_image()
    x, y = op.coords
    return compositor.overlay(buffer, layer, int(x), int(y))


@register_operation("tile", Tile, "Repeat another image across the canvas")
def _tile(op: Tile, buffer: PixelBuffer) -> PixelBuffer:
    return compositor.tile(buffer, op.tile_image.get_image())


@register_operation("draw_text", DrawText, "Draw centered multi-line text")
def _draw_text(op: DrawText, buffer: PixelBuffer) -> PixelBuffer:
    text = wrap_text(op.text, op.max_width)
    font = op.font if isinstance(op.font, Font) else resolve_font(op.font)
    return draw_text(buffer, tuple(op.color), font, text, op.scale, tuple(op.mid))


@register_operation("color_blend", ColorBlend, "Average color channels 50/50 with a color")
def _color_blend(op: ColorBlend, buffer: PixelBuffer) -> PixelBuffer:
    return compositor.color_blend(buffer, op.r, op.g, op.b)


@register_operation("blur", Blur, "Gaussian blur")
def _blur(op: Blur, buffer: PixelBuffer) -> PixelBuffer:
    return color.blur(buffer, op.sigma)


@register_operation("unsharpen", Unsharpen, "Unsharp mask")
def _unsharpen(op: Unsharpen, buffer: PixelBuffer) -> PixelBuffer:
    return color.unsharpen(buffer, op.sigma, op.threshold)


@register_operation("brighten", Brighten, "Add a constant to color channels")
def _brighten(op: Brighten, buffer: PixelBuffer) -> PixelBuffer:
    return color.brighten(buffer, op.value)


@register_operation("adjust_contrast", AdjustContrast, "Change contrast by a percentage")
def _adjust_contrast(op: AdjustContrast, buffer: PixelBuffer) -> PixelBuffer:
    return color.adjust_contrast(buffer, op.value)


@register_operation("hue_rotate", HueRotate, "Rotate hue by degrees")
def _hue_rotate(op: HueRotate, buffer: PixelBuffer) -> PixelBuffer:
    return color.hue_rotate(buffer, op.value)


@register_operation("invert", Invert, "Invert color channels")
def _invert(op: Invert, buffer: PixelBuffer) -> PixelBuffer:
    return color.invert(buffer)


@register_operation("grayscale", Grayscale, "Convert to 8-bit luminance")
def _grayscale(op: Grayscale, buffer: PixelBuffer) -> PixelBuffer:
    return color.grayscale(buffer)


@register_operation("flip_horizontal", FlipHorizontal, "Mirror left to right")
def _flip_horizontal(op: FlipHorizontal, buffer: PixelBuffer) -> PixelBuffer:
    return compositor.flip_horizontal(buffer)


@register_operation("flip_vertical", FlipVertical, "Mirror top to bottom")
def _flip_vertical(op: FlipVertical, buffer: PixelBuffer) -> PixelBuffer:
    return compositor.flip_vertical(buffer)


@register_operation("rotate90", Rotate90, "Rotate 90 degrees clockwise")
def _rotate90(op: Rotate90, buffer: PixelBuffer) -> PixelBuffer:
    return compositor.rotate90(buffer)


@register_operation("rotate180", Rotate180, "Rotate 180 degrees")
def _rotate180(op: Rotate180, buffer: PixelBuffer) -> PixelBuffer:
    return compositor.rotate180(buffer)


@register_operation("rotate270", Rotate270, "Rotate 90 degrees counter-clockwise")
def _rotate270(op: Rotate270, buffer: PixelBuffer) -> PixelBuffer:
    return compositor.rotate270(buffer)
