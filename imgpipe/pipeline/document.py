"""
Declarative pipeline documents.

Maps a JSON-style document onto ImageInput, Operation and Pipeline objects.
Keys are snake_case. An image input names exactly one source:

    {"color": {"r": 255, "g": 0, "b": 0, "size": [64, 64]}}
    {"filename": "photo.jpg"}
    {"bytes": [137, 80, 78, 71, ...]}
    {"new": {"h": 32, "w": 32, "type": "RgbaImage"}}
    {"base64": "iVBORw0KGgo..."}
    {"url": "https://example.com/image.png"}

plus an optional "operations" list. Operations are either a bare name
("invert") or a single-key mapping ({"brighten": 10},
{"resize": {"w": 100, "h": 50, "filter": "Lanczos3", "mode": "fill"}}).

A pipeline document is either an image input, or
{"input": <image input>, "operations": [...]}.
"""

from dataclasses import fields
from pathlib import Path
from typing import Any

from imgpipe.core.config import load_json
from imgpipe.core.errors import ConfigError
from imgpipe.inputs.remote import Base64Source, UrlSource, FontBase64Source, FontUrlSource
from imgpipe.inputs.sources import (
    ImageInput,
    ImageSource,
    ColorSource,
    BytesSource,
    FileSource,
    NewSource,
    FontSource,
    FontFileSource,
    FontBytesSource,
)
from imgpipe.pipeline.operations import (
    Operation,
    Overlay,
    Tile,
    DrawText,
    Resize,
    get_operation_class,
)
from imgpipe.pipeline.runner import Pipeline
from imgpipe.processing.resize import ResizeMode
from imgpipe.text.layout import Scale

IMAGE_SOURCE_KEYS = ("color", "filename", "bytes", "new", "base64", "url")
FONT_SOURCE_KEYS = ("filename", "bytes", "base64", "url")

# Operations whose document value is a bare scalar, e.g. {"brighten": 10}
_SCALAR_OPERATIONS = ("brighten", "adjust_contrast", "hue_rotate")


def _single_key(data: dict, keys: tuple[str, ...], what: str) -> str:
    present = [k for k in keys if k in data]
    if len(present) != 1:
        raise ConfigError(f"{what} needs exactly one of {list(keys)}, got {present or 'none'}")
    return present[0]


def _resolve_path(path: str, base_dir: Path | None) -> Path:
    path = Path(path)
    if base_dir is not None and not path.is_absolute():
        return base_dir / path
    return path


def _as_bytes(value: Any, what: str) -> bytes:
    try:
        return bytes(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{what} must be a list of byte values") from exc


def parse_image_source(data: dict, base_dir: Path | None = None) -> ImageSource:
    """Build an ImageSource from its document form."""
    if not isinstance(data, dict):
        raise ConfigError(f"Image input must be a mapping, got {type(data).__name__}")
    key = _single_key(data, IMAGE_SOURCE_KEYS, "Image input")
    value = data[key]
    try:
        if key == "color":
            return ColorSource(
                r=int(value["r"]),
                g=int(value["g"]),
                b=int(value["b"]),
                size=(int(value["size"][0]), int(value["size"][1])),
            )
        if key == "filename":
            return FileSource(_resolve_path(value, base_dir))
        if key == "bytes":
            return BytesSource(_as_bytes(value, "bytes"))
        if key == "new":
            kind = value.get("type", value.get("type_"))
            if kind is None:
                raise ConfigError("new image needs a 'type'")
            return NewSource(h=int(value["h"]), w=int(value["w"]), kind=str(kind))
        if key == "base64":
            return Base64Source(str(value))
        return UrlSource(str(value))
    except ConfigError:
        raise
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise ConfigError(f"Malformed '{key}' image input: {exc!r}") from exc


def parse_image_input(data: dict, base_dir: Path | None = None) -> ImageInput:
    """Build an ImageInput (source + its operations) from its document form."""
    source = parse_image_source(data, base_dir)
    operations = [parse_operation(op, base_dir) for op in data.get("operations", [])]
    return ImageInput(source, operations)


def parse_font_source(data: dict, base_dir: Path | None = None) -> FontSource:
    """Build a FontSource from its document form."""
    if not isinstance(data, dict):
        raise ConfigError(f"Font must be a mapping, got {type(data).__name__}")
    key = _single_key(data, FONT_SOURCE_KEYS, "Font")
    value = data[key]
    if key == "filename":
        return FontFileSource(_resolve_path(value, base_dir))
    if key == "bytes":
        return FontBytesSource(_as_bytes(value, "font bytes"))
    if key == "base64":
        return FontBase64Source(str(value))
    return FontUrlSource(str(value))


def parse_operation(item: str | dict, base_dir: Path | None = None) -> Operation:
    """
    Build one Operation from its document form.

    Raises:
        ConfigError: If the operation name is unknown or its fields are malformed
    """
    if isinstance(item, str):
        name, value = item, None
    elif isinstance(item, dict) and len(item) == 1:
        name, value = next(iter(item.items()))
    else:
        raise ConfigError(f"Operation must be a name or a single-key mapping: {item!r}")

    try:
        op_class = get_operation_class(name)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    if name in _SCALAR_OPERATIONS and not isinstance(value, dict):
        value = {"value": value}
    params = dict(value or {})

    try:
        if op_class is Overlay:
            params["layer_image_input"] = parse_image_input(params["layer_image_input"], base_dir)
            params["coords"] = tuple(int(c) for c in params["coords"])
        elif op_class is Tile:
            params["tile_image"] = parse_image_input(params["tile_image"], base_dir)
        elif op_class is DrawText:
            params["font"] = parse_font_source(params["font"], base_dir)
            params["color"] = tuple(int(c) for c in params["color"])
            params["scale"] = Scale(*(float(s) for s in params["scale"]))
            params["mid"] = tuple(int(m) for m in params["mid"])
        elif op_class is Resize and "mode" in params:
            params["mode"] = ResizeMode.from_name(params["mode"])

        allowed = {f.name for f in fields(op_class)}
        unknown = set(params) - allowed
        if unknown:
            raise ConfigError(f"Unknown fields for {name}: {sorted(unknown)}")
        return op_class(**params)
    except ConfigError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"Malformed '{name}' operation: {exc!r}") from exc


def parse_document(data: dict, base_dir: str | Path | None = None) -> Pipeline:
    """
    Build a Pipeline from a document.

    Args:
        data: Parsed document
        base_dir: Directory relative file names are resolved against

    Returns:
        A PENDING Pipeline
    """
    base_dir = Path(base_dir) if base_dir is not None else None
    if not isinstance(data, dict):
        raise ConfigError(f"Document must be a mapping, got {type(data).__name__}")
    if "input" in data:
        image_input = parse_image_input(data["input"], base_dir)
        operations = [parse_operation(op, base_dir) for op in data.get("operations", [])]
        return Pipeline(image_input, operations)
    return Pipeline(parse_image_input(data, base_dir))


def load_document(path: str | Path) -> Pipeline:
    """
    Load a pipeline document from a JSON file.

    Relative file names inside the document are resolved against the
    document's directory.
    """
    path = Path(path)
    return parse_document(load_json(path), base_dir=path.parent)
