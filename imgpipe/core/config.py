"""
Configuration management for the imgpipe framework.

Package-level settings come from defaults, overridden by IMGPIPE_*
environment variables, overridden again by configure() at runtime.

Usage:
    from imgpipe.core.config import settings, configure

    print(settings.http_timeout)
    configure(jpeg_quality=80)
"""

import json
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any

from imgpipe.core.errors import ConfigError


@dataclass
class Settings:
    """
    Package-wide settings.

    Attributes:
        http_timeout: Seconds to wait for remote (url) inputs
        output_format: Default container for encoded output
        jpeg_quality: Default quality for lossy output formats
        log_level: Logging level used by the command line tool
    """
    http_timeout: float = 30.0
    output_format: str = "PNG"
    jpeg_quality: int = 90
    log_level: str = "WARNING"

    def to_dict(self) -> dict:
        """Convert settings to a dictionary."""
        return asdict(self)


def get_env_config(prefix: str = "IMGPIPE_") -> dict[str, Any]:
    """
    Get configuration from environment variables.

    All environment variables starting with the prefix will be included.
    Variable names are converted to lowercase with the prefix removed.

    Example:
        IMGPIPE_HTTP_TIMEOUT=5 -> {"http_timeout": "5"}
    """
    config = {}
    for key, value in os.environ.items():
        if key.startswith(prefix):
            config_key = key[len(prefix):].lower()
            config[config_key] = value
    return config


def _coerce(settings: Settings, values: dict[str, Any]) -> Settings:
    """Apply string or typed values onto known Settings fields."""
    types = {f.name: f.type for f in fields(Settings)}
    for key, value in values.items():
        if key not in types:
            continue
        field_type = types[key]
        try:
            if field_type in (float, "float"):
                value = float(value)
            elif field_type in (int, "int"):
                value = int(value)
            else:
                value = str(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid value for {key}: {value!r}") from exc
        setattr(settings, key, value)
    return settings


def load_settings(prefix: str = "IMGPIPE_") -> Settings:
    """Build Settings from defaults and environment variables."""
    return _coerce(Settings(), get_env_config(prefix))


def configure(**kwargs) -> Settings:
    """
    Update the package-level settings.

    Example:
        >>> configure(http_timeout=5, output_format="JPEG")
    """
    unknown = set(kwargs) - {f.name for f in fields(Settings)}
    if unknown:
        raise ConfigError(f"Unknown settings: {sorted(unknown)}")
    return _coerce(settings, kwargs)


def load_json(path: str | Path) -> dict:
    """
    Load a JSON document.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the JSON is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc


settings = load_settings()
