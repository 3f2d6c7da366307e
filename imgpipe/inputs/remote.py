"""
Optional input sources: base64 payloads and remote urls.

Importing this module registers the extra source types with the resolver
registry. Fetches are blocking and use the timeout from
imgpipe.core.config.settings.
"""

import base64
import binascii
import logging
from dataclasses import dataclass

import requests

from imgpipe.core.buffer import PixelBuffer
from imgpipe.core.codec import decode
from imgpipe.core.config import settings
from imgpipe.core.errors import DecodeError, TransportError
from imgpipe.inputs.resolver import register_resolver, register_font_resolver
from imgpipe.inputs.sources import ImageSource, FontSource
from imgpipe.text.font import Font

logger = logging.getLogger(__name__)


@dataclass
class Base64Source(ImageSource):
    """Base64-encoded image bytes."""
    data: str


@dataclass
class UrlSource(ImageSource):
    """An image fetched over HTTP(S)."""
    url: str


@dataclass
class FontBase64Source(FontSource):
    """Base64-encoded font data."""
    data: str


@dataclass
class FontUrlSource(FontSource):
    """A font fetched over HTTP(S)."""
    url: str


def decode_base64(data: str | bytes) -> bytes:
    """
    Strictly decode a base64 payload. Whitespace is ignored.

    Raises:
        DecodeError: If the payload is not valid base64
    """
    if isinstance(data, str):
        data = data.encode("ascii", errors="replace")
    compact = b"".join(data.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Malformed base64 data: {exc}") from exc


def fetch_bytes(url: str, timeout: float | None = None) -> bytes:
    """
    Download ``url`` and return the response body.

    Raises:
        TransportError: On connection errors, timeouts or non-2xx responses
    """
    timeout = settings.http_timeout if timeout is None else timeout
    logger.debug("Fetching %s (timeout %.1fs)", url, timeout)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise TransportError(f"Failed to fetch {url}: {exc}") from exc
    return response.content


@register_resolver(Base64Source)
def _resolve_base64(source: Base64Source) -> PixelBuffer:
    return decode(decode_base64(source.data))


@register_resolver(UrlSource)
def _resolve_url(source: UrlSource) -> PixelBuffer:
    return decode(fetch_bytes(source.url))


@register_font_resolver(FontBase64Source)
def _resolve_font_base64(source: FontBase64Source) -> Font:
    return Font(decode_base64(source.data))


@register_font_resolver(FontUrlSource)
def _resolve_font_url(source: FontUrlSource) -> Font:
    return Font(fetch_bytes(source.url))
