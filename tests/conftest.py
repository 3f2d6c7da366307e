"""
Shared fixtures for imgpipe tests.
"""

from pathlib import Path

import pytest

FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
    "/Library/Fonts/Arial.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
]

MONO_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationMono-Regular.ttf",
    "/System/Library/Fonts/Menlo.ttc",
    "C:/Windows/Fonts/consola.ttf",
]


def find_font_data():
    """Return the bytes of a TrueType font available on this machine, or None."""
    for candidate in FONT_CANDIDATES:
        path = Path(candidate)
        if path.is_file():
            return path.read_bytes()

    # Pillow >= 10.1 embeds a scalable default font
    from PIL import ImageFont
    try:
        default = ImageFont.load_default(size=16)
    except TypeError:
        return None
    return getattr(default, "font_bytes", None)


@pytest.fixture(scope="session")
def font_data():
    data = find_font_data()
    if data is None:
        pytest.skip("No TrueType font available")
    return data


@pytest.fixture
def font(font_data):
    from imgpipe.text import Font
    return Font(font_data)


@pytest.fixture
def red_png():
    """A 4x4 red PNG."""
    from imgpipe.core import encode, fill_color
    return encode(fill_color((255, 0, 0), (4, 4)), "PNG")


@pytest.fixture(scope="session")
def mono_font_data(font_data):
    """A monospace font if one is installed, else the regular test font."""
    for candidate in MONO_FONT_CANDIDATES:
        path = Path(candidate)
        if path.is_file():
            return path.read_bytes()
    return font_data


@pytest.fixture
def mono_font(mono_font_data):
    from imgpipe.text import Font
    return Font(mono_font_data)
