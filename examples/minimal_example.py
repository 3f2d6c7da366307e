#!/usr/bin/env python3
"""
Minimal Example: imgpipe API Usage
==================================

Shows the essential API calls without extra boilerplate.
This is the "quick reference" version.
"""

from pathlib import Path

from imgpipe import Pipeline, ImageInput, ColorSource, encode, save
from imgpipe.inputs import FontFileSource
from imgpipe.pipeline import (
    Resize,
    Overlay,
    DrawText,
    ColorBlend,
    Rotate90,
    Unsharpen,
    load_document,
)


# =============================================================================
# STEP 1: BUILD A PIPELINE IN CODE
# Equivalent to: imgpipe run banner.json -o banner.png
# =============================================================================

font_path = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"

# An opaque gold badge to stamp onto the banner
badge = ImageInput(
    ColorSource(255, 255, 255, (40, 40)),
    [ColorBlend(255, 200, 0)],
)

pipeline = Pipeline(
    ImageInput(ColorSource(30, 60, 120, (640, 480))),
    [
        Resize(w=320, h=180, filter="Lanczos3", mode="fill"),
        Overlay(badge, coords=(10, 10)),
        DrawText(
            text="Hello\nimgpipe",
            color=(255, 255, 255, 255),
            font=FontFileSource(font_path),
            scale=(32, 32),
            mid=(160, 90),
        ),
        Unsharpen(sigma=1.0, threshold=4),
    ],
)

banner = pipeline.apply_all().get_image()
print("Banner:", banner)

save(banner, "banner.png")
jpeg = encode(banner, "JPEG", quality=85)
print("  PNG:  banner.png")
print(f"  JPEG: {len(jpeg)} bytes in memory")


# =============================================================================
# STEP 2: THE SAME THING FROM A DOCUMENT
# =============================================================================

document = Path("banner.json")
if document.exists():
    image = load_document(document).apply_all().get_image()
    save(image, "banner_from_document.png")
    print("Document output: banner_from_document.png")


# =============================================================================
# STEP 3: PIPELINES ARE SINGLE-USE
# =============================================================================

quarter_turn = Pipeline(ImageInput(ColorSource(255, 0, 0, (4, 2))), [Rotate90()])
print("Rotated:", quarter_turn.apply_all().get_image())
print("Second get_image():", quarter_turn.get_image())
