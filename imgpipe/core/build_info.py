"""
Version and build information.
"""

import platform
import struct
import sys

import cv2
import numpy as np
import PIL


def build_info() -> dict:
    """Return version details of imgpipe and the libraries it drives."""
    from imgpipe import __version__

    return {
        "version": __version__,
        "python": platform.python_version(),
        "system": platform.system(),
        "machine": platform.machine(),
        "pointer_width": struct.calcsize("P") * 8,
        "opencv": cv2.__version__,
        "numpy": np.__version__,
        "pillow": PIL.__version__,
    }


def version_str() -> str:
    """One-line version string, as printed by ``imgpipe version``."""
    info = build_info()
    debug = " (debug)" if sys.flags.debug else ""
    return (
        f"Version {info['version']} (python {info['python']}){debug}, "
        f"built for {info['system']} {info['machine']} {info['pointer_width']}-bit "
        f"using opencv {info['opencv']}, numpy {info['numpy']}, pillow {info['pillow']}"
    )
