"""PLY format constants and environment-driven defaults."""

import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ── PLY header ─────────────────────────────────────────────────────────
# Declared property types are what external tools read; the body is text.

PLY_HEADER = (
    "ply\n"
    "format ascii 1.0\n"
    "element vertex {vertex_count}\n"
    "property float32 x\n"
    "property float32 y\n"
    "property float32 z\n"
    "property uchar red\n"
    "property uchar green\n"
    "property uchar blue\n"
    "element face {face_count}\n"
    "property list uint8 int32 vertex_index\n"
    "end_header\n"
)

# Vertex color used when a point/vertex has none
DEFAULT_COLOR = (255, 255, 255)

# Vertices per emitted face; only triangles are supported
FACE_VERTEX_COUNT = 3


def _env_int(name):
    value = os.environ.get(name, "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


# Fractional digits for positions; None = shortest float32 round-trip
FLOAT_PRECISION = _env_int("PLYEXPORT_FLOAT_PRECISION")

LOG_LEVEL = os.environ.get("PLYEXPORT_LOG_LEVEL", "INFO").strip().upper() or "INFO"
