"""Coordinate transforms, handedness conversion, and number formatting."""

import logging
from typing import Optional

import numpy as np
import trimesh

from .constants import FACE_VERTEX_COUNT
from .models import Transform

logger = logging.getLogger(__name__)


# ── Array normalization ─────────────────────────────────────────────────

def as_positions(points) -> np.ndarray:
    """Return points as an (N, 3) float64 array."""
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 3), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"Positions must have shape (N, 3), got {arr.shape}")
    return arr


def as_colors(colors, count: int) -> Optional[np.ndarray]:
    """Return colors as (N, 3) uint8, or None when they can't be used.

    Alpha is dropped. Colors whose length doesn't match ``count`` are
    ignored rather than rejected; callers that must reject them check
    the length first.
    """
    if colors is None:
        return None
    arr = np.asarray(colors)
    if arr.ndim != 2 or arr.shape[1] not in (3, 4) or len(arr) != count:
        return None
    return np.clip(arr[:, :3], 0, 255).astype(np.uint8)


def is_point_array(points) -> bool:
    """True for an (N, 3) array of numbers, including an empty one."""
    if points is None:
        return False
    try:
        arr = np.asarray(points, dtype=np.float64)
    except (TypeError, ValueError):
        return False
    return arr.size == 0 or (arr.ndim == 2 and arr.shape[1] == 3)


def is_color_array(colors, count: int) -> bool:
    """True for ``count`` RGB or RGBA rows."""
    try:
        arr = np.asarray(colors, dtype=np.float64)
    except (TypeError, ValueError):
        return False
    if count == 0:
        return arr.size == 0
    return arr.ndim == 2 and arr.shape[1] in (3, 4) and len(arr) == count


def is_transform(transform) -> bool:
    """True for None, a callable, or a 4x4 matrix."""
    if transform is None or callable(transform):
        return True
    try:
        matrix = np.asarray(transform, dtype=np.float64)
    except (TypeError, ValueError):
        return False
    return matrix.shape == (4, 4)


def as_triangles(triangles) -> np.ndarray:
    """Return an index buffer as (K, 3) int64, dropping any incomplete tail."""
    if triangles is None:
        return np.zeros((0, FACE_VERTEX_COUNT), dtype=np.int64)
    flat = np.asarray(triangles, dtype=np.int64).ravel()
    usable = len(flat) - len(flat) % FACE_VERTEX_COUNT
    if usable != len(flat):
        logger.debug(f"Index buffer of length {len(flat)} is not a multiple of "
                     f"{FACE_VERTEX_COUNT}; dropping {len(flat) - usable} trailing indices")
    return flat[:usable].reshape(-1, FACE_VERTEX_COUNT)


# ── Coordinate transforms ───────────────────────────────────────────────

def apply_transform(points: np.ndarray, transform: Transform) -> np.ndarray:
    """Map local points to world space.

    ``transform`` may be a 4x4 homogeneous matrix or a callable taking and
    returning an (N, 3) array. ``None`` leaves the points untouched.
    """
    if transform is None:
        return points
    if callable(transform):
        return as_positions(transform(points))

    matrix = np.asarray(transform, dtype=np.float64)
    if matrix.shape != (4, 4):
        raise ValueError(f"Transform matrix must be 4x4, got {matrix.shape}")
    if len(points) == 0:
        return points
    return trimesh.transformations.transform_points(points, matrix)


def to_right_handed(points: np.ndarray) -> np.ndarray:
    """Flip left-handed points into the right-handed PLY frame.

    Only z is negated. Values are rounded to float32, the declared vertex
    property type, and negative zeros are cleared.
    """
    out = np.array(points, dtype=np.float32).reshape(-1, 3)
    out[:, 2] = -out[:, 2]
    out += np.float32(0.0)  # -0.0 + 0.0 == +0.0
    return out


# ── Formatting ──────────────────────────────────────────────────────────

def format_float(value, precision: Optional[int] = None) -> str:
    """Locale-independent positional text for a float32 value.

    With no precision the shortest string that round-trips the float32 is
    used (``1.0`` -> ``1``, ``0.1`` -> ``0.1``). With a precision, at most
    that many fractional digits are kept and trailing zeros are trimmed.
    """
    if precision is None:
        text = np.format_float_positional(np.float32(value), unique=True, trim='-')
    else:
        text = np.format_float_positional(np.float32(value), precision=precision,
                                          unique=False, trim='-')
    if text == "-0":
        return "0"
    return text
