"""Typed failures raised by the PLY entry points.

All of them are caller-input problems detected before any output is
emitted, so a caller never receives a partial document.
"""


class PlyExportError(ValueError):
    """Base class for PLY export validation failures."""


class NullInputError(PlyExportError):
    """The primary geometry argument (points, meshes, mesh) is missing."""


class LengthMismatchError(PlyExportError):
    """A parallel array (colors, transforms) does not match its geometry."""


class MissingGeometryError(PlyExportError):
    """A mesh reference resolved to no usable geometry."""


class InvalidTransformError(PlyExportError):
    """A transform is neither a 4x4 matrix nor a callable."""
