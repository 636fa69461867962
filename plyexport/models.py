"""Plain geometry records consumed by the PLY serializer."""

from dataclasses import dataclass
from typing import Callable, Optional, Union

import numpy as np

# A 4x4 homogeneous matrix, or a function mapping (N, 3) points to (N, 3)
Transform = Union[np.ndarray, Callable[[np.ndarray], np.ndarray], None]


@dataclass
class PointCloud:
    """Bare point set with optional parallel colors; no connectivity."""
    positions: Optional[np.ndarray]
    colors: Optional[np.ndarray] = None

    @property
    def n_points(self) -> int:
        if self.positions is None:
            return 0
        return len(np.asarray(self.positions))


@dataclass
class MeshData:
    """Triangle mesh in its own local frame.

    ``triangles`` is either a flat index buffer (one triple per face) or a
    (K, 3) array. Indices refer to this mesh's own ``vertices``.
    """
    vertices: Optional[np.ndarray]
    triangles: Optional[np.ndarray] = None
    colors: Optional[np.ndarray] = None
    name: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        """A mesh needs a non-empty (N, 3) vertex array to carry geometry."""
        if self.vertices is None:
            return False
        try:
            arr = np.asarray(self.vertices, dtype=np.float64)
        except (TypeError, ValueError):
            return False
        return arr.ndim == 2 and arr.shape[1] == 3 and len(arr) > 0

    @property
    def n_vertices(self) -> int:
        if not self.is_valid:
            return 0
        return len(self.vertices)

    @property
    def n_triangles(self) -> int:
        if self.triangles is None:
            return 0
        return np.asarray(self.triangles).size // 3


@dataclass
class MeshInstance:
    """A mesh placed in the world: the mesh plus its local-to-world transform."""
    mesh: Optional[MeshData]
    transform: Transform = None
    name: Optional[str] = None

    def get_name(self) -> str:
        if self.name:
            return self.name
        if self.mesh is not None and self.mesh.name:
            return self.mesh.name
        return "mesh"
