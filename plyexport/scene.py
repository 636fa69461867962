"""Adapters from trimesh meshes, scenes and point clouds to plain records.

The serializer treats incoming geometry as left-handed (x right, y up,
z forward). Most interchange formats (glTF, OBJ, STL, PLY) are
right-handed; pass ``right_handed=True`` to mirror such input into the
left-handed convention first so the written PLY keeps the original
orientation.
"""

import logging
import pathlib
from typing import List, Optional

import numpy as np
import trimesh

from .constants import DEFAULT_COLOR
from .errors import MissingGeometryError
from .models import MeshData, MeshInstance, PointCloud

logger = logging.getLogger(__name__)

# Mirror across the XY plane: right-handed <-> left-handed
MIRROR_Z = np.diag([1.0, 1.0, -1.0, 1.0])


def _vertex_colors(geom) -> Optional[np.ndarray]:
    """Per-vertex RGBA of a mesh or point cloud, or None if it has none."""
    if isinstance(geom, trimesh.PointCloud):
        colors = geom.colors
    elif getattr(geom.visual, 'kind', None) == 'vertex':
        colors = geom.visual.vertex_colors
    else:
        return None
    if colors is None or len(colors) != len(geom.vertices):
        return None
    return np.asarray(colors, dtype=np.uint8)


def mesh_from_trimesh(mesh: trimesh.Trimesh, name: Optional[str] = None,
                      right_handed: bool = False) -> MeshData:
    """Copy vertices, faces and vertex colors out of a trimesh mesh."""
    vertices = np.array(mesh.vertices, dtype=np.float64)
    faces = np.array(mesh.faces, dtype=np.int64)
    if right_handed:
        vertices[:, 2] = -vertices[:, 2]
        faces = faces[:, ::-1]
    return MeshData(vertices=vertices, triangles=faces,
                    colors=_vertex_colors(mesh), name=name)


def instances_from_scene(scene: trimesh.Scene,
                         right_handed: bool = False) -> List[MeshInstance]:
    """One instance per scene graph node that references a triangle mesh.

    Each instance carries the node's world transform. Paths and point
    clouds in the scene are ignored.
    """
    instances = []
    for node_name in scene.graph.nodes_geometry:
        transform, geom_name = scene.graph[node_name]
        geom = scene.geometry.get(geom_name)
        if not isinstance(geom, trimesh.Trimesh):
            logger.debug(f"  {node_name}: not a triangle mesh, skipping")
            continue

        mesh = mesh_from_trimesh(geom, name=geom_name, right_handed=right_handed)
        transform = np.asarray(transform, dtype=np.float64)
        if right_handed:
            transform = MIRROR_Z @ transform @ MIRROR_Z
        instances.append(MeshInstance(mesh=mesh, transform=transform,
                                      name=str(node_name)))
        logger.debug(f"  {node_name}: {len(geom.vertices)} verts, "
                     f"{len(geom.faces)} faces")
    return instances


def _check_path(path) -> pathlib.Path:
    p = pathlib.Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"No such file: {p}")
    return p


def load_instances(path, right_handed: bool = False) -> List[MeshInstance]:
    """Load a mesh or scene file into placed mesh instances."""
    p = _check_path(path)
    scene = trimesh.load(str(p), force='scene')
    instances = instances_from_scene(scene, right_handed=right_handed)
    logger.info(f"Loaded {p.name}: {len(instances)} meshes")
    return instances


def point_cloud_from_scene(scene: trimesh.Scene,
                           right_handed: bool = False) -> PointCloud:
    """Gather every vertex in a scene, in world space, as one point cloud."""
    parts, part_colors = [], []
    for node_name in scene.graph.nodes_geometry:
        transform, geom_name = scene.graph[node_name]
        geom = scene.geometry.get(geom_name)
        if not isinstance(geom, (trimesh.Trimesh, trimesh.PointCloud)):
            continue
        points = trimesh.transformations.transform_points(
            np.asarray(geom.vertices, dtype=np.float64), transform)
        parts.append(points)
        part_colors.append(_vertex_colors(geom))

    if not parts:
        raise MissingGeometryError("Scene holds no points")

    positions = np.vstack(parts)
    if right_handed:
        positions[:, 2] = -positions[:, 2]

    colors = None
    if any(c is not None for c in part_colors):
        white = np.array(list(DEFAULT_COLOR) + [255], dtype=np.uint8)
        colors = np.vstack([
            c if c is not None else np.tile(white, (len(p), 1))
            for p, c in zip(parts, part_colors)
        ])
    return PointCloud(positions=positions, colors=colors)


def load_point_cloud(path, right_handed: bool = False) -> PointCloud:
    """Load the vertices (and vertex colors) of any mesh or point file."""
    p = _check_path(path)
    scene = trimesh.load(str(p), force='scene')
    cloud = point_cloud_from_scene(scene, right_handed=right_handed)
    logger.info(f"Loaded {p.name}: {cloud.n_points} points")
    return cloud
