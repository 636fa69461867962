"""ASCII PLY serialization of point clouds and merged triangle meshes.

Geometry arrives in a left-handed frame. Every vertex has its z negated on
the way out, which mirrors the model, so every face is written with its
winding reversed to keep normals pointing outward.

Output layout:
  ply / format / element+property declarations / end_header
  <vertex_count lines>  x y z r g b
  <face_count lines>    3 i2 i1 i0

Collections of meshes share one vertex index space: each mesh's local
triangle indices are offset by the number of vertices written before it.
Null or empty meshes in a collection are skipped; single-mesh entry points
reject them instead.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from . import constants
from .constants import DEFAULT_COLOR, FACE_VERTEX_COUNT, PLY_HEADER
from .errors import (InvalidTransformError, LengthMismatchError,
                     MissingGeometryError, NullInputError)
from .geometry import (apply_transform, as_colors, as_positions, as_triangles,
                       format_float, is_color_array, is_point_array,
                       is_transform, to_right_handed)
from .models import MeshData, MeshInstance, Transform

logger = logging.getLogger(__name__)


@dataclass
class PlyBody:
    """Accumulated vertex and face lines for one document."""
    vertex_lines: List[str] = field(default_factory=list)
    face_lines: List[str] = field(default_factory=list)
    skipped: int = 0

    @property
    def vertex_count(self) -> int:
        return len(self.vertex_lines)

    @property
    def face_count(self) -> int:
        return len(self.face_lines)

    def to_text(self) -> str:
        """Vertex block first, then the face block."""
        return "".join(self.vertex_lines) + "".join(self.face_lines)

    def compile(self) -> str:
        """Full PLY document: header with this body's counts, then the body."""
        logger.info(f"PLY: {self.vertex_count} vertices, {self.face_count} faces"
                    + (f" ({self.skipped} meshes skipped)" if self.skipped else ""))
        return compile_ply(self.to_text(), self.vertex_count, self.face_count)


# ── Emitters ────────────────────────────────────────────────────────────

def emit_vertices(out: List[str], positions, colors=None,
                  transform: Transform = None,
                  precision: Optional[int] = None) -> int:
    """Append one ``x y z r g b`` line per position to ``out``.

    Returns the number of lines written.
    """
    pos = as_positions(positions)
    cols = as_colors(colors, len(pos))
    if colors is not None and cols is None:
        logger.debug(f"Ignoring colors that don't match {len(pos)} vertices")
    pos = to_right_handed(apply_transform(pos, transform))

    r0, g0, b0 = DEFAULT_COLOR
    for i, (x, y, z) in enumerate(pos):
        if cols is not None:
            r, g, b = cols[i]
        else:
            r, g, b = r0, g0, b0
        out.append(f"{format_float(x, precision)} {format_float(y, precision)} "
                   f"{format_float(z, precision)} {r} {g} {b}\n")

    return len(pos)


def emit_faces(out: List[str], triangles, offset: int = 0) -> int:
    """Append one face line per triangle, offset and in reverse winding.

    Returns the number of faces written.
    """
    tris = as_triangles(triangles)
    for a, b, c in tris:
        out.append(f"{FACE_VERTEX_COUNT} {c + offset} {b + offset} {a + offset}\n")
    return len(tris)


# ── Merging ─────────────────────────────────────────────────────────────

def merge_points(positions, colors=None,
                 precision: Optional[int] = None) -> PlyBody:
    """Emit a bare point set: vertices only."""
    body = PlyBody()
    emit_vertices(body.vertex_lines, positions, colors, precision=precision)
    return body


def _merge_mesh(body: PlyBody, mesh: Optional[MeshData],
                transform: Transform,
                precision: Optional[int]) -> PlyBody:
    if mesh is None or not mesh.is_valid:
        body.skipped += 1
        logger.debug("Skipping mesh without geometry")
        return body
    if not is_transform(transform):
        body.skipped += 1
        logger.debug(f"Skipping {mesh.name or 'mesh'}: unusable transform")
        return body

    # Faces first, against the offset of vertices already written
    offset = body.vertex_count
    emit_faces(body.face_lines, mesh.triangles, offset)
    emit_vertices(body.vertex_lines, mesh.vertices, mesh.colors,
                  transform, precision)
    return body


def merge_meshes(meshes: Sequence[Optional[MeshData]],
                 transforms: Optional[Sequence[Transform]] = None,
                 precision: Optional[int] = None) -> PlyBody:
    """Merge meshes into one index space, skipping invalid entries."""
    body = PlyBody()
    for i, mesh in enumerate(meshes):
        transform = transforms[i] if transforms is not None else None
        body = _merge_mesh(body, mesh, transform, precision)
    return body


# ── Document ────────────────────────────────────────────────────────────

def generate_header(vertex_count: int, face_count: int) -> str:
    return PLY_HEADER.format(vertex_count=vertex_count, face_count=face_count)


def compile_ply(data: str, vertex_count: int, face_count: int) -> str:
    """Prefix ``data`` with a header declaring the given counts."""
    return generate_header(vertex_count, face_count) + data


def _precision(precision: Optional[int]) -> Optional[int]:
    return constants.FLOAT_PRECISION if precision is None else precision


# ── Validated bodies ────────────────────────────────────────────────────
# Each check runs before anything is emitted; failures never leave a
# partial body behind.

def pointcloud_body(points, colors=None,
                    precision: Optional[int] = None) -> PlyBody:
    """Validate a point cloud and emit its vertex lines.

    Raises
    ------
    NullInputError if ``points`` is None.
    MissingGeometryError if ``points`` is not an (N, 3) array.
    LengthMismatchError if ``colors`` isn't one RGB/RGBA row per point.
    """
    if points is None:
        logger.error("Ply export error: points array can't be None")
        raise NullInputError("Points array can't be None")
    if not is_point_array(points):
        logger.error("Ply export error: points must have shape (N, 3)")
        raise MissingGeometryError("Points must have shape (N, 3)")
    positions = as_positions(points)
    if colors is not None and not is_color_array(colors, len(positions)):
        shape = np.shape(colors)
        logger.error(f"Ply export error: colors of shape {shape} "
                     f"for {len(positions)} points")
        raise LengthMismatchError(
            f"Colors array should hold one RGB or RGBA row per point "
            f"(got shape {shape} for {len(positions)} points)")

    return merge_points(positions, colors, _precision(precision))


def meshes_body(meshes: Sequence[Optional[MeshData]],
                transforms: Optional[Sequence[Transform]] = None,
                precision: Optional[int] = None) -> PlyBody:
    """Validate a mesh collection and merge it.

    Unusable entries (None, no vertices, bad transform) are skipped and
    counted in ``PlyBody.skipped``.
    """
    if meshes is None:
        logger.error("Ply export error: meshes array can't be None")
        raise NullInputError("Meshes array can't be None")
    meshes = list(meshes)
    if transforms is not None:
        transforms = list(transforms)
        if len(transforms) != len(meshes):
            logger.error(f"Ply export error: {len(transforms)} transforms "
                         f"for {len(meshes)} meshes")
            raise LengthMismatchError(
                f"Transforms array should be same length as meshes array "
                f"({len(transforms)} != {len(meshes)})")

    return merge_meshes(meshes, transforms, _precision(precision))


def mesh_body(mesh: Optional[MeshData], transform: Transform = None,
              precision: Optional[int] = None) -> PlyBody:
    """Validate a single mesh and emit it."""
    if mesh is None:
        logger.error("Ply export error: mesh can't be None")
        raise NullInputError("Mesh can't be None")
    name = mesh.name or "mesh"
    if not mesh.is_valid:
        logger.error(f"Ply export error: {name} has no geometry")
        raise MissingGeometryError(f"{name} has no geometry")
    if not is_transform(transform):
        logger.error(f"Ply export error: {name} transform is not a 4x4 matrix")
        raise InvalidTransformError(f"Transform of {name} must be a 4x4 matrix or a callable")

    return meshes_body([mesh], [transform], precision)


def instances_body(instances: Sequence[Optional[MeshInstance]],
                   use_world_position: bool = True,
                   precision: Optional[int] = None) -> PlyBody:
    """Validate placed meshes and merge them; unusable instances are skipped."""
    if instances is None:
        logger.error("Ply export error: instances array can't be None")
        raise NullInputError("Instances array can't be None")

    meshes = [inst.mesh if inst is not None else None for inst in instances]
    transforms = None
    if use_world_position:
        transforms = [inst.transform if inst is not None else None
                      for inst in instances]
    return meshes_body(meshes, transforms, precision)


def instance_body(instance: Optional[MeshInstance],
                  use_world_position: bool = True,
                  precision: Optional[int] = None) -> PlyBody:
    """Validate a single placed mesh and emit it."""
    if instance is None:
        logger.error("Ply export error: instance can't be None")
        raise NullInputError("Instance can't be None")
    if instance.mesh is None or not instance.mesh.is_valid:
        logger.error(f"Ply export error: {instance.get_name()} mesh can't be None")
        raise MissingGeometryError(f"{instance.get_name()} has no mesh")

    transform = instance.transform if use_world_position else None
    return mesh_body(instance.mesh, transform, precision)


# ── Public entry points ─────────────────────────────────────────────────

def to_ply_pointcloud(points, colors=None,
                      precision: Optional[int] = None) -> str:
    """Serialize a point cloud.

    Parameters
    ----------
    points : array-like (N, 3)
        Point positions.
    colors : array-like (N, 3) or (N, 4), optional
        Per-point colors (0-255). Alpha is dropped. Must match ``points``.
    precision : int, optional
        Fractional digits for positions; shortest round-trip by default.

    Returns
    -------
    str with the PLY document.
    """
    return pointcloud_body(points, colors, precision).compile()


def to_ply(meshes: Sequence[Optional[MeshData]],
           transforms: Optional[Sequence[Transform]] = None,
           precision: Optional[int] = None) -> str:
    """Serialize and combine meshes into one PLY model.

    ``None`` meshes, meshes without vertices and meshes whose transform is
    unusable are ignored. ``transforms``, if given, holds one local-to-world
    transform (or None) per mesh.
    """
    return meshes_body(meshes, transforms, precision).compile()


def to_ply_mesh(mesh: Optional[MeshData], transform: Transform = None,
                precision: Optional[int] = None) -> str:
    """Serialize a single mesh."""
    return mesh_body(mesh, transform, precision).compile()


def to_ply_instances(instances: Sequence[Optional[MeshInstance]],
                     use_world_position: bool = True,
                     precision: Optional[int] = None) -> str:
    """Serialize and combine placed meshes.

    Instances that are None or hold no mesh are ignored. With
    ``use_world_position`` each mesh is moved by its instance transform.
    """
    return instances_body(instances, use_world_position, precision).compile()


def to_ply_instance(instance: Optional[MeshInstance],
                    use_world_position: bool = True,
                    precision: Optional[int] = None) -> str:
    """Serialize a single placed mesh."""
    return instance_body(instance, use_world_position, precision).compile()
