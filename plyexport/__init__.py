"""plyexport package — ASCII PLY export of point clouds and merged meshes."""

from plyexport.errors import (InvalidTransformError, LengthMismatchError,
                              MissingGeometryError, NullInputError,
                              PlyExportError)
from plyexport.models import MeshData, MeshInstance, PointCloud
from plyexport.ply import (compile_ply, to_ply, to_ply_instance,
                           to_ply_instances, to_ply_mesh, to_ply_pointcloud)
