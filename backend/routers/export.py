import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from backend import config, store
from backend.models import MeshesRequest, PointCloudRequest
from plyexport import MeshData, MeshInstance
from plyexport.ply import PlyBody, instances_body, pointcloud_body

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ply", tags=["ply"])


def _respond(body: PlyBody, filename):
    """Return the document, or store it and return its manifest entry."""
    if filename is None:
        return PlainTextResponse(body.compile(), media_type=config.PLY_MEDIA_TYPE)
    try:
        return store.save_document(filename, body)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.post("/points")
def export_points(request: PointCloudRequest):
    """Convert a point cloud to PLY."""
    try:
        body = pointcloud_body(request.points, request.colors,
                               precision=request.precision)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _respond(body, request.filename)


@router.post("/meshes")
def export_meshes(request: MeshesRequest):
    """Merge meshes into one PLY model.

    ``null`` entries in ``meshes`` are skipped, matching the behavior of
    the library's collection entry points.
    """
    instances = None
    if request.meshes is not None:
        instances = [
            MeshInstance(
                mesh=MeshData(vertices=m.vertices, triangles=m.triangles,
                              colors=m.colors, name=m.name),
                transform=m.transform,
                name=m.name,
            ) if m is not None else None
            for m in request.meshes
        ]

    try:
        body = instances_body(instances,
                              use_world_position=request.use_world_position,
                              precision=request.precision)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _respond(body, request.filename)
