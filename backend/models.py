from pydantic import BaseModel
from typing import List, Optional


class MeshPayload(BaseModel):
    vertices: List[List[float]]
    triangles: List[int] = []
    colors: Optional[List[List[int]]] = None
    transform: Optional[List[List[float]]] = None  # 4x4, row-major
    name: Optional[str] = None


class PointCloudRequest(BaseModel):
    points: Optional[List[List[float]]] = None
    colors: Optional[List[List[int]]] = None
    precision: Optional[int] = None
    filename: Optional[str] = None   # store under OUTPUT_DIR instead of returning


class MeshesRequest(BaseModel):
    meshes: Optional[List[Optional[MeshPayload]]] = None
    use_world_position: bool = True
    precision: Optional[int] = None
    filename: Optional[str] = None


class StoredModel(BaseModel):
    filename: str
    vertices: int
    faces: int
    skipped: int = 0     # meshes dropped from the merge
    size_bytes: int
    created_at: str
