"""Stored PLY documents, indexed by a JSON manifest in OUTPUT_DIR.

The manifest keeps the vertex/face counts the serializer reported, so
listing never has to reopen the documents.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from backend import config
from backend.models import StoredModel
from plyexport.ply import PlyBody

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"


def _manifest_path() -> Path:
    return config.OUTPUT_DIR / MANIFEST_NAME


def _check_filename(filename: str) -> str:
    if Path(filename).name != filename or not filename.endswith(".ply"):
        raise ValueError("filename must be a plain name ending in .ply")
    return filename


def load_manifest() -> Dict[str, dict]:
    path = _manifest_path()
    if not path.exists():
        return {}
    with open(path) as f:
        return json.load(f)


def _write_manifest(manifest: Dict[str, dict]):
    with open(_manifest_path(), "w") as f:
        json.dump(manifest, f, indent=2)


def save_document(filename: str, body: PlyBody) -> StoredModel:
    """Compile ``body`` into OUTPUT_DIR/filename and record it."""
    name = _check_filename(filename)
    config.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    out = config.OUTPUT_DIR / name
    with open(out, "w", encoding="ascii", newline="\n") as f:
        f.write(body.compile())

    entry = StoredModel(
        filename=name,
        vertices=body.vertex_count,
        faces=body.face_count,
        skipped=body.skipped,
        size_bytes=out.stat().st_size,
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    manifest = load_manifest()
    manifest[name] = entry.model_dump()
    _write_manifest(manifest)

    logger.info(f"Stored {name}: {entry.vertices} vertices, {entry.faces} faces")
    return entry


def list_documents() -> List[StoredModel]:
    """Manifest entries whose file is still on disk, by filename."""
    manifest = load_manifest()
    return [StoredModel(**manifest[name]) for name in sorted(manifest)
            if (config.OUTPUT_DIR / name).is_file()]


def document_path(filename: str) -> Optional[Path]:
    """Path of a stored document, or None if it isn't in the manifest."""
    if filename not in load_manifest():
        return None
    path = config.OUTPUT_DIR / filename
    return path if path.is_file() else None
