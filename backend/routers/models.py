import logging
from typing import List

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from backend import config, store
from backend.models import StoredModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/models", tags=["models"])


@router.get("", response_model=List[StoredModel])
def list_stored():
    """Stored documents with the counts recorded when they were written."""
    return store.list_documents()


@router.get("/{filename}")
def download(filename: str):
    """Send back a stored document. Only manifest entries are served."""
    path = store.document_path(filename)
    if path is None:
        raise HTTPException(status_code=404, detail=f"{filename} is not stored")
    return FileResponse(path=str(path), media_type=config.PLY_MEDIA_TYPE,
                        filename=filename)
