"""
Common Endpoints

Public procedures that need no authentication.
"""
from fastapi import APIRouter, Depends

from hrportal.schemas.document import BaseUrlResponse
from hrportal.services.storage import StorageClient, get_storage

router = APIRouter(tags=["common"])


@router.post("/getMinioBaseUrl", response_model=BaseUrlResponse)
async def get_minio_base_url(
    storage: StorageClient = Depends(get_storage)
):
    """Base URL the client prefixes to public object paths."""
    return {"base_url": storage.base_url}
