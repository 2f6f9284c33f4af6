"""
Profile Endpoints

Self-service profile edits and profile photo upload.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import time

from hrportal.database import get_db
from hrportal.models.user import User
from hrportal.schemas.base import UploadUrlRequest, UploadUrlResponse
from hrportal.schemas.profile import ProfileUpdate, ProfileUpdateResponse, ProfilePhotoRequest, ProfilePhotoResponse
from hrportal.api.deps import get_current_user
from hrportal.services.storage import StorageClient, get_storage
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["profile"])


@router.post("/updateProfile", response_model=ProfileUpdateResponse)
async def update_profile(
    profile_update: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update the caller's self-service fields.

    Only fields present in the request are changed. Employment
    details are admin managed (see updateEmployee).
    """
    update_data = profile_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(current_user, field, value)

    db.commit()

    logger.info(f"Profile updated: user={current_user.id}, fields={list(update_data.keys())}")

    return {"user": current_user}


@router.post("/getUploadUrl", response_model=UploadUrlResponse)
async def get_upload_url(
    request: UploadUrlRequest,
    current_user: User = Depends(get_current_user),
    storage: StorageClient = Depends(get_storage)
):
    """Pre-signed PUT URL for a new profile photo."""
    bucket = storage.settings.BUCKET_PROFILE_PHOTOS
    object_name = f"{current_user.id}-{int(time.time() * 1000)}-{request.file_name}"

    return {
        "upload_url": storage.upload_url(bucket, object_name),
        "object_name": object_name,
    }


@router.post("/updateProfilePhoto", response_model=ProfilePhotoResponse)
async def update_profile_photo(
    request: ProfilePhotoRequest,
    current_user: User = Depends(get_current_user),
    storage: StorageClient = Depends(get_storage),
    db: Session = Depends(get_db)
):
    """Point the profile photo at an object uploaded with getUploadUrl."""
    current_user.profile_photo_url = storage.object_url(
        storage.settings.BUCKET_PROFILE_PHOTOS, request.object_name
    )
    db.commit()

    return {"profile_photo_url": current_user.profile_photo_url}
