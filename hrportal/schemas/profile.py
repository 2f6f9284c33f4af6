"""
Profile Schemas
"""
from typing import Optional
from hrportal.schemas.base import CamelModel


class ProfileUpdate(CamelModel):
    """Self-service fields. Only fields present in the request are written."""
    phone: Optional[str] = None
    personal_email: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    skills: Optional[str] = None
    certifications: Optional[str] = None


class ProfileFields(ProfileUpdate):
    id: int


class ProfileUpdateResponse(CamelModel):
    success: bool = True
    user: ProfileFields


class ProfilePhotoRequest(CamelModel):
    object_name: str


class ProfilePhotoResponse(CamelModel):
    success: bool = True
    profile_photo_url: Optional[str] = None
