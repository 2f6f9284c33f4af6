"""
Document Schemas
"""
from pydantic import Field
from typing import List, Literal, Optional
from datetime import datetime
from hrportal.schemas.base import CamelModel

DocumentType = Literal["personal", "company", "tax", "policy"]


class DocumentFilter(CamelModel):
    document_type: Optional[DocumentType] = None


class DocumentCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    file_url: str = Field(..., min_length=1)
    document_type: DocumentType


class DocumentResponse(CamelModel):
    id: int
    user_id: Optional[int] = None
    document_type: str
    name: str
    file_url: str
    uploaded_at: datetime


class DocumentListResponse(CamelModel):
    documents: List[DocumentResponse]


class DocumentMutationResponse(CamelModel):
    success: bool = True
    document: DocumentResponse


class PayslipResponse(CamelModel):
    id: int
    month: int
    year: int
    file_url: str
    uploaded_at: datetime


class PayslipListResponse(CamelModel):
    payslips: List[PayslipResponse]


class DownloadUrlRequest(CamelModel):
    bucket: str
    object_name: str = Field(..., min_length=1)


class DownloadUrlResponse(CamelModel):
    download_url: str


class BaseUrlResponse(CamelModel):
    base_url: str
