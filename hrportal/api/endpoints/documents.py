"""
Document Endpoints

Personal documents are owned by one user. Company, tax and policy
documents are shared with everyone and only admins add them.
Files go straight to object storage through pre-signed URLs.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
import time

from hrportal.database import get_db
from hrportal.models.user import User, UserRole
from hrportal.models.document import Document, Payslip
from hrportal.schemas.base import UploadUrlRequest, UploadUrlResponse
from hrportal.schemas.leave import YearFilter
from hrportal.schemas.document import (
    DocumentFilter,
    DocumentCreate,
    DocumentListResponse,
    DocumentMutationResponse,
    PayslipListResponse,
    DownloadUrlRequest,
    DownloadUrlResponse,
)
from hrportal.api.deps import get_current_user
from hrportal.core.exceptions import InvalidInputError
from hrportal.core.permissions import require_role
from hrportal.services.storage import StorageClient, get_storage
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["documents"])


@router.post("/getDocuments", response_model=DocumentListResponse)
async def get_documents(
    filters: Optional[DocumentFilter] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List documents, newest first.

    - personal: the caller's personal documents
    - company/tax/policy: every document of that type
    - no type: everything the caller owns
    """
    document_type = filters.document_type if filters else None

    query = db.query(Document)
    if document_type == "personal":
        query = query.filter(Document.document_type == "personal", Document.user_id == current_user.id)
    elif document_type:
        query = query.filter(Document.document_type == document_type)
    else:
        query = query.filter(Document.user_id == current_user.id)

    documents = query.order_by(Document.uploaded_at.desc(), Document.id.desc()).all()

    return {"documents": documents}


@router.post("/getPayslips", response_model=PayslipListResponse)
async def get_payslips(
    filters: Optional[YearFilter] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The caller's payslips, latest period first."""
    query = db.query(Payslip).filter(Payslip.user_id == current_user.id)

    if filters and filters.year:
        query = query.filter(Payslip.year == filters.year)

    payslips = query.order_by(Payslip.year.desc(), Payslip.month.desc()).all()

    return {"payslips": payslips}


@router.post("/getDocumentUploadUrl", response_model=UploadUrlResponse)
async def get_document_upload_url(
    request: UploadUrlRequest,
    current_user: User = Depends(get_current_user),
    storage: StorageClient = Depends(get_storage)
):
    bucket = storage.settings.BUCKET_DOCUMENTS
    object_name = f"{current_user.id}/{int(time.time() * 1000)}-{request.file_name}"

    return {
        "upload_url": storage.upload_url(bucket, object_name),
        "object_name": object_name,
    }


@router.post("/createDocument", response_model=DocumentMutationResponse)
async def create_document(
    document_data: DocumentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Record an uploaded document.

    Personal documents belong to the caller. Shared documents have
    no owner and require admin.
    """
    if document_data.document_type == "personal":
        owner_id = current_user.id
    else:
        require_role(current_user, UserRole.ADMIN)
        owner_id = None

    document = Document(user_id=owner_id, **document_data.model_dump())
    db.add(document)
    db.commit()
    db.refresh(document)

    logger.info(f"Document created: {document.id} ({document.document_type}) by user {current_user.id}")

    return {"document": document}


@router.post("/getDownloadUrl", response_model=DownloadUrlResponse)
async def get_download_url(
    request: DownloadUrlRequest,
    current_user: User = Depends(get_current_user),
    storage: StorageClient = Depends(get_storage)
):
    """Pre-signed GET URL, limited to the application's buckets."""
    if request.bucket not in storage.settings.buckets:
        raise InvalidInputError(f"Unknown bucket: {request.bucket}")

    return {"download_url": storage.download_url(request.bucket, request.object_name)}
