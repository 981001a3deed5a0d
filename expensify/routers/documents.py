"""Documents API router."""

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from expensify.config import settings
from expensify.dependencies.auth import get_current_principal
from expensify.dependencies.managers import get_document_manager
from expensify.rate_limiter import limiter
from expensify.routers.uploads import read_upload
from expensify.schemas.common import ErrorResponse, MessageResponse
from expensify.schemas.document import AssetDocument as AssetDocumentSchema
from expensify.services.document_manager import DocumentManager
from expensify.services.identity_provider import Principal

router = APIRouter(
    prefix="/api/documents",
    tags=["documents"],
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.post(
    "/{asset_type}/{object_id}",
    response_model=AssetDocumentSchema,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(settings.upload_rate_limit)
async def upload_document(
    request: Request,
    asset_type: str,
    object_id: str,
    file: UploadFile | None = File(None),
    principal: Principal = Depends(get_current_principal),
    manager: DocumentManager = Depends(get_document_manager),
):
    """Upload a document for an asset of the given kind.

    Path Parameters:
        - asset_type: real_estate, stock, bond, etf, cash or custom
        - object_id: ID of the asset (must belong to user)
    """
    upload = await read_upload(file)
    return await run_in_threadpool(manager.upload, principal, asset_type, object_id, upload)


@router.get(
    "/{asset_type}/{object_id}",
    response_model=list[AssetDocumentSchema],
    responses={400: {"model": ErrorResponse}},
)
def list_documents(
    asset_type: str,
    object_id: str,
    principal: Principal = Depends(get_current_principal),
    manager: DocumentManager = Depends(get_document_manager),
):
    """Get all documents uploaded for an asset under the given kind."""
    return manager.list_documents(principal, asset_type, object_id)


@router.delete(
    "/{document_id}", response_model=MessageResponse, responses={403: {"model": ErrorResponse}}
)
def delete_document(
    document_id: str,
    principal: Principal = Depends(get_current_principal),
    manager: DocumentManager = Depends(get_document_manager),
):
    """Delete a document and its stored file."""
    manager.delete(principal, document_id)
    return MessageResponse(message="Document deleted successfully")
