"""Assets API router."""

from typing import Any

from fastapi import APIRouter, Body, Depends, File, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from expensify.config import settings
from expensify.constants import DocumentObjectType
from expensify.dependencies.auth import get_current_principal
from expensify.dependencies.managers import get_asset_manager, get_document_manager
from expensify.rate_limiter import limiter
from expensify.routers.uploads import read_upload
from expensify.schemas.asset import Asset as AssetSchema
from expensify.schemas.common import ErrorResponse, SuccessResponse
from expensify.schemas.document import AssetDocument as AssetDocumentSchema
from expensify.services.asset_manager import AssetManager
from expensify.services.document_manager import DocumentManager
from expensify.services.identity_provider import Principal

router = APIRouter(
    prefix="/api/assets",
    tags=["assets"],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


@router.post(
    "",
    response_model=AssetSchema,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def create_asset(
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    manager: AssetManager = Depends(get_asset_manager),
):
    """Create a new asset.

    Required: name, type, value. currency defaults to USD, quantity to 1 and
    unitValue to value.
    """
    return manager.create(principal, payload)


@router.get("", response_model=list[AssetSchema])
def list_assets(
    principal: Principal = Depends(get_current_principal),
    manager: AssetManager = Depends(get_asset_manager),
):
    """Get all assets of the current user."""
    return manager.list_owned(principal)


@router.get("/{asset_id}", response_model=AssetSchema, responses={403: {"model": ErrorResponse}})
def get_asset(
    asset_id: str,
    principal: Principal = Depends(get_current_principal),
    manager: AssetManager = Depends(get_asset_manager),
):
    """Get a specific asset (must belong to user)."""
    return manager.get(principal, asset_id)


@router.put(
    "/{asset_id}",
    response_model=AssetSchema,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
def update_asset(
    asset_id: str,
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    manager: AssetManager = Depends(get_asset_manager),
):
    """Update an existing asset. Only the supplied fields change."""
    return manager.update(principal, asset_id, payload)


@router.delete(
    "/{asset_id}", response_model=SuccessResponse, responses={403: {"model": ErrorResponse}}
)
def delete_asset(
    asset_id: str,
    principal: Principal = Depends(get_current_principal),
    manager: AssetManager = Depends(get_asset_manager),
):
    """Delete an asset and all of its documents."""
    manager.delete(principal, asset_id)
    return SuccessResponse()


@router.post(
    "/{asset_id}/documents",
    response_model=AssetDocumentSchema,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(settings.upload_rate_limit)
async def upload_asset_document(
    request: Request,
    asset_id: str,
    file: UploadFile | None = File(None),
    principal: Principal = Depends(get_current_principal),
    manager: DocumentManager = Depends(get_document_manager),
):
    """Upload a document for a generic asset (stored under the ``custom`` kind)."""
    upload = await read_upload(file)
    return await run_in_threadpool(
        manager.upload, principal, DocumentObjectType.CUSTOM, asset_id, upload
    )


@router.get("/{asset_id}/documents", response_model=list[AssetDocumentSchema])
def list_asset_documents(
    asset_id: str,
    principal: Principal = Depends(get_current_principal),
    manager: DocumentManager = Depends(get_document_manager),
):
    """List every document attached to a generic asset."""
    return manager.list_asset_documents(principal, asset_id)
