"""Real-estate API router."""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from expensify.dependencies.auth import get_current_principal
from expensify.dependencies.managers import get_real_estate_manager
from expensify.schemas.common import ErrorResponse, MessageResponse
from expensify.schemas.real_estate import RealEstate as RealEstateSchema
from expensify.services.asset_manager import RealEstateManager
from expensify.services.identity_provider import Principal

router = APIRouter(
    prefix="/api/real-estate",
    tags=["real-estate"],
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.post(
    "",
    response_model=RealEstateSchema,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def create_real_estate(
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    manager: RealEstateManager = Depends(get_real_estate_manager),
):
    """Create a real-estate property. Every schema violation is reported at once."""
    return manager.create(principal, payload)


@router.get("", response_model=list[RealEstateSchema])
def list_real_estate(
    principal: Principal = Depends(get_current_principal),
    manager: RealEstateManager = Depends(get_real_estate_manager),
):
    """Get all real-estate properties of the current user."""
    return manager.list_owned(principal)


@router.get("/{property_id}", response_model=RealEstateSchema)
def get_real_estate(
    property_id: str,
    principal: Principal = Depends(get_current_principal),
    manager: RealEstateManager = Depends(get_real_estate_manager),
):
    """Get a specific property (must belong to user)."""
    return manager.get(principal, property_id)


@router.put(
    "/{property_id}", response_model=RealEstateSchema, responses={400: {"model": ErrorResponse}}
)
def update_real_estate(
    property_id: str,
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    manager: RealEstateManager = Depends(get_real_estate_manager),
):
    """Update a property. The merged record is re-validated against the strict schema."""
    return manager.update(principal, property_id, payload)


@router.delete("/{property_id}", response_model=MessageResponse)
def delete_real_estate(
    property_id: str,
    principal: Principal = Depends(get_current_principal),
    manager: RealEstateManager = Depends(get_real_estate_manager),
):
    """Delete a property and its associated documents."""
    manager.delete(principal, property_id)
    return MessageResponse(message="Property and associated documents deleted successfully")
