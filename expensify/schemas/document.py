"""Pydantic schemas for AssetDocument model."""

from datetime import datetime

from pydantic import ConfigDict

from expensify.constants import DocumentObjectType
from expensify.schemas.common import CamelModel


class AssetDocument(CamelModel):
    """Schema for AssetDocument responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    url: str
    object_id: str
    object_type: DocumentObjectType
    created_at: datetime
