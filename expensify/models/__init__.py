"""SQLAlchemy ORM models."""

from expensify.models.asset import Asset
from expensify.models.asset_document import AssetDocument
from expensify.models.real_estate import RealEstate

__all__ = [
    "Asset",
    "AssetDocument",
    "RealEstate",
]
