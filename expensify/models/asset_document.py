"""AssetDocument model - file stored in object storage, attached to an asset."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from expensify.database import Base


class AssetDocument(Base):
    """Pointer to an uploaded document.

    ``object_id`` references either ``assets.id`` or ``real_estate.id``
    depending on ``object_type``, so there is no foreign key constraint.
    The owner is always derived from the referenced asset.
    """

    __tablename__ = "asset_documents"
    __table_args__ = (Index("idx_asset_documents_object", "object_id", "object_type"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(255))  # Original filename
    url: Mapped[str] = mapped_column(String(1000))  # Public storage URL
    object_id: Mapped[str] = mapped_column(String(36))
    object_type: Mapped[str] = mapped_column(String(20))  # DocumentObjectType value
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    def __repr__(self) -> str:
        return (
            f"<AssetDocument(id={self.id}, name='{self.name}', "
            f"object='{self.object_type}:{self.object_id}')>"
        )
