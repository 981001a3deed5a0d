"""Asset model - represents generic owned assets."""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from expensify.constants import DEFAULT_CURRENCY
from expensify.database import Base


class Asset(Base):
    """Generic asset (vehicle, jewelry, art, ...) owned by a single principal."""

    __tablename__ = "assets"
    __table_args__ = (Index("idx_assets_owner", "owner_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    owner_id: Mapped[str] = mapped_column(String(255))  # Identity provider principal id
    name: Mapped[str] = mapped_column(String(200))
    type: Mapped[str] = mapped_column(String(20))  # AssetType value
    description: Mapped[str | None] = mapped_column(Text)
    value: Mapped[Decimal] = mapped_column(Numeric(20, 4))
    currency: Mapped[str] = mapped_column(String(3), default=DEFAULT_CURRENCY)
    quantity: Mapped[Decimal] = mapped_column(Numeric(20, 8), default=Decimal("1"))
    unit_value: Mapped[Decimal] = mapped_column(Numeric(20, 4))
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Asset(id={self.id}, name='{self.name}', type='{self.type}')>"
