"""RealEstate model - specialized asset with property attributes."""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import Boolean, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from expensify.constants import DEFAULT_CURRENCY
from expensify.database import Base


class RealEstate(Base):
    """Real-estate property owned by a single principal."""

    __tablename__ = "real_estate"
    __table_args__ = (Index("idx_real_estate_owner", "owner_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    owner_id: Mapped[str] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text)
    value: Mapped[Decimal] = mapped_column(Numeric(20, 4))
    currency: Mapped[str] = mapped_column(String(3), default=DEFAULT_CURRENCY)
    location: Mapped[str] = mapped_column(String(200))
    address: Mapped[str] = mapped_column(String(500))
    surface: Mapped[Decimal] = mapped_column(Numeric(12, 2))  # Square meters
    year_built: Mapped[int]
    property_type: Mapped[str] = mapped_column(String(20))  # PropertyType value
    rooms: Mapped[int | None]
    bathrooms: Mapped[int | None]
    has_parking: Mapped[bool] = mapped_column(Boolean, default=False)
    has_garden: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<RealEstate(id={self.id}, name='{self.name}', type='{self.property_type}')>"
