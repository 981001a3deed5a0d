"""Pydantic schemas for RealEstate model."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from expensify.constants import DEFAULT_CURRENCY, EARLIEST_YEAR_BUILT, PropertyType
from expensify.schemas.common import CamelModel


def _current_year() -> int:
    return date.today().year


class RealEstateCreate(CamelModel):
    """Strict schema for real-estate records. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    value: Decimal = Field(..., gt=0, max_digits=20, decimal_places=4)
    currency: str = Field(default=DEFAULT_CURRENCY, pattern="^[A-Z]{3}$")
    location: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    surface: Decimal = Field(
        ..., gt=0, max_digits=12, decimal_places=2, description="Surface in square meters"
    )
    year_built: int = Field(default_factory=_current_year, ge=EARLIEST_YEAR_BUILT)
    property_type: PropertyType
    rooms: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    has_parking: bool = False
    has_garden: bool = False

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("year_built")
    @classmethod
    def not_in_future(cls, value: int) -> int:
        current_year = _current_year()
        if value > current_year:
            raise ValueError(f"Year built cannot be later than {current_year}")
        return value


class RealEstate(CamelModel):
    """Schema for RealEstate responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    name: str
    description: str | None = None
    value: Decimal
    currency: str
    location: str
    address: str
    surface: Decimal
    year_built: int
    property_type: PropertyType
    rooms: int | None = None
    bathrooms: int | None = None
    has_parking: bool
    has_garden: bool
    created_at: datetime
    updated_at: datetime
