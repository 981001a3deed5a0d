"""Pydantic schemas for Asset model."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import ConfigDict, Field, field_validator, model_validator

from expensify.constants import DEFAULT_CURRENCY, AssetType
from expensify.schemas.common import CamelModel


class AssetCreate(CamelModel):
    """Schema for creating an Asset.

    Also used to validate the merged state of an update, so every
    constraint is checked against the final record.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=200)
    type: AssetType
    description: str | None = None
    value: Decimal = Field(
        ..., gt=0, max_digits=20, decimal_places=4, description="Total value of the asset"
    )
    currency: str = Field(
        default=DEFAULT_CURRENCY, pattern="^[A-Z]{3}$", description="ISO 4217 currency code"
    )
    quantity: Decimal = Field(default=Decimal("1"), gt=0, max_digits=20, decimal_places=8)
    unit_value: Decimal | None = Field(
        None, gt=0, max_digits=20, decimal_places=4, description="Defaults to value when omitted"
    )

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def default_unit_value(self) -> "AssetCreate":
        if self.unit_value is None:
            self.unit_value = self.value
        return self


class Asset(CamelModel):
    """Schema for Asset responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    name: str
    type: AssetType
    description: str | None = None
    value: Decimal
    currency: str
    quantity: Decimal
    unit_value: Decimal
    created_at: datetime
    updated_at: datetime
