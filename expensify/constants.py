"""Enumerations shared by models, schemas and services."""

from enum import Enum


class AssetType(str, Enum):
    """Category of a generic asset."""

    REAL_ESTATE = "REAL_ESTATE"
    VEHICLE = "VEHICLE"
    JEWELRY = "JEWELRY"
    ART = "ART"
    STOCK = "STOCK"
    CRYPTO = "CRYPTO"
    OTHER = "OTHER"


class PropertyType(str, Enum):
    """Kind of real-estate property."""

    HOUSE = "HOUSE"
    APARTMENT = "APARTMENT"
    LAND = "LAND"
    COMMERCIAL = "COMMERCIAL"
    OTHER = "OTHER"


class DocumentObjectType(str, Enum):
    """Kind of asset a document is attached to.

    Selects the table that ``AssetDocument.object_id`` points into.
    """

    REAL_ESTATE = "real_estate"
    STOCK = "stock"
    BOND = "bond"
    ETF = "etf"
    CASH = "cash"
    CUSTOM = "custom"


class Currency:
    """Common currency constants."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"


DEFAULT_CURRENCY = Currency.USD
EARLIEST_YEAR_BUILT = 1800
