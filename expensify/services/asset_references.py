"""Resolution of the polymorphic ``(object_id, object_type)`` document reference.

Each ``DocumentObjectType`` maps to exactly one asset table. Every document
operation goes through ``AssetReference.resolve`` to find the referenced
asset and, through it, the document's effective owner.
"""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from expensify.constants import DocumentObjectType
from expensify.exceptions import ValidationError
from expensify.models import Asset, RealEstate
from expensify.services.repositories import AssetRepository, RealEstateRepository

# Kind -> repository class for the table it points into
_LOOKUPS: dict[DocumentObjectType, type[AssetRepository] | type[RealEstateRepository]] = {
    DocumentObjectType.REAL_ESTATE: RealEstateRepository,
    DocumentObjectType.STOCK: AssetRepository,
    DocumentObjectType.BOND: AssetRepository,
    DocumentObjectType.ETF: AssetRepository,
    DocumentObjectType.CASH: AssetRepository,
    DocumentObjectType.CUSTOM: AssetRepository,
}


def kinds_for(repository: type[AssetRepository] | type[RealEstateRepository]) -> tuple[
    DocumentObjectType, ...
]:
    """All document kinds that reference rows of the given repository's table."""
    return tuple(kind for kind, lookup in _LOOKUPS.items() if lookup is repository)


GENERIC_ASSET_KINDS = kinds_for(AssetRepository)
REAL_ESTATE_KINDS = kinds_for(RealEstateRepository)


def parse_object_type(value: str | DocumentObjectType) -> DocumentObjectType:
    """Parse a path parameter into a document kind.

    Raises:
        ValidationError: If the value is not a known kind
    """
    try:
        return DocumentObjectType(value)
    except ValueError:
        allowed = ", ".join(kind.value for kind in DocumentObjectType)
        raise ValidationError(
            "Invalid asset type",
            details=[{"field": "assetType", "message": f"Must be one of: {allowed}"}],
        ) from None


@dataclass(frozen=True)
class AssetReference:
    """A document's pointer to the asset it is attached to."""

    kind: DocumentObjectType
    asset_id: str

    def resolve(self, db: Session) -> Asset | RealEstate | None:
        """Load the referenced asset, or None if it does not exist."""
        return _LOOKUPS[self.kind](db).find_by_id(self.asset_id)
