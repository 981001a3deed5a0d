"""Asset and real-estate data access layer."""

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy.orm import Session

from expensify.models import Asset, RealEstate

if TYPE_CHECKING:
    from collections.abc import Sequence

OwnedModel = TypeVar("OwnedModel", Asset, RealEstate)


class OwnedRecordRepository(Generic[OwnedModel]):
    """Data access for tables whose rows belong to one principal (``owner_id``).

    Naming conventions:
    - find_* : Query that may return None
    - list_* : Query returning a (possibly empty) list
    """

    model: type[OwnedModel]

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, record_id: str) -> OwnedModel | None:
        """Find a record by primary key regardless of owner."""
        return self._db.query(self.model).filter(self.model.id == record_id).first()

    def list_by_owner(self, owner_id: str) -> "Sequence[OwnedModel]":
        """All records of one owner, oldest first."""
        return (
            self._db.query(self.model)
            .filter(self.model.owner_id == owner_id)
            .order_by(self.model.created_at, self.model.id)
            .all()
        )

    def create(self, owner_id: str, fields: dict[str, Any]) -> OwnedModel:
        """Insert a new record and flush so its id is populated."""
        record = self.model(owner_id=owner_id, **fields)
        self._db.add(record)
        self._db.flush()
        return record

    def update(self, record: OwnedModel, changes: dict[str, Any]) -> OwnedModel:
        """Apply field changes. ``owner_id`` and ``id`` are never writable."""
        for field, value in changes.items():
            if field in ("id", "owner_id"):
                continue
            setattr(record, field, value)
        self._db.flush()
        return record

    def delete(self, record: OwnedModel) -> None:
        self._db.delete(record)
        self._db.flush()


class AssetRepository(OwnedRecordRepository[Asset]):
    """Generic asset data access."""

    model = Asset


class RealEstateRepository(OwnedRecordRepository[RealEstate]):
    """Real-estate data access."""

    model = RealEstate
