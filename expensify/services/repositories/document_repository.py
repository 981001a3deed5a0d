"""AssetDocument data access layer."""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from expensify.constants import DocumentObjectType
from expensify.models import AssetDocument

if TYPE_CHECKING:
    from collections.abc import Sequence


class DocumentRepository:
    """Centralized document data access.

    Documents are addressed by ``(object_id, object_type)``; callers resolve
    which table the pair points into.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, document_id: str) -> AssetDocument | None:
        """Find document by primary key."""
        return self._db.query(AssetDocument).filter(AssetDocument.id == document_id).first()

    def list_for_object(
        self, object_id: str, object_types: Iterable[DocumentObjectType]
    ) -> "Sequence[AssetDocument]":
        """Documents attached to one asset under any of the given kinds."""
        kinds = [kind.value for kind in object_types]
        return (
            self._db.query(AssetDocument)
            .filter(AssetDocument.object_id == object_id, AssetDocument.object_type.in_(kinds))
            .order_by(AssetDocument.created_at, AssetDocument.id)
            .all()
        )

    def create(
        self, name: str, url: str, object_id: str, object_type: DocumentObjectType
    ) -> AssetDocument:
        document = AssetDocument(
            name=name,
            url=url,
            object_id=object_id,
            object_type=object_type.value,
        )
        self._db.add(document)
        self._db.flush()
        return document

    def delete(self, document: AssetDocument) -> None:
        self._db.delete(document)
        self._db.flush()

    def delete_for_object(
        self, object_id: str, object_types: Iterable[DocumentObjectType]
    ) -> int:
        """Bulk-delete an asset's documents. Returns the number of rows removed."""
        kinds = [kind.value for kind in object_types]
        return (
            self._db.query(AssetDocument)
            .filter(AssetDocument.object_id == object_id, AssetDocument.object_type.in_(kinds))
            .delete(synchronize_session="fetch")
        )
