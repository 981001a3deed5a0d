"""Asset lifecycle: create, list, update and delete owned assets.

``AssetManager`` handles generic assets and ``RealEstateManager`` the
real-estate subtype. Both share one implementation and differ only in their
schema, their table and the error reported to non-owners.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Generic

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from expensify.constants import DocumentObjectType
from expensify.exceptions import ExpensifyError, ForbiddenError, InternalError, NotFoundError
from expensify.schemas.asset import AssetCreate
from expensify.schemas.real_estate import RealEstateCreate
from expensify.services.asset_references import GENERIC_ASSET_KINDS, REAL_ESTATE_KINDS
from expensify.services.document_manager import remove_stored_objects
from expensify.services.guards import (
    editable_values,
    ensure_owned,
    require_principal,
    to_alias_keys,
    validate_payload,
)
from expensify.services.identity_provider import Principal
from expensify.services.object_storage import ObjectStorage
from expensify.services.repositories import (
    AssetRepository,
    DocumentRepository,
    RealEstateRepository,
)
from expensify.services.repositories.asset_repository import OwnedModel, OwnedRecordRepository

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


def _column_values(model: BaseModel, fields: set[str] | None = None) -> dict[str, Any]:
    """Validated schema values ready to assign to ORM columns."""
    values = model.model_dump(include=fields)
    return {key: value.value if isinstance(value, Enum) else value for key, value in values.items()}


class OwnedAssetManager(ABC, Generic[OwnedModel]):
    """Shared CRUD lifecycle for asset tables owned by a principal."""

    label: ClassVar[str]
    schema: ClassVar[type[BaseModel]]
    repository_class: ClassVar[type[OwnedRecordRepository]]
    document_kinds: ClassVar[tuple[DocumentObjectType, ...]]

    def __init__(self, db: Session, storage: ObjectStorage) -> None:
        self._db = db
        self._storage = storage
        self._repository = self.repository_class(db)
        self._documents = DocumentRepository(db)

    @abstractmethod
    def _denial(self) -> ExpensifyError:
        """Error raised when the record is absent or owned by someone else."""

    @contextmanager
    def _transaction(self, action: str) -> Iterator[None]:
        """Commit the enclosed changes, or roll back and raise InternalError."""
        try:
            yield
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.exception("Database error while trying to %s %s", action, self.label)
            raise InternalError(f"Failed to {action} {self.label}") from e

    def _owned(self, principal: Principal, record_id: str) -> OwnedModel:
        return ensure_owned(self._repository.find_by_id(record_id), principal, self._denial())

    def create(self, principal: Principal | None, payload: Any) -> OwnedModel:
        """Validate ``payload`` and persist it as a record owned by ``principal``.

        Raises:
            AuthError: No principal
            ValidationError: One detail entry per violated field
        """
        principal = require_principal(principal)
        validated = validate_payload(self.schema, payload)

        with self._transaction("create"):
            record = self._repository.create(principal.id, _column_values(validated))
        self._db.refresh(record)

        logger.info("Created %s %s for owner %s", self.label, record.id, principal.id)
        return record

    def list_owned(self, principal: Principal | None) -> "Sequence[OwnedModel]":
        """All records owned by ``principal``."""
        principal = require_principal(principal)
        return self._repository.list_by_owner(principal.id)

    def get(self, principal: Principal | None, record_id: str) -> OwnedModel:
        principal = require_principal(principal)
        return self._owned(principal, record_id)

    def update(self, principal: Principal | None, record_id: str, payload: Any) -> OwnedModel:
        """Apply the supplied fields to an owned record.

        Omitted fields keep their stored values; the merged record must still
        satisfy the full schema.
        """
        principal = require_principal(principal)
        record = self._owned(principal, record_id)

        supplied = to_alias_keys(self.schema, payload) if isinstance(payload, Mapping) else payload
        merged = (
            {**editable_values(self.schema, record), **supplied}
            if isinstance(supplied, Mapping)
            else supplied
        )
        validated = validate_payload(self.schema, merged)

        changed_fields = {
            name
            for name, field in self.schema.model_fields.items()
            if (field.alias or name) in supplied
        }
        with self._transaction("update"):
            self._repository.update(record, _column_values(validated, changed_fields))
        self._db.refresh(record)

        logger.info(
            "Updated %s %s (%s)", self.label, record.id, ", ".join(sorted(changed_fields)) or "-"
        )
        return record

    def delete(self, principal: Principal | None, record_id: str) -> int:
        """Delete an owned record together with its documents.

        Stored objects are removed first on a best-effort basis; the
        document rows and the record are then deleted in one transaction.

        Returns:
            Number of document rows removed
        """
        principal = require_principal(principal)
        record = self._owned(principal, record_id)

        documents = self._documents.list_for_object(record.id, self.document_kinds)
        failures = remove_stored_objects(self._storage, documents)

        with self._transaction("delete"):
            removed = self._documents.delete_for_object(record.id, self.document_kinds)
            self._repository.delete(record)

        logger.info(
            "Deleted %s %s with %d documents (%d storage failures)",
            self.label,
            record_id,
            removed,
            failures,
        )
        return removed


class AssetManager(OwnedAssetManager):
    """Generic assets. Non-owners get 403 whether or not the asset exists."""

    label = "asset"
    schema = AssetCreate
    repository_class = AssetRepository
    document_kinds = GENERIC_ASSET_KINDS

    def _denial(self) -> ExpensifyError:
        return ForbiddenError("Forbidden")


class RealEstateManager(OwnedAssetManager):
    """Real-estate properties, validated against the strict property schema."""

    label = "real estate"
    schema = RealEstateCreate
    repository_class = RealEstateRepository
    document_kinds = REAL_ESTATE_KINDS

    def _denial(self) -> ExpensifyError:
        return NotFoundError("Property not found")
