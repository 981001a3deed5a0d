"""Document lifecycle: upload to object storage, list, delete.

A document is created only after its bytes are safely stored, so the
database never points at a missing object. Deleting a document removes the
stored object on a best-effort basis and always removes the row.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from expensify.config import settings
from expensify.constants import DocumentObjectType
from expensify.exceptions import (
    ForbiddenError,
    InternalError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from expensify.models import Asset, AssetDocument, RealEstate
from expensify.services.asset_references import (
    GENERIC_ASSET_KINDS,
    AssetReference,
    parse_object_type,
)
from expensify.services.guards import ensure_owned, require_principal
from expensify.services.identity_provider import Principal
from expensify.services.object_storage import ObjectStorage, build_document_key
from expensify.services.repositories import DocumentRepository

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomingFile:
    """An uploaded file, already read into memory."""

    filename: str
    content_type: str
    content: bytes


def remove_stored_objects(storage: ObjectStorage, documents: Iterable[AssetDocument]) -> int:
    """Delete the stored objects behind ``documents``, logging failures.

    Returns:
        Number of objects that could not be removed
    """
    failures = 0
    for document in documents:
        key = storage.key_from_url(document.url)
        if key is None:
            logger.warning(
                "Cannot derive storage key for document %s from %s; skipping",
                document.id,
                document.url,
            )
            failures += 1
            continue
        try:
            storage.remove(key)
        except StorageError as e:
            logger.warning("Failed to delete %s from storage: %s", key, e)
            failures += 1
    return failures


class DocumentManager:
    """Owns uploads and deletions of documents attached to assets."""

    def __init__(
        self,
        db: Session,
        storage: ObjectStorage,
        max_upload_size: int | None = None,
    ) -> None:
        self._db = db
        self._storage = storage
        self._documents = DocumentRepository(db)
        self.max_upload_size = max_upload_size or settings.max_upload_size_bytes

    def _owned_asset(self, principal: Principal, reference: AssetReference) -> Asset | RealEstate:
        # Absent and foreign assets look the same to the caller
        return ensure_owned(
            reference.resolve(self._db), principal, NotFoundError("Asset not found")
        )

    def _check_file(self, upload: IncomingFile | None) -> IncomingFile:
        if upload is None or not upload.filename:
            raise ValidationError(
                "No file provided", details=[{"field": "file", "message": "File is required"}]
            )
        if not upload.content:
            raise ValidationError(
                "Uploaded file is empty", details=[{"field": "file", "message": "File is empty"}]
            )
        if len(upload.content) > self.max_upload_size:
            raise ValidationError(
                "Uploaded file is too large",
                details=[
                    {
                        "field": "file",
                        "message": f"File exceeds the {self.max_upload_size} byte limit",
                    }
                ],
            )
        return upload

    def upload(
        self,
        principal: Principal | None,
        asset_type: str | DocumentObjectType,
        asset_id: str,
        upload: IncomingFile | None,
    ) -> AssetDocument:
        """Store a file and record it against an owned asset.

        Raises:
            AuthError: No principal
            ValidationError: Unknown asset type, or missing/empty/oversized file
            NotFoundError: Asset absent or owned by someone else
            StorageError: The object store rejected the upload (nothing recorded)
        """
        principal = require_principal(principal)
        kind = parse_object_type(asset_type)
        asset = self._owned_asset(principal, AssetReference(kind, asset_id))
        upload = self._check_file(upload)

        key = build_document_key(principal.id, kind.value, asset.id, upload.filename)
        self._storage.upload(key, upload.content, upload.content_type, upsert=False)
        url = self._storage.public_url(key)

        try:
            document = self._documents.create(
                name=upload.filename, url=url, object_id=asset.id, object_type=kind
            )
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.exception("Failed to record document for %s; discarding %s", asset.id, key)
            try:
                self._storage.remove(key)
            except StorageError:
                logger.warning("Orphaned storage object left behind: %s", key)
            raise InternalError("Failed to upload document") from e

        self._db.refresh(document)
        logger.info(
            "Uploaded document %s (%s, %d bytes) for %s %s",
            document.id,
            upload.filename,
            len(upload.content),
            kind.value,
            asset.id,
        )
        return document

    def list_documents(
        self,
        principal: Principal | None,
        asset_type: str | DocumentObjectType,
        asset_id: str,
    ) -> "Sequence[AssetDocument]":
        """Documents uploaded under ``asset_type`` for an owned asset."""
        principal = require_principal(principal)
        kind = parse_object_type(asset_type)
        self._owned_asset(principal, AssetReference(kind, asset_id))
        return self._documents.list_for_object(asset_id, [kind])

    def list_asset_documents(
        self, principal: Principal | None, asset_id: str
    ) -> "Sequence[AssetDocument]":
        """Every document of a generic asset, whatever kind it was uploaded under."""
        principal = require_principal(principal)
        self._owned_asset(principal, AssetReference(DocumentObjectType.CUSTOM, asset_id))
        return self._documents.list_for_object(asset_id, GENERIC_ASSET_KINDS)

    def delete(self, principal: Principal | None, document_id: str) -> None:
        """Delete a document the caller owns through its asset.

        Raises:
            AuthError: No principal
            NotFoundError: Document absent
            ForbiddenError: The referenced asset is absent or not owned
        """
        principal = require_principal(principal)
        document = self._documents.find_by_id(document_id)
        if document is None:
            raise NotFoundError("Document not found")

        reference = AssetReference(DocumentObjectType(document.object_type), document.object_id)
        ensure_owned(
            reference.resolve(self._db),
            principal,
            ForbiddenError("Not authorized to delete this document"),
        )

        remove_stored_objects(self._storage, [document])

        try:
            self._documents.delete(document)
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.exception("Failed to delete document %s", document_id)
            raise InternalError("Failed to delete document") from e

        logger.info("Deleted document %s (%s)", document_id, document.name)
