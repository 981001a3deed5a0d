"""Tests for DocumentManager."""

import re
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from expensify.constants import DocumentObjectType
from expensify.exceptions import (
    AuthError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from expensify.models import AssetDocument
from expensify.services.asset_manager import AssetManager, RealEstateManager
from expensify.services.document_manager import DocumentManager, IncomingFile
from expensify.services.identity_provider import Principal

OWNER = Principal(id="user_owner")
INTRUDER = Principal(id="user_intruder")

PDF = IncomingFile("Relevé bancaire.pdf", "application/pdf", b"%PDF-1.4 statement")


@pytest.fixture
def manager(db, storage):
    return DocumentManager(db, storage)


@pytest.fixture
def car(db, storage):
    return AssetManager(db, storage).create(
        OWNER, {"name": "Car", "type": "VEHICLE", "value": 20000}
    )


@pytest.fixture
def house(db, storage):
    return RealEstateManager(db, storage).create(
        OWNER,
        {
            "name": "House",
            "value": 500000,
            "location": "Porto",
            "address": "Rua das Flores 1",
            "surface": 120,
            "yearBuilt": 1960,
            "propertyType": "HOUSE",
        },
    )


class TestUpload:
    def test_upload_stores_object_then_records_document(self, manager, car, storage):
        document = manager.upload(OWNER, "custom", car.id, PDF)

        key = storage.key_from_url(document.url)
        assert re.fullmatch(rf"user_owner/custom/{car.id}/\d{{13}}-Releve_bancaire\.pdf", key)
        assert storage.objects[key] == PDF.content
        assert storage.content_types[key] == "application/pdf"
        assert document.name == "Relevé bancaire.pdf"
        assert document.object_id == car.id
        assert document.object_type == "custom"

    def test_upload_to_real_estate(self, manager, house, storage):
        document = manager.upload(OWNER, DocumentObjectType.REAL_ESTATE, house.id, PDF)

        assert storage.key_from_url(document.url).startswith(f"user_owner/real_estate/{house.id}/")

    def test_unknown_kind_is_rejected(self, manager, car):
        with pytest.raises(ValidationError) as exc_info:
            manager.upload(OWNER, "boat", car.id, PDF)

        assert exc_info.value.message == "Invalid asset type"
        assert exc_info.value.details[0]["field"] == "assetType"

    def test_kind_must_match_asset_table(self, manager, car):
        with pytest.raises(NotFoundError):
            manager.upload(OWNER, "real_estate", car.id, PDF)

    def test_foreign_asset_looks_missing(self, manager, car, db, storage):
        with pytest.raises(NotFoundError) as exc_info:
            manager.upload(INTRUDER, "custom", car.id, PDF)

        assert exc_info.value.message == "Asset not found"
        assert db.query(AssetDocument).count() == 0
        assert storage.objects == {}

    @pytest.mark.parametrize(
        "upload,message",
        [
            (None, "No file provided"),
            (IncomingFile("", "application/pdf", b"data"), "No file provided"),
            (IncomingFile("empty.pdf", "application/pdf", b""), "Uploaded file is empty"),
        ],
    )
    def test_missing_or_empty_file_creates_nothing(
        self, manager, car, db, storage, upload, message
    ):
        with pytest.raises(ValidationError) as exc_info:
            manager.upload(OWNER, "custom", car.id, upload)

        assert exc_info.value.message == message
        assert db.query(AssetDocument).count() == 0
        assert storage.objects == {}

    def test_oversized_file_is_rejected(self, db, storage, car):
        manager = DocumentManager(db, storage, max_upload_size=8)

        with pytest.raises(ValidationError) as exc_info:
            manager.upload(OWNER, "custom", car.id, IncomingFile("big.bin", "x/y", b"123456789"))

        assert exc_info.value.message == "Uploaded file is too large"
        assert storage.objects == {}

    def test_storage_failure_records_nothing(self, manager, car, db, storage):
        storage.fail_uploads = True

        with pytest.raises(StorageError):
            manager.upload(OWNER, "custom", car.id, PDF)

        assert db.query(AssetDocument).count() == 0

    def test_failed_insert_removes_stored_object(self, manager, car, db, storage):
        with patch.object(manager._documents, "create", side_effect=SQLAlchemyError("boom")):
            with pytest.raises(InternalError) as exc_info:
                manager.upload(OWNER, "custom", car.id, PDF)

        assert exc_info.value.message == "Failed to upload document"
        assert db.query(AssetDocument).count() == 0
        assert storage.objects == {}
        assert len(storage.removed) == 1
        assert storage.removed[0].startswith(f"user_owner/custom/{car.id}/")

    def test_failed_commit_removes_stored_object(self, manager, car, db, storage):
        with patch.object(db, "commit", side_effect=SQLAlchemyError("boom")):
            with pytest.raises(InternalError):
                manager.upload(OWNER, "custom", car.id, PDF)

        assert db.query(AssetDocument).count() == 0
        assert storage.objects == {}

    def test_failed_insert_and_cleanup_still_reports_internal_error(
        self, manager, car, db, storage
    ):
        with (
            patch.object(manager._documents, "create", side_effect=SQLAlchemyError("boom")),
            patch.object(storage, "remove", side_effect=StorageError("down")) as remove,
        ):
            with pytest.raises(InternalError):
                manager.upload(OWNER, "custom", car.id, PDF)

        remove.assert_called_once()
        assert db.query(AssetDocument).count() == 0
        assert len(storage.objects) == 1

    def test_upload_requires_principal(self, manager, car):
        with pytest.raises(AuthError):
            manager.upload(None, "custom", car.id, PDF)


class TestList:
    def test_list_filters_by_kind(self, manager, car):
        custom = manager.upload(OWNER, "custom", car.id, PDF)
        manager.upload(OWNER, "stock", car.id, IncomingFile("broker.csv", "text/csv", b"a,b"))

        assert [doc.id for doc in manager.list_documents(OWNER, "custom", car.id)] == [custom.id]

    def test_list_asset_documents_spans_generic_kinds(self, manager, car):
        first = manager.upload(OWNER, "custom", car.id, PDF)
        etf_file = IncomingFile("etf.pdf", "application/pdf", b"x")
        second = manager.upload(OWNER, "etf", car.id, etf_file)

        listed = {doc.id for doc in manager.list_asset_documents(OWNER, car.id)}

        assert listed == {first.id, second.id}

    def test_list_for_foreign_asset_looks_missing(self, manager, car):
        manager.upload(OWNER, "custom", car.id, PDF)

        with pytest.raises(NotFoundError):
            manager.list_documents(INTRUDER, "custom", car.id)
        with pytest.raises(NotFoundError):
            manager.list_asset_documents(INTRUDER, car.id)


class TestDelete:
    def test_delete_removes_row_and_object(self, manager, car, db, storage):
        document = manager.upload(OWNER, "custom", car.id, PDF)
        key = storage.key_from_url(document.url)

        manager.delete(OWNER, document.id)

        assert db.query(AssetDocument).count() == 0
        assert key in storage.removed
        assert key not in storage.objects

    def test_missing_document_is_not_found(self, manager):
        with pytest.raises(NotFoundError) as exc_info:
            manager.delete(OWNER, "missing")

        assert exc_info.value.message == "Document not found"

    def test_foreign_document_is_forbidden(self, manager, car, db, storage):
        document = manager.upload(OWNER, "custom", car.id, PDF)

        with pytest.raises(ForbiddenError):
            manager.delete(INTRUDER, document.id)

        assert db.query(AssetDocument).count() == 1
        assert storage.removed == []

    def test_storage_failure_does_not_block_row_deletion(self, manager, car, db, storage):
        document = manager.upload(OWNER, "custom", car.id, PDF)
        storage.broken_keys.add(storage.key_from_url(document.url))

        manager.delete(OWNER, document.id)

        assert db.query(AssetDocument).count() == 0

    def test_foreign_url_skips_storage(self, manager, car, db, storage):
        document = manager.upload(OWNER, "custom", car.id, PDF)
        document.url = "https://elsewhere.example/file.pdf"
        db.commit()

        manager.delete(OWNER, document.id)

        assert db.query(AssetDocument).count() == 0
        assert storage.removed == []
