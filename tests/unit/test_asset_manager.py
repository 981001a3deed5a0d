"""Tests for AssetManager."""

from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from expensify.constants import DocumentObjectType
from expensify.exceptions import AuthError, ForbiddenError, InternalError, ValidationError
from expensify.models import Asset, AssetDocument
from expensify.services.asset_manager import AssetManager, OwnedAssetManager
from expensify.services.document_manager import DocumentManager, IncomingFile
from expensify.services.identity_provider import Principal

OWNER = Principal(id="user_owner")
INTRUDER = Principal(id="user_intruder")


@pytest.fixture
def manager(db, storage):
    return AssetManager(db, storage)


@pytest.fixture
def car(manager):
    return manager.create(OWNER, {"name": "Car", "type": "VEHICLE", "value": 20000})


def test_base_manager_cannot_be_instantiated(db, storage):
    with pytest.raises(TypeError):
        OwnedAssetManager(db, storage)


def _field_names(error: ValidationError) -> set[str]:
    return {detail["field"] for detail in error.details}


class TestCreateAsset:
    def test_create_applies_defaults(self, manager):
        asset = manager.create(OWNER, {"name": "Car", "type": "VEHICLE", "value": 20000})

        assert asset.id
        assert asset.owner_id == OWNER.id
        assert asset.currency == "USD"
        assert asset.quantity == Decimal("1")
        assert asset.unit_value == Decimal("20000")
        assert asset.created_at is not None

    def test_create_keeps_explicit_values(self, manager):
        asset = manager.create(
            OWNER,
            {
                "name": "Gold coins",
                "type": "JEWELRY",
                "value": "1500.50",
                "currency": "eur",
                "quantity": 3,
                "unitValue": "500.1667",
                "description": "Krugerrands",
            },
        )

        assert asset.currency == "EUR"
        assert asset.quantity == Decimal("3")
        assert asset.unit_value == Decimal("500.1667")
        assert asset.description == "Krugerrands"

    def test_owner_comes_from_principal_not_payload(self, manager):
        asset = manager.create(
            OWNER, {"name": "Art", "type": "ART", "value": 10, "ownerId": "someone_else"}
        )

        assert asset.owner_id == OWNER.id

    def test_create_reports_every_invalid_field(self, manager, db):
        with pytest.raises(ValidationError) as exc_info:
            manager.create(OWNER, {"type": "BOAT", "value": -5})

        assert exc_info.value.message == "Invalid input"
        assert _field_names(exc_info.value) == {"name", "type", "value"}
        assert db.query(Asset).count() == 0

    def test_create_rejects_non_object_body(self, manager):
        with pytest.raises(ValidationError) as exc_info:
            manager.create(OWNER, ["not", "an", "object"])

        assert exc_info.value.message == "Invalid request body"

    def test_create_requires_principal(self, manager):
        with pytest.raises(AuthError):
            manager.create(None, {"name": "Car", "type": "VEHICLE", "value": 1})

    def test_database_failure_rolls_back(self, manager, db):
        with patch.object(manager._repository, "create", side_effect=SQLAlchemyError("boom")):
            with pytest.raises(InternalError) as exc_info:
                manager.create(OWNER, {"name": "Car", "type": "VEHICLE", "value": 1})

        assert exc_info.value.message == "Failed to create asset"
        assert db.query(Asset).count() == 0


class TestReadAsset:
    def test_list_only_returns_owned_assets(self, manager, car):
        manager.create(INTRUDER, {"name": "Bike", "type": "VEHICLE", "value": 300})

        assert [asset.id for asset in manager.list_owned(OWNER)] == [car.id]
        assert car.id not in {asset.id for asset in manager.list_owned(INTRUDER)}

    def test_get_owned_asset(self, manager, car):
        assert manager.get(OWNER, car.id).name == "Car"

    def test_foreign_and_missing_assets_are_indistinguishable(self, manager, car):
        with pytest.raises(ForbiddenError) as foreign:
            manager.get(INTRUDER, car.id)
        with pytest.raises(ForbiddenError) as missing:
            manager.get(OWNER, "does-not-exist")

        assert foreign.value.message == missing.value.message == "Forbidden"


class TestUpdateAsset:
    def test_update_changes_only_supplied_fields(self, manager, car):
        updated = manager.update(OWNER, car.id, {"name": "Family car"})

        assert updated.name == "Family car"
        assert updated.value == Decimal("20000")
        assert updated.unit_value == Decimal("20000")
        assert updated.currency == "USD"

    def test_update_accepts_snake_case_keys(self, manager, car):
        updated = manager.update(OWNER, car.id, {"unit_value": "18000"})

        assert updated.unit_value == Decimal("18000")

    def test_invalid_update_leaves_record_untouched(self, manager, car, db):
        with pytest.raises(ValidationError) as exc_info:
            manager.update(OWNER, car.id, {"value": 0, "name": "Renamed"})

        assert _field_names(exc_info.value) == {"value"}
        db.expire_all()
        stored = db.get(Asset, car.id)
        assert stored.name == "Car"
        assert stored.value == Decimal("20000")

    def test_update_cannot_change_owner(self, manager, car):
        updated = manager.update(OWNER, car.id, {"ownerId": INTRUDER.id, "name": "Mine"})

        assert updated.owner_id == OWNER.id

    def test_update_by_non_owner_is_forbidden(self, manager, car):
        with pytest.raises(ForbiddenError):
            manager.update(INTRUDER, car.id, {"name": "Stolen"})

        assert manager.get(OWNER, car.id).name == "Car"


class TestDeleteAsset:
    def _upload(self, db, storage, asset, filename, kind=DocumentObjectType.CUSTOM):
        documents = DocumentManager(db, storage)
        return documents.upload(
            OWNER, kind, asset.id, IncomingFile(filename, "application/pdf", b"%PDF-1.4")
        )

    def test_delete_removes_asset_and_documents(self, manager, car, db, storage):
        first = self._upload(db, storage, car, "invoice.pdf")
        second = self._upload(db, storage, car, "title.pdf", DocumentObjectType.STOCK)

        removed = manager.delete(OWNER, car.id)

        assert removed == 2
        assert db.get(Asset, car.id) is None
        assert db.query(AssetDocument).filter(AssetDocument.object_id == car.id).count() == 0
        assert storage.key_from_url(first.url) in storage.removed
        assert storage.key_from_url(second.url) in storage.removed

    def test_delete_survives_storage_failure(self, manager, car, db, storage):
        broken = self._upload(db, storage, car, "broken.pdf")
        healthy = self._upload(db, storage, car, "healthy.pdf")
        storage.broken_keys.add(storage.key_from_url(broken.url))

        manager.delete(OWNER, car.id)

        assert db.query(AssetDocument).filter(AssetDocument.object_id == car.id).count() == 0
        assert storage.key_from_url(healthy.url) in storage.removed
        assert storage.key_from_url(broken.url) in storage.objects

    def test_delete_by_non_owner_is_forbidden(self, manager, car, db, storage):
        self._upload(db, storage, car, "invoice.pdf")

        with pytest.raises(ForbiddenError):
            manager.delete(INTRUDER, car.id)

        assert db.get(Asset, car.id) is not None
        assert db.query(AssetDocument).count() == 1
        assert storage.removed == []

    def test_failed_record_delete_keeps_asset_and_documents(self, manager, car, db, storage):
        self._upload(db, storage, car, "invoice.pdf")
        self._upload(db, storage, car, "title.pdf", DocumentObjectType.STOCK)

        with patch.object(manager._repository, "delete", side_effect=SQLAlchemyError("boom")):
            with pytest.raises(InternalError) as exc_info:
                manager.delete(OWNER, car.id)

        assert exc_info.value.message == "Failed to delete asset"
        db.expire_all()
        assert db.get(Asset, car.id) is not None
        assert db.query(AssetDocument).filter(AssetDocument.object_id == car.id).count() == 2

    def test_failed_commit_keeps_asset_and_documents(self, manager, car, db, storage):
        self._upload(db, storage, car, "invoice.pdf")

        with patch.object(db, "commit", side_effect=SQLAlchemyError("boom")):
            with pytest.raises(InternalError):
                manager.delete(OWNER, car.id)

        db.expire_all()
        assert db.get(Asset, car.id) is not None
        assert db.query(AssetDocument).filter(AssetDocument.object_id == car.id).count() == 1
