"""Manager factories wired to the request's database session."""

from fastapi import Depends
from sqlalchemy.orm import Session

from expensify.database import get_db
from expensify.services.asset_manager import AssetManager, RealEstateManager
from expensify.services.document_manager import DocumentManager
from expensify.services.object_storage import ObjectStorage, get_object_storage


def get_asset_manager(
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
) -> AssetManager:
    return AssetManager(db, storage)


def get_real_estate_manager(
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
) -> RealEstateManager:
    return RealEstateManager(db, storage)


def get_document_manager(
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
) -> DocumentManager:
    return DocumentManager(db, storage)
