"""Repository layer - data access abstraction.

Repositories handle all database queries, providing a clean interface for
the managers. They add, query and delete rows but never commit: the calling
manager owns the transaction, so multi-row changes (an asset plus its
documents) commit or roll back together.

Dependency direction: Managers -> Repositories -> Models
"""

from .asset_repository import AssetRepository, RealEstateRepository
from .document_repository import DocumentRepository

__all__ = [
    "AssetRepository",
    "DocumentRepository",
    "RealEstateRepository",
]
