from suiteflow.db.repositories.catalog_repository import CatalogRepository
from suiteflow.db.repositories.execution_repository import ExecutionRepository

__all__ = [
    "CatalogRepository",
    "ExecutionRepository",
]
