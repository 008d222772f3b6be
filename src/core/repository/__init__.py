"""
Validation data repository: record collection, indexes, parent links and persistence.
"""

from .hierarchy import HierarchyResolver
from .index import ValidationDataIndex
from .repository import ValidationDataRepository
from .storage import JsonFileStorage, RepositoryStorage

__all__ = [
    "ValidationDataRepository",
    "ValidationDataIndex",
    "HierarchyResolver",
    "RepositoryStorage",
    "JsonFileStorage",
]
