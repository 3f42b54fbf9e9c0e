"""Document database provider used by the MongoDB metadata store."""

from src.commons.infrastructure.documentdb.base import DocumentDBBase
from src.commons.infrastructure.documentdb.mongodb_provider import MongoDBDocumentDB

__all__ = [
    "DocumentDBBase",
    "MongoDBDocumentDB",
]
