"""
Document Store

Thin async data-access layer over MongoDB.

Public API:
- DocumentStoreHandler: connect, find_all, save_all, find_one_by_path,
  save_or_update_by_path (plus drop_collection_if_exists, ping, close)
- DocumentStoreInterface: Abstract interface for consumers
- get_document_store(): Factory returning the shared handler
- StoreConnectionError / QueryError / WriteError: Failure kinds

Usage:
    from docstore import get_document_store

    store = get_document_store()
    await store.connect()
    await store.save_all("users", [{"name": "Ann"}, {"name": "Bo"}])
    users = await store.find_all("users")
"""

from .base import Document, DocumentStoreInterface, PathDocument
from .config import ReplaceStrategy, StoreConfig
from .errors import DocumentStoreError, QueryError, StoreConnectionError, WriteError
from .factory import get_document_store, reset_document_store
from .handler import DocumentStoreHandler

__version__ = "0.1.0"

__all__ = [
    # Handler
    "DocumentStoreHandler",
    "DocumentStoreInterface",
    "Document",
    "PathDocument",
    # Factory
    "get_document_store",
    "reset_document_store",
    # Configuration
    "StoreConfig",
    "ReplaceStrategy",
    # Errors
    "DocumentStoreError",
    "StoreConnectionError",
    "QueryError",
    "WriteError",
]
