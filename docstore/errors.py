"""
Exceptions raised by the document store layer.

Every failure coming out of the MongoDB driver (or out of the meta/body
codec) is wrapped in one of three kinds so callers only need to handle
this hierarchy.
"""

from typing import Optional


class DocumentStoreError(Exception):
    """
    Base exception for document store failures.

    Attributes:
        operation: Handler operation that failed (e.g., "save_all")
        collection: Target collection name, if any
        path: Target document path, if any
        cause: Underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.collection = collection
        self.path = path
        self.cause = cause


class StoreConnectionError(DocumentStoreError):
    """Connection could not be established, or the handler is not connected."""


class QueryError(DocumentStoreError):
    """A read failed, or stored content could not be decoded."""


class WriteError(DocumentStoreError):
    """A drop, insert or replace failed, or content could not be encoded."""


__all__ = [
    "DocumentStoreError",
    "StoreConnectionError",
    "QueryError",
    "WriteError",
]
