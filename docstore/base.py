"""
Document Store Interface Definitions

Defines the abstract interface for document store operations and the
persisted record shapes. Consumers depend on the interface so the MongoDB
implementation can be swapped (e.g. for a fake in tests).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence, TypedDict

# Schemaless document: structure is owned by the caller
Document = Dict[str, Any]


class PathDocument(TypedDict):
    """Schema for path-keyed documents (one per path per collection)."""
    path: str  # unique within its collection
    meta: str  # JSON-encoded metadata
    body: str  # JSON-encoded payload


class DocumentStoreInterface(ABC):
    """
    Abstract interface for collection-level and path-keyed operations.

    Implementations:
    - DocumentStoreHandler: MongoDB via pymongo's asyncio client

    All methods fail fast: errors propagate to the caller wrapped in a
    DocumentStoreError subclass. Absence of data is never an error.
    """

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish the connection and bind the configured database.

        Raises:
            StoreConnectionError: If the server cannot be reached
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the connection. The store may be connected again later."""
        pass

    @abstractmethod
    async def find_all(self, collection_name: str) -> List[Document]:
        """
        Return every document in a collection.

        Args:
            collection_name: Collection to read

        Returns:
            List of documents (empty if the collection is empty or absent)

        Raises:
            QueryError: If the read fails
        """
        pass

    @abstractmethod
    async def save_all(self, collection_name: str, documents: Sequence[Document]) -> int:
        """
        Replace the whole collection with the given documents.

        Args:
            collection_name: Collection to replace
            documents: New content (may be empty)

        Returns:
            Number of documents inserted

        Raises:
            WriteError: If the drop or the insert fails
        """
        pass

    @abstractmethod
    async def find_one_by_path(self, collection_name: str, path: str) -> Any:
        """
        Return the decoded body of the document stored under path.

        Returns:
            Decoded body, or {} when the document or its body is missing

        Raises:
            QueryError: If the read fails or the stored body is not valid JSON
        """
        pass

    @abstractmethod
    async def save_or_update_by_path(
        self,
        collection_name: str,
        path: str,
        meta: Any,
        body: Any,
    ) -> None:
        """
        Create or replace the document stored under path.

        Raises:
            WriteError: If the read/write fails or meta/body cannot be encoded
        """
        pass
