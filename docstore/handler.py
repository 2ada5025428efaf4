"""
MongoDB Document Store Handler

Async data-access layer over a MongoDB database, built on pymongo's
asyncio client. Offers collection-level replace/read and path-keyed
upsert/read of JSON-encoded documents.

Connection Management:
- One AsyncMongoClient per handler, created by connect()
- The client is reused by every operation until close()
- PyMongo handles the connection pool internally

Error Handling:
- Fail-fast: every error reaches the caller as a DocumentStoreError
- No retries; timeouts come from the client settings
- A missing document is not an error: reads return an empty result
"""

import asyncio
import uuid
from typing import Any, List, Optional, Sequence

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from .base import Document, DocumentStoreInterface
from .codec import decode_body, encode_field
from .config import DEFAULT_TIMEOUT_MS, ReplaceStrategy, StoreConfig
from .error_handling import store_operation
from .errors import QueryError, StoreConnectionError, WriteError
from .logger import get_logger


class DocumentStoreHandler(DocumentStoreInterface):
    """
    MongoDB implementation of DocumentStoreInterface.

    Usage:
        async with DocumentStoreHandler("mongodb://localhost:27017", "site") as store:
            await store.save_or_update_by_path("pages", "/home", {"title": "Home"}, {"html": "<h1>Hi</h1>"})
            body = await store.find_one_by_path("pages", "/home")

    save_all with ReplaceStrategy.DROP_AND_INSERT is NOT atomic: a failure
    between the drop and the insert leaves the collection empty, a partial
    bulk-insert failure leaves a subset inserted, and concurrent save_all
    calls on one collection may interleave. ReplaceStrategy.SHADOW_SWAP
    stages the new content and renames it over the target instead.
    """

    def __init__(
        self,
        url: str,
        database_name: str,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        replace_strategy: ReplaceStrategy = ReplaceStrategy.DROP_AND_INSERT,
    ):
        """
        Initialize the handler. Does not touch the network.

        Args:
            url: MongoDB connection string
            database_name: Database to bind on connect
            timeout_ms: Server selection and connect timeout
            replace_strategy: How save_all replaces a collection
        """
        self._url = url
        self._database_name = database_name
        self._timeout_ms = timeout_ms
        self._replace_strategy = ReplaceStrategy(replace_strategy)
        self._client: Optional[AsyncMongoClient] = None
        self._db: Optional[AsyncDatabase] = None
        self._connect_lock = asyncio.Lock()
        self.logger = get_logger(__name__, database=database_name)

    @classmethod
    def from_config(cls, config: StoreConfig) -> "DocumentStoreHandler":
        """Build a handler from a StoreConfig."""
        return cls(
            config.mongodb_uri,
            config.database,
            timeout_ms=config.timeout_ms,
            replace_strategy=config.replace_strategy,
        )

    @property
    def database_name(self) -> str:
        return self._database_name

    @property
    def replace_strategy(self) -> ReplaceStrategy:
        return self._replace_strategy

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    @property
    def db(self) -> AsyncDatabase:
        """Get the database instance."""
        if self._db is None:
            raise StoreConnectionError(
                "Database not connected. Call connect() first.",
                operation="db",
            )
        return self._db

    # ==========================================================================
    # CONNECTION LIFECYCLE
    # ==========================================================================

    @store_operation(StoreConnectionError, "Failed to connect to MongoDB: {error}")
    async def connect(self) -> None:
        if self._db is not None:
            return

        async with self._connect_lock:
            # Another caller may have connected while this one waited
            if self._db is not None:
                return

            client: AsyncMongoClient = AsyncMongoClient(
                self._url,
                serverSelectionTimeoutMS=self._timeout_ms,
                connectTimeoutMS=self._timeout_ms,
            )
            try:
                # The asyncio client connects lazily; ping to surface a bad URL now
                await client.admin.command("ping")
            except Exception:
                await client.close()
                raise

            self._client = client
            self._db = client[self._database_name]
            self.logger.info(f"Connected to MongoDB: {self._database_name}")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self.logger.info("Disconnected from MongoDB")
        self._client = None
        self._db = None

    async def ping(self) -> bool:
        """
        Check that the server answers.

        Returns:
            True if the ping succeeded, False otherwise
        """
        if self._client is None:
            return False
        try:
            result = await self._client.admin.command("ping")
        except PyMongoError as e:
            self.logger.warning(f"Ping failed: {e}")
            return False
        return result.get("ok") == 1

    async def __aenter__(self) -> "DocumentStoreHandler":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ==========================================================================
    # COLLECTION OPERATIONS
    # ==========================================================================

    @store_operation(QueryError, "Error finding documents in {collection_name}: {error}")
    async def find_all(self, collection_name: str, *, include_id: bool = False) -> List[Document]:
        """
        Return every document in a collection.

        Args:
            collection_name: Collection to read
            include_id: Keep MongoDB's generated _id field (default: stripped)

        Returns:
            List of documents, empty if the collection is empty or absent
        """
        projection = None if include_id else {"_id": False}
        cursor = self.db[collection_name].find({}, projection)
        documents = await cursor.to_list()
        self.logger.for_collection(collection_name).debug(f"Found {len(documents)} documents")
        return documents

    @store_operation(WriteError, "Error saving documents to {collection_name}: {error}")
    async def save_all(self, collection_name: str, documents: Sequence[Document]) -> int:
        """
        Replace the content of a collection with the given documents.

        Input mappings are copied, so the driver's generated _id never
        leaks back into caller objects.

        Returns:
            Number of documents inserted
        """
        db = self.db
        docs = [dict(document) for document in documents]
        log = self.logger.for_collection(collection_name)

        if self._replace_strategy is ReplaceStrategy.SHADOW_SWAP and docs:
            inserted = await self._swap_in(db, collection_name, docs)
        else:
            await self._drop_if_exists(db, collection_name)
            inserted = 0
            if docs:
                result = await db[collection_name].insert_many(docs, ordered=False)
                inserted = len(result.inserted_ids)

        log.info(f"Replaced collection with {inserted} documents")
        return inserted

    @store_operation(WriteError, "Error dropping collection {collection_name}: {error}")
    async def drop_collection_if_exists(self, collection_name: str) -> bool:
        """
        Drop a collection if it exists.

        Returns:
            True if the collection existed and was dropped
        """
        return await self._drop_if_exists(self.db, collection_name)

    async def _drop_if_exists(self, db: AsyncDatabase, collection_name: str) -> bool:
        existing = await db.list_collection_names(filter={"name": collection_name})
        if not existing:
            return False
        await db.drop_collection(collection_name)
        self.logger.for_collection(collection_name).debug("Dropped collection")
        return True

    async def _swap_in(self, db: AsyncDatabase, collection_name: str, docs: List[Document]) -> int:
        """Insert into a staging collection, then rename it over the target."""
        staging_name = f"{collection_name}__staging_{uuid.uuid4().hex[:12]}"
        staging = db[staging_name]
        try:
            result = await staging.insert_many(docs, ordered=False)
            await staging.rename(collection_name, dropTarget=True)
        except Exception:
            try:
                await db.drop_collection(staging_name)
            except Exception as cleanup_error:
                self.logger.for_collection(collection_name).warning(
                    f"Could not drop staging collection {staging_name}: {cleanup_error}"
                )
            raise
        return len(result.inserted_ids)

    # ==========================================================================
    # PATH-KEYED OPERATIONS
    # ==========================================================================

    @store_operation(QueryError, "Error finding document with path {path} in {collection_name}: {error}")
    async def find_one_by_path(self, collection_name: str, path: str) -> Any:
        document = await self.db[collection_name].find_one({"path": path})
        if document is None:
            return {}
        return decode_body(document.get("body"))

    @store_operation(
        WriteError,
        "Error saving or updating document with path {path} in {collection_name}: {error}",
    )
    async def save_or_update_by_path(
        self,
        collection_name: str,
        path: str,
        meta: Any,
        body: Any,
    ) -> None:
        encoded_meta = encode_field(meta)
        encoded_body = encode_field(body)

        collection = self.db[collection_name]
        storage_document = await collection.find_one({"path": path})
        if storage_document is None:
            storage_document = {"path": path}

        storage_document["meta"] = encoded_meta
        storage_document["body"] = encoded_body

        result = await collection.replace_one({"path": path}, storage_document, upsert=True)
        action = "Inserted" if result.upserted_id is not None else "Updated"
        self.logger.for_collection(collection_name).debug(f"{action} document {path}")
