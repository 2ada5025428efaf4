"""
Document Store Factory

Provides a shared handler built from environment configuration.
"""

import logging
from typing import Optional

from .config import StoreConfig
from .handler import DocumentStoreHandler

logger = logging.getLogger(__name__)

# Singleton handler instance
_store_instance: Optional[DocumentStoreHandler] = None


def get_document_store(config: Optional[StoreConfig] = None) -> DocumentStoreHandler:
    """
    Get the shared document store handler.

    The handler is created on first call and reused afterwards. It is
    returned unconnected; callers await connect() (a no-op once connected).

    Args:
        config: Explicit configuration (default: StoreConfig.from_env())

    Returns:
        DocumentStoreHandler instance

    Raises:
        ValueError: If MongoDB URI is not configured
    """
    global _store_instance

    if _store_instance is None:
        config = config or StoreConfig.from_env()
        _store_instance = DocumentStoreHandler.from_config(config)
        logger.info(
            f"Initialized document store for database {config.database} "
            f"({config.replace_strategy.value})"
        )

    return _store_instance


async def reset_document_store() -> None:
    """
    Close and forget the shared handler.

    Used for testing or when configuration changes.
    """
    global _store_instance

    if _store_instance is not None:
        await _store_instance.close()

    _store_instance = None
    logger.info("Document store singleton reset")
