"""
Document Store Configuration

Loads connection and behaviour settings from environment variables
(.env file supported). NO SECRETS IN CODE.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "documents"
DEFAULT_TIMEOUT_MS = 5000


class ReplaceStrategy(str, Enum):
    """How save_all replaces the content of a collection."""
    DROP_AND_INSERT = "drop_and_insert"  # Drop, then bulk insert (not atomic)
    SHADOW_SWAP = "shadow_swap"          # Insert into staging, then rename over target


@dataclass
class StoreConfig:
    """
    Configuration for document store initialization.

    Loaded from environment variables with sensible defaults.
    """
    # MongoDB (required)
    mongodb_uri: str

    database: str = DEFAULT_DATABASE
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    replace_strategy: ReplaceStrategy = ReplaceStrategy.DROP_AND_INSERT

    # Logging
    log_level: str = "INFO"
    log_format: str = "simple"

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - MONGODB_URI (required): MongoDB connection string
        - MONGODB_DATABASE: Database name (default: documents)
        - MONGODB_TIMEOUT_MS: Server selection/connect timeout (default: 5000)
        - DOCSTORE_REPLACE_STRATEGY: drop_and_insert/shadow_swap
        - DOCSTORE_LOG_LEVEL: DEBUG/INFO/WARNING/ERROR
        - DOCSTORE_LOG_FORMAT: simple/json

        Returns:
            StoreConfig instance

        Raises:
            ValueError: If MONGODB_URI is not set
        """
        mongodb_uri = os.getenv("MONGODB_URI")
        if not mongodb_uri:
            raise ValueError("MONGODB_URI environment variable is required")

        timeout_str = os.getenv("MONGODB_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS))
        try:
            timeout_ms = int(timeout_str)
            if timeout_ms <= 0:
                raise ValueError(timeout_str)
        except ValueError:
            logger.warning(
                f"Invalid MONGODB_TIMEOUT_MS '{timeout_str}', defaulting to {DEFAULT_TIMEOUT_MS}"
            )
            timeout_ms = DEFAULT_TIMEOUT_MS

        strategy_str = os.getenv("DOCSTORE_REPLACE_STRATEGY", "drop_and_insert").lower()
        try:
            replace_strategy = ReplaceStrategy(strategy_str)
        except ValueError:
            logger.warning(
                f"Invalid DOCSTORE_REPLACE_STRATEGY '{strategy_str}', defaulting to drop_and_insert"
            )
            replace_strategy = ReplaceStrategy.DROP_AND_INSERT

        return cls(
            mongodb_uri=mongodb_uri,
            database=os.getenv("MONGODB_DATABASE") or DEFAULT_DATABASE,
            timeout_ms=timeout_ms,
            replace_strategy=replace_strategy,
            log_level=os.getenv("DOCSTORE_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("DOCSTORE_LOG_FORMAT", "simple").lower(),
        )
