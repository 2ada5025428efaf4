#!/usr/bin/env python3
"""
Check the document store's MongoDB connection.

Usage:
    python scripts/check_connection.py
    python scripts/check_connection.py --retries 5 --delay 1

Reads MONGODB_URI / MONGODB_DATABASE from the environment (.env supported).
Exits with status 0 when the server answers, 1 otherwise.
"""

import argparse
import asyncio
import sys
import time

from pymongo.errors import PyMongoError

from docstore import DocumentStoreHandler, StoreConfig, StoreConnectionError
from docstore.logger import setup_logging


def _display_uri(uri: str) -> str:
    """Hide credentials in output."""
    return uri[:30] + "..." if len(uri) > 30 else uri


async def check_connection(config: StoreConfig, max_retries: int = 3, retry_delay: float = 2) -> bool:
    """
    Connect, ping and list collections, retrying connection failures.

    Returns:
        True if the database is reachable
    """
    print("🔍 Testing MongoDB connection...")
    print(f"   URI: {_display_uri(config.mongodb_uri)}")
    print()

    for attempt in range(max_retries):
        print(f"📡 Attempt {attempt + 1}/{max_retries}: Connecting to MongoDB...")
        store = DocumentStoreHandler.from_config(config)
        try:
            start_time = time.time()
            await store.connect()
            elapsed = time.time() - start_time
            print(f"✅ MongoDB connection successful! (took {elapsed:.2f}s)")

            try:
                collections = await store.db.list_collection_names()
            except PyMongoError as e:
                print(f"❌ Database '{config.database}' not accessible:")
                print(f"   {type(e).__name__}: {str(e)[:200]}")
                print()
                return False
            print(f"✅ Database '{config.database}' accessible")
            print(f"   Collections: {', '.join(collections[:5])}" + ("..." if len(collections) > 5 else ""))
            print()
            return True
        except StoreConnectionError as e:
            print(f"⚠️  {str(e)[:200]}")
            if attempt < max_retries - 1:
                print(f"   Retrying in {retry_delay}s...")
                print()
                await asyncio.sleep(retry_delay)
        finally:
            await store.close()

    print()
    print(f"❌ MongoDB connection failed after {max_retries} attempts")
    return False


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Check the MongoDB connection")
    parser.add_argument("--retries", type=int, default=3, help="Connection attempts (default: 3)")
    parser.add_argument("--delay", type=float, default=2, help="Seconds between attempts (default: 2)")
    args = parser.parse_args(argv)

    try:
        config = StoreConfig.from_env()
    except ValueError as e:
        print(f"❌ Error: {e}")
        return 1

    setup_logging(config.log_level, config.log_format)
    success = asyncio.run(check_connection(config, args.retries, args.delay))
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
