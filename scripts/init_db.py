"""
Database initialization script for the SMS link store

Run once to create the links collection indexes:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import settings
from app.core.logging import setup_logging, get_logger
from app.db.indexes import create_indexes
from app.db.mongo import connect_to_mongo, close_mongo_connection, get_links_collection
from app.db.mongo_link_store import MongoLinkStore

setup_logging()
logger = get_logger("scripts.init_db")


async def main():
    """Connects, creates indexes and reports the current link count."""
    logger.info("=" * 60)
    logger.info("  SMS Deep Link API Database Setup")
    logger.info("=" * 60)

    await connect_to_mongo()

    try:
        await create_indexes()

        store = MongoLinkStore(get_links_collection(), timeout_ms=settings.STORE_TIMEOUT_MS)
        logger.info(f"📊 Links stored in '{settings.LINKS_COLLECTION}': {await store.count_all()}")
        logger.info("✅ Database initialization complete!")

    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(main())
