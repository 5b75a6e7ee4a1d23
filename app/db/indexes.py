"""
app/db/indexes.py

Purpose: Database index management

- Unique index on shortId (the only guard against identifier collisions)
- createdAt index for listing and maintenance queries
"""

from pymongo import ASCENDING, DESCENDING
from app.db.mongo import get_links_collection
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        links = get_links_collection()

        logger.info("Creating database indexes...")

        await links.create_index(
            [("shortId", ASCENDING)],
            unique=True,
            name="shortId_unique"
        )
        logger.debug("Created unique index on links.shortId")

        await links.create_index(
            [("createdAt", DESCENDING)],
            name="createdAt_idx"
        )
        logger.debug("Created index on links.createdAt")

        link_indexes = await links.index_information()
        logger.info(f"✅ Database indexes ready: {sorted(link_indexes.keys())}")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    """
    Run this script directly to create indexes manually.
    """
    import asyncio
    from app.db.mongo import connect_to_mongo, close_mongo_connection

    async def main():
        await connect_to_mongo()
        await create_indexes()
        await close_mongo_connection()

    asyncio.run(main())
