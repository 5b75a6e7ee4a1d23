"""
app/db/mongo_link_store.py

Purpose: MongoDB-backed link store

- Unique index on shortId enforces identifier uniqueness
- Click tracking via a single find_one_and_update ($inc + $max)
- Every call bounded by a timeout (maxTimeMS + asyncio.wait_for)
- Driver failures surface as StoreError
"""

import asyncio
from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError, PyMongoError

from app.core.exceptions import DuplicateKeyError, StoreError
from app.core.logging import get_logger
from app.db.link_store import LinkStore
from app.models.link import LinkRecord

logger = get_logger(__name__)


class MongoLinkStore(LinkStore):
    """Link store over a Motor collection."""

    def __init__(self, collection: AsyncIOMotorCollection, timeout_ms: int = 5000):
        self.collection = collection
        self.timeout_ms = timeout_ms

    async def _run(self, operation: str, awaitable):
        """
        Awaits a driver call within the time budget and maps driver errors.
        """
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_ms / 1000)
        except asyncio.TimeoutError as e:
            logger.error(f"Link store {operation} timed out after {self.timeout_ms}ms")
            raise StoreError(
                f"Link store timed out during {operation}",
                details={"operation": operation, "timeout_ms": self.timeout_ms}
            ) from e
        except MongoDuplicateKeyError as e:
            raise DuplicateKeyError(details={"operation": operation}) from e
        except PyMongoError as e:
            logger.error(f"Link store {operation} failed: {str(e)}")
            raise StoreError(
                f"Link store failure during {operation}",
                details={"operation": operation}
            ) from e

    async def exists(self, short_id: str) -> bool:
        document = await self._run(
            "exists",
            self.collection.find_one(
                {"shortId": short_id},
                projection={"_id": 1},
                max_time_ms=self.timeout_ms,
            )
        )
        return document is not None

    async def insert(self, record: LinkRecord) -> None:
        await self._run("insert", self.collection.insert_one(record.to_document()))

    async def find_by_short_id(self, short_id: str) -> Optional[LinkRecord]:
        document = await self._run(
            "find",
            self.collection.find_one(
                {"shortId": short_id},
                projection={"_id": 0},
                max_time_ms=self.timeout_ms,
            )
        )
        if document is None:
            return None
        return LinkRecord.from_document(document)

    async def increment_click(self, short_id: str, clicked_at: datetime) -> Optional[LinkRecord]:
        document = await self._run(
            "increment_click",
            self.collection.find_one_and_update(
                {"shortId": short_id},
                {
                    "$inc": {"clickCount": 1},
                    # $max keeps the latest click when updates land out of order
                    "$max": {
                        "updatedAt": clicked_at,
                        "lastClickedAt": clicked_at
                    }
                },
                projection={"_id": 0},
                return_document=ReturnDocument.AFTER,
                maxTimeMS=self.timeout_ms,
            )
        )
        if document is None:
            return None
        return LinkRecord.from_document(document)

    async def count_all(self) -> int:
        return await self._run(
            "count",
            self.collection.count_documents({}, maxTimeMS=self.timeout_ms)
        )
