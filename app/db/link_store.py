"""
app/db/link_store.py

Purpose: Link store contract and in-memory implementation

- Keyed by short identifier
- Insert-if-absent (duplicate identifiers are rejected, never overwritten)
- Point lookup and existence check
- Atomic click increment (count + timestamps in one step)
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional

from app.core.exceptions import DuplicateKeyError
from app.models.link import LinkRecord


class LinkStore(ABC):
    """
    Persistence contract consumed by the link registry.
    Implementations must make insert and increment_click atomic.
    """

    @abstractmethod
    async def exists(self, short_id: str) -> bool:
        """True if a record with this identifier exists."""

    @abstractmethod
    async def insert(self, record: LinkRecord) -> None:
        """
        Stores a new record.

        Raises:
            DuplicateKeyError: If the identifier is already taken
        """

    @abstractmethod
    async def find_by_short_id(self, short_id: str) -> Optional[LinkRecord]:
        """Returns the record, or None if it does not exist."""

    @abstractmethod
    async def increment_click(self, short_id: str, clicked_at: datetime) -> Optional[LinkRecord]:
        """
        Atomically adds one click and sets updatedAt/lastClickedAt.

        Returns:
            The updated record, or None if it does not exist
        """

    @abstractmethod
    async def count_all(self) -> int:
        """Total number of stored records."""


class InMemoryLinkStore(LinkStore):
    """
    Process-local store for development and tests.
    Every mutation runs under a single asyncio lock.
    """

    def __init__(self):
        self._records: Dict[str, LinkRecord] = {}
        self._lock = asyncio.Lock()

    async def exists(self, short_id: str) -> bool:
        return short_id in self._records

    async def insert(self, record: LinkRecord) -> None:
        async with self._lock:
            if record.short_id in self._records:
                raise DuplicateKeyError(details={"shortId": record.short_id})
            self._records[record.short_id] = record

    async def find_by_short_id(self, short_id: str) -> Optional[LinkRecord]:
        return self._records.get(short_id)

    async def increment_click(self, short_id: str, clicked_at: datetime) -> Optional[LinkRecord]:
        async with self._lock:
            record = self._records.get(short_id)
            if record is None:
                return None
            updated = record.with_click(clicked_at)
            self._records[short_id] = updated
            return updated

    async def count_all(self) -> int:
        return len(self._records)
