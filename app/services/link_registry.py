"""
app/services/link_registry.py

Purpose: Short link registry

- Validates and normalizes phone/message input
- Allocates unique short identifiers (bounded retry)
- Builds and persists link records
- Resolves short links with atomic click tracking
- Read-only analytics snapshots
"""

from datetime import datetime
from typing import Callable, Optional

from app.core.exceptions import DuplicateKeyError, IdGenerationError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.db.link_store import LinkStore
from app.models.link import AnalyticsView, LinkRecord
from utils.sms_utils import (
    build_short_url,
    count_digits,
    create_sms_deep_link,
    generate_short_id,
    normalize_phone,
)
from utils.time_utils import utc_now

logger = get_logger(__name__)


class LinkRegistry:
    """
    Creates, resolves and reports on short SMS links.

    Holds no record state of its own; every durable change goes through
    the injected LinkStore.
    """

    def __init__(
        self,
        store: LinkStore,
        min_phone_digits: int = 10,
        max_attempts: int = 10,
        id_generator: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store
        self.min_phone_digits = min_phone_digits
        self.max_attempts = max_attempts
        self.id_generator = id_generator or generate_short_id
        self.clock = clock or utc_now

    async def create(self, phone: str, message: str, base_url: str) -> LinkRecord:
        """
        Creates a new short link for an SMS deep link.

        Args:
            phone: Raw recipient phone number
            message: Raw SMS body
            base_url: Externally visible base URL for the short link

        Returns:
            The stored LinkRecord

        Raises:
            ValidationError: If phone or message is missing or invalid
            IdGenerationError: If no free identifier was found in max_attempts
            StoreError: If the store fails
        """
        if not phone or not message:
            raise ValidationError("Phone number and message are required")

        message = message.strip()
        if not message:
            raise ValidationError("Message must be a non-empty string")

        recipient = normalize_phone(phone)
        if count_digits(recipient) < self.min_phone_digits:
            raise ValidationError(
                f"Invalid phone number. Must contain at least {self.min_phone_digits} digits",
                details={"min_digits": self.min_phone_digits}
            )

        deep_link = create_sms_deep_link(recipient, message)

        for attempt in range(1, self.max_attempts + 1):
            short_id = self.id_generator()

            if await self.store.exists(short_id):
                logger.warning(
                    "Short identifier collision, regenerating",
                    extra={"short_id": short_id, "attempt": attempt}
                )
                continue

            now = self.clock()
            record = LinkRecord(
                short_id=short_id,
                recipient=recipient,
                message=message,
                deep_link=deep_link,
                short_url=build_short_url(base_url, short_id),
                click_count=0,
                created_at=now,
                updated_at=now,
            )

            try:
                await self.store.insert(record)
            except DuplicateKeyError:
                logger.warning(
                    "Short identifier taken on insert, regenerating",
                    extra={"short_id": short_id, "attempt": attempt}
                )
                continue

            logger.info(
                "Short link created",
                extra={"short_id": short_id, "recipient": recipient}
            )
            return record

        logger.error(f"Gave up allocating a short identifier after {self.max_attempts} attempts")
        raise IdGenerationError(details={"attempts": self.max_attempts})

    async def resolve(self, short_id: str) -> str:
        """
        Registers a click and returns the deep link to redirect to.

        Raises:
            NotFoundError: If the identifier is unknown (nothing is modified)
        """
        record = await self.store.increment_click(short_id, self.clock())
        if record is None:
            logger.info("Unknown short link requested", extra={"short_id": short_id})
            raise NotFoundError(details={"shortId": short_id})

        logger.debug(
            f"Short link resolved ({record.click_count} clicks)",
            extra={"short_id": short_id}
        )
        return record.deep_link

    async def get_analytics(self, short_id: str) -> AnalyticsView:
        """
        Returns a read-only snapshot of a link's tracking data.

        Raises:
            NotFoundError: If the identifier is unknown
        """
        record = await self.store.find_by_short_id(short_id)
        if record is None:
            raise NotFoundError(details={"shortId": short_id})
        return AnalyticsView.from_record(record)

    async def count_links(self) -> int:
        """Total number of links, for health/status reporting."""
        return await self.store.count_all()
