"""
app/models/link.py

Purpose: Link document model

- Short identifier, recipient and message
- Derived deep link and short URL (computed once at creation)
- Click tracking fields (count, last click, last update)
- Conversion to and from MongoDB documents (camelCase keys)
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime


class LinkRecord(BaseModel):
    """
    Persisted short link. Immutable; click tracking produces a new copy.
    """

    short_id: str = Field(..., alias="shortId", description="Unique short identifier")
    recipient: str = Field(..., description="Normalized phone number")
    message: str = Field(..., description="Trimmed SMS body")
    deep_link: str = Field(..., alias="deepLink", description="sms: URI opened on redirect")
    short_url: str = Field(..., alias="shortUrl", description="Public short URL")
    click_count: int = Field(default=0, ge=0, alias="clickCount")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")
    last_clicked_at: Optional[datetime] = Field(default=None, alias="lastClickedAt")

    class Config:
        frozen = True
        populate_by_name = True

    def to_document(self) -> Dict[str, Any]:
        """
        MongoDB document for this record.
        lastClickedAt is left out until the first click.
        """
        document = self.model_dump(by_alias=True)
        if document["lastClickedAt"] is None:
            del document["lastClickedAt"]
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "LinkRecord":
        """Builds a record from a stored document, ignoring Mongo's _id."""
        data = {key: value for key, value in document.items() if key != "_id"}
        return cls.model_validate(data)

    def with_click(self, clicked_at: datetime) -> "LinkRecord":
        """
        Copy of this record with one more click registered at clicked_at.
        Timestamps never move backwards.
        """
        last_clicked_at = clicked_at
        if self.last_clicked_at is not None:
            last_clicked_at = max(self.last_clicked_at, clicked_at)
        return self.model_copy(
            update={
                "click_count": self.click_count + 1,
                "updated_at": max(self.updated_at, clicked_at),
                "last_clicked_at": last_clicked_at,
            }
        )


class AnalyticsView(BaseModel):
    """
    Read-only analytics snapshot of a link.
    lastClickedAt is always present (None until the first click).
    """

    short_id: str = Field(..., alias="shortId")
    recipient: str
    message: str
    short_url: str = Field(..., alias="shortUrl")
    deep_link: str = Field(..., alias="deepLink")
    click_count: int = Field(..., alias="clickCount")
    created_at: datetime = Field(..., alias="createdAt")
    last_clicked_at: Optional[datetime] = Field(default=None, alias="lastClickedAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    class Config:
        frozen = True
        populate_by_name = True

    @classmethod
    def from_record(cls, record: LinkRecord) -> "AnalyticsView":
        return cls.model_validate(record.model_dump())
