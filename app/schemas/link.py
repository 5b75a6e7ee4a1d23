"""
app/schemas/link.py

Purpose: Request/response schemas for the SMS link API

- Generate request (phone + message)
- Generated link payload
- Analytics payload (camelCase keys, ISO-8601 timestamps)
"""

from pydantic import BaseModel, Field
from typing import Optional

from app.models.link import AnalyticsView, LinkRecord
from utils.time_utils import format_timestamp


class GenerateLinkRequest(BaseModel):
    """
    Body of POST /api/sms/generate.
    Presence and format are checked by the registry so that every input
    problem reports the same VALIDATION_ERROR shape.
    """
    phone: Optional[str] = Field(default=None, description="Recipient phone number")
    message: Optional[str] = Field(default=None, description="SMS message text")

    class Config:
        json_schema_extra = {
            "example": {
                "phone": "+1234567890",
                "message": "Hello! Check out this link."
            }
        }


class GeneratedLink(BaseModel):
    short_url: str = Field(..., alias="shortUrl")
    deep_link: str = Field(..., alias="deepLink")
    short_id: str = Field(..., alias="shortId")
    recipient: str
    message: str

    class Config:
        populate_by_name = True

    @classmethod
    def from_record(cls, record: LinkRecord) -> "GeneratedLink":
        return cls(
            short_url=record.short_url,
            deep_link=record.deep_link,
            short_id=record.short_id,
            recipient=record.recipient,
            message=record.message,
        )


class LinkAnalytics(BaseModel):
    short_id: str = Field(..., alias="shortId")
    recipient: str
    message: str
    short_url: str = Field(..., alias="shortUrl")
    deep_link: str = Field(..., alias="deepLink")
    click_count: int = Field(..., alias="clickCount")
    created_at: str = Field(..., alias="createdAt")
    last_clicked_at: Optional[str] = Field(default=None, alias="lastClickedAt")
    updated_at: str = Field(..., alias="updatedAt")

    class Config:
        populate_by_name = True

    @classmethod
    def from_view(cls, view: AnalyticsView) -> "LinkAnalytics":
        return cls(
            short_id=view.short_id,
            recipient=view.recipient,
            message=view.message,
            short_url=view.short_url,
            deep_link=view.deep_link,
            click_count=view.click_count,
            created_at=format_timestamp(view.created_at),
            last_clicked_at=format_timestamp(view.last_clicked_at),
            updated_at=format_timestamp(view.updated_at),
        )
