"""URL-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from minilink.models.url import SHORT_ID_LENGTH
from minilink.schemas.common import CamelModel


class ShortenUrlRequest(CamelModel):
    """Request schema for creating a short URL."""

    original_url: str = Field(..., description="The original URL to be shortened")
    user_id: UUID = Field(..., description="ID of the user creating the short URL")

    @field_validator("original_url")
    @classmethod
    def strip_original_url(cls, v: str) -> str:
        """Trim surrounding whitespace."""
        return v.strip()


class ShortenUrlResponse(CamelModel):
    """Response schema for a created short URL."""

    id: str = Field(..., min_length=SHORT_ID_LENGTH, max_length=SHORT_ID_LENGTH)
    original_url: str
    short_url: str


class UrlStatsResponse(CamelModel):
    """Click statistics for a single short URL."""

    id: str
    original_url: str
    short_url: str
    click_count: int = Field(0, ge=0, description="Number of redirects served")
    last_clicked_at: datetime | None = Field(None, description="Time of the last redirect")


class ClickStats(CamelModel):
    """Nested click statistics."""

    click_count: int = Field(0, ge=0)
    last_clicked_at: datetime | None = None


class UserUrlItem(CamelModel):
    """A user's short URL with its click statistics."""

    id: str
    original_url: str
    short_url: str
    clicks: ClickStats
