"""
Data model for Shortlinks.

Mappings are stored with camelCase keys (`originalUrl`, `createdAt`, ...)
so the serialized collection keeps the layout the browser client wrote to
local storage. Python code uses the snake_case attribute names.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator


class Mapping(BaseModel):
    """One shortcode -> URL record. Only `access_count` ever changes."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    shortcode: str
    original_url: str = Field(alias="originalUrl")
    created_at: datetime = Field(alias="createdAt")
    expires_at: datetime = Field(alias="expiresAt")
    access_count: NonNegativeInt = Field(default=0, alias="accessCount")

    @field_validator("created_at", "expires_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Records written without an offset are UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def is_live(self, now: datetime) -> bool:
        return self.expires_at > now

    def accessed(self) -> "Mapping":
        """Return a copy with the access counter bumped by one."""
        return self.model_copy(update={"access_count": self.access_count + 1})

    def to_record(self) -> Dict[str, Any]:
        """Serialize for storage (camelCase keys, ISO-8601 timestamps)."""
        return self.model_dump(mode="json", by_alias=True)


class ShortenResult(Mapping):
    """A freshly created mapping plus the link users share."""

    short_url: str = Field(alias="shortUrl")
