"""Link data models.

This module defines the LinkRecord model persisted by every link store and
the ShortLink read model returned by the service layer.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp column.

    Values are written as UTC and always read back as aware UTC datetimes,
    including on backends such as SQLite that drop the offset on storage.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class LinkRecord(SQLModel, table=True):
    """
    Mapping from a short code to the original URL.
    
    Records are created once through a store's create-if-absent step and
    never modified afterwards. ``id`` and ``created_at`` are stamped by
    the store at insertion time.
    """
    
    __tablename__ = "links"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(
        unique=True,
        max_length=32,
        nullable=False,
        description="Case-sensitive short code",
    )
    original_url: str = Field(
        nullable=False,
        description="Absolute http(s) URL the code resolves to",
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=UTCDateTime,
        nullable=False,
        description="Insertion timestamp, non-decreasing in insertion order",
    )
    
    __table_args__ = (
        # Ordered index backing newest-first listing
        Index("ix_links_created_at_id", "created_at", "id"),
    )


class ShortLink(SQLModel):
    """A stored link together with its fully-qualified short URL."""
    
    id: int
    code: str
    original_url: str
    short_url: str
    created_at: datetime
    
    @classmethod
    def from_record(cls, record: LinkRecord, base_url: str) -> "ShortLink":
        return cls(
            id=record.id,
            code=record.code,
            original_url=record.original_url,
            short_url=f"{base_url}/{record.code}",
            created_at=record.created_at,
        )
