"""SQLAlchemy model for durable key/value storage entries."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from app.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


class StorageEntryModel(Base):
    """Single named value, overwritten as a whole on every write."""

    __tablename__ = "storage_entry"

    key = Column(String(120), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(), nullable=False, default=_utcnow, onupdate=_utcnow)


__all__ = ["StorageEntryModel"]
