from sqlalchemy import Column, DateTime

from microlandlord.core.time import utcnow


class TimestampMixin:
    """created_at/updated_at columns in naive UTC; updated_at moves on every UPDATE."""

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
