"""Payment model definitions."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String
from booking_api.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Payment(Base):
    """Append-only record of a completed checkout."""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, index=True, nullable=False)
    price = Column(Float, nullable=False)
    transaction_id = Column(String)
    date = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    class_ids = Column(JSON, nullable=False, default=list)
    selection_ids = Column(JSON, nullable=False, default=list)
