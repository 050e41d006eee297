"""Class model definitions."""

from sqlalchemy import CheckConstraint, Column, Float, Integer, String
from booking_api.database import Base

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_DENIED = "denied"
CLASS_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_DENIED)


class Course(Base):
    """Represents a class offered by an instructor."""
    __tablename__ = "classes"
    __table_args__ = (
        CheckConstraint("available_seats >= 0", name="ck_classes_available_seats_non_negative"),
        CheckConstraint("enrolled >= 0", name="ck_classes_enrolled_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    image = Column(String)
    instructor_name = Column(String)
    instructor_email = Column(String, index=True)
    price = Column(Float, nullable=False, default=0)
    available_seats = Column(Integer, nullable=False, default=0)
    enrolled = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default=STATUS_PENDING, index=True)
    feedback = Column(String)
