"""Instructor directory model definitions."""

from sqlalchemy import Column, Integer, String
from booking_api.database import Base


class Instructor(Base):
    """Represents an instructor listed in the public directory."""
    __tablename__ = "instructors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, index=True)
    image = Column(String)
    students = Column(Integer, nullable=False, default=0)
