"""User model definitions."""

from sqlalchemy import Column, Integer, String
from booking_api.database import Base


class User(Base):
    """Represents a platform member, keyed by email."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String)
    image = Column(String)
    role = Column(String)  # none/instructor/admin
