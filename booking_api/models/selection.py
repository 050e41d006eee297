"""Selected class (cart entry) model definitions."""

from sqlalchemy import Column, Float, ForeignKey, Integer, String
from booking_api.database import Base


class Selection(Base):
    """Represents a class a student added to their cart but has not paid for."""
    __tablename__ = "selected_classes"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, index=True, nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)
    name = Column(String)
    image = Column(String)
    instructor_name = Column(String)
    price = Column(Float)
