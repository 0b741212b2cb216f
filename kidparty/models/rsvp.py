from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base
from .enums import RSVPStatus


class RSVP(Base):
    __tablename__ = "rsvps"

    id = Column(Integer, primary_key=True, index=True)
    status = Column(String, nullable=False, default=RSVPStatus.MAYBE.value)
    num_children = Column(Integer, default=0)
    parent_staying = Column(Boolean, default=False)
    allergies = Column(Text)
    message = Column(Text)

    # One answer per guest
    guest_id = Column(
        Integer,
        ForeignKey("guests.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    guest = relationship("Guest", back_populates="rsvp")
