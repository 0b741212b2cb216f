import uuid

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Text,
    Boolean,
    JSON,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


def generate_rsvp_token() -> str:
    return str(uuid.uuid4())


class Party(Base):
    __tablename__ = "parties"

    id = Column(Integer, primary_key=True, index=True)
    event_datetime = Column(DateTime, nullable=False, index=True)
    event_end_datetime = Column(DateTime)
    location = Column(String, nullable=False)
    theme = Column(String)
    notes = Column(Text)

    # Capability token embedded in share links and QR codes
    public_rsvp_token = Column(
        String, unique=True, index=True, nullable=False, default=generate_rsvp_token
    )

    # Invitation templates
    template_id = Column(String)
    paid_templates = Column(JSON, default=list)

    # Photo sharing
    allow_photo_sharing = Column(Boolean, default=False)
    photo_sharing_paid = Column(Boolean, default=False)

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    child_id = Column(
        Integer, ForeignKey("children.id", ondelete="CASCADE"), nullable=False
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    host = relationship("User", back_populates="parties")
    child = relationship("Child", back_populates="parties")
    guests = relationship(
        "Guest",
        back_populates="party",
        cascade="all, delete-orphan",
        order_by="Guest.id",
    )
    reminders = relationship(
        "Reminder", back_populates="party", cascade="all, delete-orphan"
    )
