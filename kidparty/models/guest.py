from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class Guest(Base):
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    parent_name = Column(String)
    child_name = Column(String)
    email = Column(String, nullable=False, index=True)
    phone = Column(String)

    party_id = Column(
        Integer, ForeignKey("parties.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    party = relationship("Party", back_populates="guests")
    user = relationship("User", back_populates="guest_entries")
    rsvp = relationship(
        "RSVP", back_populates="guest", uselist=False, cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("party_id", "email", name="uq_guest_party_email"),
    )
