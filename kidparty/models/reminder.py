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


class Reminder(Base):
    """
    One row per (party, checkpoint type).

    sent_at is NULL until the checkpoint has been claimed by a scheduler run;
    once set it is never cleared.
    """

    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String, nullable=False)
    sent_at = Column(DateTime, nullable=True)

    party_id = Column(
        Integer, ForeignKey("parties.id", ondelete="CASCADE"), nullable=False
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    party = relationship("Party", back_populates="reminders")

    __table_args__ = (
        UniqueConstraint("party_id", "type", name="uq_reminder_party_type"),
    )
