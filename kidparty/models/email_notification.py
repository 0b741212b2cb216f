from sqlalchemy import (
    Index,
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base
from .enums import EmailNotificationStatus


class EmailNotification(Base):
    __tablename__ = "email_notifications"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=False)
    type = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    content = Column(Text, nullable=False)

    # Party id or child id depending on type
    related_id = Column(Integer)

    # Delivery state
    status = Column(String, default=EmailNotificationStatus.PENDING.value)
    attempts = Column(Integer, default=0)
    error = Column(Text)
    scheduled_at = Column(DateTime, nullable=False)
    sent_at = Column(DateTime)

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="email_notifications")

    __table_args__ = (
        Index("idx_email_notification_due", "status", "scheduled_at"),
        Index("idx_email_notification_related", "user_id", "type", "related_id"),
    )
