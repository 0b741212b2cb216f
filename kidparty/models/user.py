from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String)
    supabase_id = Column(String, unique=True, index=True)
    is_active = Column(Boolean, default=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    children = relationship(
        "Child", back_populates="parent", cascade="all, delete-orphan"
    )
    parties = relationship(
        "Party", back_populates="host", cascade="all, delete-orphan"
    )
    guest_entries = relationship("Guest", back_populates="user")
    email_notifications = relationship(
        "EmailNotification", back_populates="user", cascade="all, delete-orphan"
    )

    @classmethod
    def create_from_supabase(cls, supabase_user, db_session):
        """Create a local user row for a Supabase-authenticated host"""
        metadata = getattr(supabase_user, "user_metadata", None) or {}
        user = cls(
            email=supabase_user.email,
            name=metadata.get("name") or metadata.get("full_name"),
            supabase_id=supabase_user.id,
            is_active=True,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
