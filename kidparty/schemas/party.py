from pydantic import BaseModel, EmailStr, Field, field_validator, ValidationInfo
from typing import List, Optional
from datetime import datetime, timezone
from ..utils.constants import AppConstants


class PartyBase(BaseModel):
    location: str = Field(..., min_length=1, max_length=200)
    theme: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=2000)
    template_id: Optional[str] = Field(None, max_length=100)


class PartyCreate(PartyBase):
    child_id: int
    event_datetime: datetime
    event_end_datetime: Optional[datetime] = None
    allow_photo_sharing: bool = False

    @field_validator("event_datetime", "event_end_datetime")
    @classmethod
    def to_naive_utc(cls, v):
        # Stored and compared as naive UTC
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @field_validator("event_end_datetime")
    @classmethod
    def end_after_start(cls, v, info: ValidationInfo):
        start = info.data.get("event_datetime")
        if v and start and v <= start:
            raise ValueError("End time must be after start time")
        return v


class RSVPStats(BaseModel):
    total: int = 0
    attending: int = 0
    not_attending: int = 0
    maybe: int = 0


class PartyResponse(PartyBase):
    id: int
    child_id: int
    child_name: str
    child_age: int
    event_datetime: datetime
    event_end_datetime: Optional[datetime] = None
    public_rsvp_token: str
    allow_photo_sharing: bool = False
    photo_sharing_paid: bool = False
    stats: Optional[RSVPStats] = None


class PublicPartyResponse(BaseModel):
    """What an invited guest sees through the RSVP link"""

    id: int
    child_name: str
    child_age: int
    event_datetime: datetime
    event_end_datetime: Optional[datetime] = None
    location: str
    theme: Optional[str] = None
    notes: Optional[str] = None


class InviteGuestsRequest(BaseModel):
    emails: List[EmailStr] = Field(
        ..., min_length=1, max_length=AppConstants.MAX_GUESTS_PER_INVITE
    )


class InviteGuestsResult(BaseModel):
    count: int
    sent: int
    failed: List[str] = []
