from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from ..models.enums import RSVPStatus


class RSVPCreate(BaseModel):
    parent_name: str = Field(..., min_length=1, max_length=100)
    child_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=40)
    status: RSVPStatus
    num_children: int = Field(0, ge=0, le=20)
    parent_staying: bool = False
    allergies: Optional[str] = Field(None, max_length=500)
    message: Optional[str] = Field(None, max_length=1000)


class RSVPResponse(BaseModel):
    id: int
    guest_id: int
    status: RSVPStatus
    num_children: int
    parent_staying: bool
    allergies: Optional[str] = None
    message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GuestResponse(BaseModel):
    id: int
    party_id: int
    parent_name: Optional[str] = None
    child_name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    rsvp: Optional[RSVPResponse] = None

    class Config:
        from_attributes = True
