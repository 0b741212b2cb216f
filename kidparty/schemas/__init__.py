from .child import ChildCreate, ChildResponse
from .party import (
    PartyCreate,
    PartyResponse,
    PublicPartyResponse,
    RSVPStats,
    InviteGuestsRequest,
    InviteGuestsResult,
)
from .rsvp import RSVPCreate, RSVPResponse, GuestResponse

__all__ = [
    "ChildCreate",
    "ChildResponse",
    "PartyCreate",
    "PartyResponse",
    "PublicPartyResponse",
    "RSVPStats",
    "InviteGuestsRequest",
    "InviteGuestsResult",
    "RSVPCreate",
    "RSVPResponse",
    "GuestResponse",
]
