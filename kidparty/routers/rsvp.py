from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Dict, Any
from ..database import get_db
from ..dependencies import get_email_service
from ..schemas.rsvp import RSVPCreate, RSVPResponse
from ..services.rsvp_service import RSVPService
from ..utils.email import EmailService
from ..utils.router_helpers import handle_service_errors, RouterResponse

# Public: the token in the path is the only credential
router = APIRouter(tags=["rsvp"])


@router.get("/{token}", response_model=Dict[str, Any])
@handle_service_errors
async def get_invitation(token: str, db: Session = Depends(get_db)):
    """Party details for an invited guest"""
    party = RSVPService(db).get_public_party(token)
    return RouterResponse.success(data={"party": party})


@router.post("/{token}", response_model=Dict[str, Any])
@handle_service_errors
async def submit_rsvp(
    token: str,
    rsvp_data: RSVPCreate,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Submit or update a guest's RSVP"""
    rsvp = RSVPService(db, email_service).submit_rsvp(token, rsvp_data)
    return RouterResponse.success(
        data={"rsvp": RSVPResponse.model_validate(rsvp).model_dump(mode="json")},
        message="RSVP submitted successfully",
    )
