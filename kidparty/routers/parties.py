from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Dict, Any
from ..database import get_db
from ..dependencies import get_current_user, get_email_service
from ..models.user import User
from ..schemas.party import PartyCreate, InviteGuestsRequest
from ..services.party_service import PartyService
from ..services.notification_service import NotificationService
from ..utils.email import EmailService
from ..utils.router_helpers import handle_service_errors, RouterResponse

router = APIRouter(tags=["parties"])


@router.post("/", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def create_party(
    party_data: PartyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    email_service: EmailService = Depends(get_email_service),
):
    """Create a party and schedule its reminders"""
    party_service = PartyService(db, email_service)
    party = party_service.create_party(party_data, user_id=current_user.id)

    return RouterResponse.created(
        data={"party": party_service.serialize_party(party)},
        message="Party created successfully",
    )


@router.get("/", response_model=Dict[str, Any])
@handle_service_errors
async def list_parties(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List the host's parties with RSVP counts"""
    parties = PartyService(db).list_user_parties(current_user.id)
    return RouterResponse.success(data={"parties": parties})


@router.get("/{party_id}", response_model=Dict[str, Any])
@handle_service_errors
async def get_party(
    party_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Party detail with guests and their RSVPs"""
    party = PartyService(db).get_party_detail(party_id, current_user.id)
    return RouterResponse.success(data={"party": party})


@router.post("/{party_id}/invite", response_model=Dict[str, Any])
@handle_service_errors
async def invite_guests(
    party_id: int,
    invite_data: InviteGuestsRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    email_service: EmailService = Depends(get_email_service),
):
    """Add guests by email and send invitations"""
    result = PartyService(db, email_service).invite_guests(
        party_id, current_user.id, [str(email) for email in invite_data.emails]
    )
    return RouterResponse.success(
        data=result.model_dump(),
        message=f"Invitations sent to {result.sent} of {result.count} recipients",
    )


@router.get("/{party_id}/qr", response_model=Dict[str, Any])
@handle_service_errors
async def get_party_qr_code(
    party_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """QR code for the party's RSVP link"""
    return RouterResponse.success(
        data=PartyService(db).get_qr_code(party_id, current_user.id)
    )


@router.post(
    "/{party_id}/photo-sharing/notifications", response_model=Dict[str, Any]
)
@handle_service_errors
async def schedule_photo_sharing_notifications(
    party_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    email_service: EmailService = Depends(get_email_service),
):
    """Queue 'photos available' emails for attending guests"""
    PartyService(db).get_party_for_owner(party_id, current_user.id)

    created = NotificationService(
        db, email_service
    ).schedule_photo_sharing_notifications(party_id)
    return RouterResponse.success(
        data={"scheduled": len(created)},
        message="Photo sharing notifications scheduled",
    )
