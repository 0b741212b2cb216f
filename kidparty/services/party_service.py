import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ..models.child import Child
from ..models.enums import RSVPStatus
from ..models.guest import Guest
from ..models.party import Party
from ..models.user import User
from ..schemas.child import ChildCreate
from ..schemas.party import (
    InviteGuestsResult,
    PartyCreate,
    PartyResponse,
    RSVPStats,
)
from ..schemas.rsvp import GuestResponse
from ..utils.date_helpers import DateHelpers
from ..utils.email import EmailService
from ..utils.email_content import generate_invitation_email
from ..utils.qr import generate_qr_code
from .exceptions import (
    BusinessRuleViolationError,
    ChildNotFoundError,
    PartyNotFoundError,
    PartyServiceError,
)
from .reminder_repository import SQLAlchemyReminderRepository
from .reminder_service import ReminderService, build_rsvp_url, party_facts

logger = logging.getLogger(__name__)


class PartyService:
    def __init__(self, db: Session, email_service: Optional[EmailService] = None):
        self.db = db
        self.email_service = email_service or EmailService()

    # CHILDREN
    def create_child(self, child_data: ChildCreate, user_id: int) -> Child:
        child = Child(
            name=child_data.name,
            birth_date=child_data.birth_date,
            user_id=user_id,
        )
        self.db.add(child)
        self.db.commit()
        self.db.refresh(child)
        return child

    def list_children(self, user_id: int) -> List[Child]:
        return (
            self.db.query(Child)
            .filter(Child.user_id == user_id)
            .order_by(Child.name.asc())
            .all()
        )

    # PARTIES
    def create_party(
        self, party_data: PartyCreate, user_id: int, now: Optional[datetime] = None
    ) -> Party:
        """Create a party for one of the host's children and schedule its reminders"""

        now = now or datetime.utcnow()

        child = (
            self.db.query(Child)
            .filter(Child.id == party_data.child_id, Child.user_id == user_id)
            .first()
        )
        if not child:
            raise ChildNotFoundError("Child not found")

        if party_data.event_datetime <= now:
            raise BusinessRuleViolationError("Event must be in the future")

        try:
            party = Party(
                user_id=user_id,
                child_id=child.id,
                event_datetime=party_data.event_datetime,
                event_end_datetime=party_data.event_end_datetime,
                location=party_data.location,
                theme=party_data.theme,
                notes=party_data.notes,
                template_id=party_data.template_id,
                paid_templates=[],
                allow_photo_sharing=party_data.allow_photo_sharing,
                photo_sharing_paid=False,
            )
            self.db.add(party)
            self.db.commit()
            self.db.refresh(party)
        except Exception as e:
            self.db.rollback()
            raise PartyServiceError(f"Failed to create party: {str(e)}")

        # Party creation stands even if the reminder rows cannot be written;
        # the scheduler creates missing rows when it sends.
        try:
            reminder_service = ReminderService(
                SQLAlchemyReminderRepository(self.db), self.email_service
            )
            reminder_service.create_reminder_schedule(party.id, now=now)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create reminder schedule for party {party.id}: {e}")

        return party

    def get_party_for_owner(self, party_id: int, user_id: int) -> Party:
        party = (
            self.db.query(Party)
            .options(
                joinedload(Party.child),
                selectinload(Party.guests).joinedload(Guest.rsvp),
            )
            .filter(Party.id == party_id, Party.user_id == user_id)
            .first()
        )
        if not party:
            raise PartyNotFoundError("Party not found or access denied")
        return party

    def list_user_parties(self, user_id: int) -> List[Dict[str, Any]]:
        parties = (
            self.db.query(Party)
            .options(
                joinedload(Party.child),
                selectinload(Party.guests).joinedload(Guest.rsvp),
            )
            .filter(Party.user_id == user_id)
            .order_by(Party.event_datetime.asc())
            .all()
        )
        return [self.serialize_party(party) for party in parties]

    def get_party_detail(self, party_id: int, user_id: int) -> Dict[str, Any]:
        party = self.get_party_for_owner(party_id, user_id)
        detail = self.serialize_party(party)
        detail["guests"] = [
            GuestResponse.model_validate(guest).model_dump(mode="json")
            for guest in party.guests
        ]
        return detail

    def serialize_party(self, party: Party) -> Dict[str, Any]:
        response = PartyResponse(
            id=party.id,
            child_id=party.child_id,
            child_name=party.child.name,
            child_age=DateHelpers.calculate_age(
                party.child.birth_date, datetime.utcnow()
            ),
            event_datetime=party.event_datetime,
            event_end_datetime=party.event_end_datetime,
            location=party.location,
            theme=party.theme,
            notes=party.notes,
            template_id=party.template_id,
            public_rsvp_token=party.public_rsvp_token,
            allow_photo_sharing=bool(party.allow_photo_sharing),
            photo_sharing_paid=bool(party.photo_sharing_paid),
            stats=self.rsvp_stats(party),
        )
        return response.model_dump(mode="json")

    @staticmethod
    def rsvp_stats(party: Party) -> RSVPStats:
        rsvps = [guest.rsvp for guest in party.guests if guest.rsvp]
        return RSVPStats(
            total=len(party.guests),
            attending=sum(1 for r in rsvps if r.status == RSVPStatus.YES.value),
            not_attending=sum(1 for r in rsvps if r.status == RSVPStatus.NO.value),
            maybe=sum(1 for r in rsvps if r.status == RSVPStatus.MAYBE.value),
        )

    # INVITATIONS
    def invite_guests(
        self, party_id: int, user_id: int, emails: List[str]
    ) -> InviteGuestsResult:
        """Add guests by email and send each one an invitation"""

        party = self.get_party_for_owner(party_id, user_id)
        host = self.db.query(User).filter(User.id == user_id).first()
        host_name = (host.name or host.email) if host else "The Host"

        recipients = list(dict.fromkeys(email.strip().lower() for email in emails))
        existing = {guest.email.lower() for guest in party.guests}

        for email in recipients:
            if email not in existing:
                self.db.add(Guest(party_id=party.id, email=email))
        self.db.commit()

        content = generate_invitation_email(
            party_facts(party, datetime.utcnow()), host_name
        )

        failed = []
        for email in recipients:
            try:
                self.email_service.send_email(
                    to=email, subject=content.subject, text=content.text
                )
            except Exception as e:
                logger.error(f"Failed to send invite to {email}: {e}")
                failed.append(email)

        return InviteGuestsResult(
            count=len(recipients), sent=len(recipients) - len(failed), failed=failed
        )

    def get_qr_code(self, party_id: int, user_id: int) -> Dict[str, str]:
        party = self.get_party_for_owner(party_id, user_id)
        rsvp_url = build_rsvp_url(party.public_rsvp_token)
        return {"qr_code": generate_qr_code(rsvp_url), "rsvp_url": rsvp_url}
