import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session, joinedload

from ..models.enums import RSVPStatus
from ..models.guest import Guest
from ..models.party import Party
from ..models.rsvp import RSVP
from ..models.user import User
from ..schemas.party import PublicPartyResponse
from ..schemas.rsvp import RSVPCreate
from ..utils.date_helpers import DateHelpers
from ..utils.email import EmailService
from ..utils.email_content import (
    RSVPFacts,
    generate_host_rsvp_notification_email,
    generate_rsvp_confirmation_email,
)
from .exceptions import PartyNotFoundError, RSVPValidationError
from .reminder_service import party_facts

logger = logging.getLogger(__name__)


class RSVPService:
    """Guest-facing access to a party through its public RSVP token"""

    def __init__(self, db: Session, email_service: Optional[EmailService] = None):
        self.db = db
        self.email_service = email_service or EmailService()

    def get_party_by_token(self, token: str) -> Party:
        if not self._is_valid_token(token):
            raise RSVPValidationError("Invalid invitation link")

        party = (
            self.db.query(Party)
            .options(joinedload(Party.child), joinedload(Party.host))
            .filter(Party.public_rsvp_token == token)
            .first()
        )
        if not party:
            raise PartyNotFoundError("Party not found")
        return party

    def get_public_party(self, token: str) -> Dict[str, Any]:
        party = self.get_party_by_token(token)
        return PublicPartyResponse(
            id=party.id,
            child_name=party.child.name,
            child_age=DateHelpers.calculate_age(
                party.child.birth_date, datetime.utcnow()
            ),
            event_datetime=party.event_datetime,
            event_end_datetime=party.event_end_datetime,
            location=party.location,
            theme=party.theme,
            notes=party.notes,
        ).model_dump(mode="json")

    def submit_rsvp(self, token: str, rsvp_data: RSVPCreate) -> RSVP:
        """
        Record a guest's answer.

        The guest is matched on (party, email); answering again overwrites the
        earlier RSVP instead of adding a second one.
        """
        party = self.get_party_by_token(token)
        email = rsvp_data.email.strip().lower()

        if party.host and party.host.email and party.host.email.lower() == email:
            raise RSVPValidationError("Host cannot RSVP to their own party")

        try:
            guest = (
                self.db.query(Guest)
                .filter(Guest.party_id == party.id, Guest.email == email)
                .first()
            )
            if not guest:
                guest = Guest(party_id=party.id, email=email)
                self.db.add(guest)

            guest.parent_name = rsvp_data.parent_name
            guest.child_name = rsvp_data.child_name
            guest.phone = rsvp_data.phone

            if guest.user_id is None:
                user = self.db.query(User).filter(User.email == email).first()
                if user:
                    guest.user_id = user.id

            rsvp = guest.rsvp
            if rsvp is None:
                rsvp = RSVP()
                guest.rsvp = rsvp

            rsvp.status = rsvp_data.status.value
            rsvp.num_children = rsvp_data.num_children
            rsvp.parent_staying = rsvp_data.parent_staying
            rsvp.allergies = rsvp_data.allergies or None
            rsvp.message = rsvp_data.message or None

            self.db.commit()
            self.db.refresh(rsvp)
        except Exception:
            self.db.rollback()
            raise

        self._send_rsvp_emails(party, email, rsvp_data)
        return rsvp

    def _send_rsvp_emails(self, party: Party, guest_email: str, rsvp_data: RSVPCreate):
        """Notify host and confirm to guest; failures never undo the RSVP"""

        facts = party_facts(party, datetime.utcnow())
        response = RSVPFacts(
            parent_name=rsvp_data.parent_name,
            child_name=rsvp_data.child_name,
            status=RSVPStatus(rsvp_data.status),
            num_children=rsvp_data.num_children,
            parent_staying=rsvp_data.parent_staying,
            allergies=rsvp_data.allergies,
            message=rsvp_data.message,
        )

        outgoing = [(guest_email, generate_rsvp_confirmation_email(facts, response))]
        if party.host and party.host.email:
            outgoing.append(
                (party.host.email, generate_host_rsvp_notification_email(facts, response))
            )

        for to, content in outgoing:
            try:
                self.email_service.send_email(
                    to=to, subject=content.subject, text=content.text, html=content.html
                )
            except Exception as e:
                logger.error(f"Failed to send RSVP email to {to}: {e}")

    @staticmethod
    def _is_valid_token(token: str) -> bool:
        try:
            uuid.UUID(token)
        except (ValueError, TypeError):
            return False
        return True
