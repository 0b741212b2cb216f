"""
Party reminder scheduling.

Each party gets up to three reminder checkpoints (seven days before, two days
before, day of). A scheduler run looks at parties happening in the next eight
days, works out which checkpoint (if any) is due today, claims it, and emails
every guest of the party.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..models.enums import ReminderType
from ..models.guest import Guest
from ..models.party import Party
from ..utils.constants import AppConstants, ReminderConstants
from ..utils.date_helpers import DateHelpers
from ..utils.email import EmailService
from ..utils.email_content import GuestNames, PartyFacts, generate_reminder_email
from .exceptions import PartyNotFoundError
from .reminder_repository import ReminderRepository

logger = logging.getLogger(__name__)


class DeliveryStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"


@dataclass
class GuestDeliveryResult:
    guest_id: int
    email: str
    status: DeliveryStatus
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "guest_id": self.guest_id,
            "email": self.email,
            "status": self.status.value,
            "error": self.error,
        }


@dataclass
class CheckpointSummary:
    party_id: int
    reminder_type: ReminderType
    results: List[GuestDeliveryResult] = field(default_factory=list)

    @property
    def sent_count(self) -> int:
        return sum(1 for r in self.results if r.status == DeliveryStatus.SENT)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if r.status == DeliveryStatus.FAILED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "party_id": self.party_id,
            "reminder_type": self.reminder_type.value,
            "sent_count": self.sent_count,
            "failed_count": self.failed_count,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class ReminderRunSummary:
    run_at: datetime
    parties_scanned: int = 0
    already_sent: int = 0
    checkpoints: List[CheckpointSummary] = field(default_factory=list)
    party_errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def emails_sent(self) -> int:
        return sum(c.sent_count for c in self.checkpoints)

    @property
    def emails_failed(self) -> int:
        return sum(c.failed_count for c in self.checkpoints)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_at": self.run_at.isoformat(),
            "parties_scanned": self.parties_scanned,
            "already_sent": self.already_sent,
            "emails_sent": self.emails_sent,
            "emails_failed": self.emails_failed,
            "checkpoints": [c.to_dict() for c in self.checkpoints],
            "party_errors": self.party_errors,
        }


def checkpoint_for_days(days_until_event: int) -> Optional[ReminderType]:
    """Exact match only: a missed day is never sent late"""
    return ReminderConstants.CHECKPOINT_BY_DAYS.get(days_until_event)


def reminder_targets(event_datetime: datetime) -> List[Tuple[ReminderType, datetime]]:
    return [
        (
            ReminderType.SEVEN_DAYS,
            event_datetime - ReminderConstants.SEVEN_DAYS_OFFSET,
        ),
        (
            ReminderType.TWO_DAYS,
            event_datetime - ReminderConstants.TWO_DAYS_OFFSET,
        ),
        (
            ReminderType.SAME_DAY,
            DateHelpers.at_hour(event_datetime, ReminderConstants.SAME_DAY_HOUR),
        ),
    ]


def build_rsvp_url(token: str, base_url: Optional[str] = None) -> str:
    base_url = base_url or os.getenv(
        "PUBLIC_BASE_URL", AppConstants.DEFAULT_PUBLIC_BASE_URL
    )
    return f"{base_url.rstrip('/')}/rsvp/{token}"


def party_facts(party: Party, today: datetime, base_url: Optional[str] = None) -> PartyFacts:
    return PartyFacts(
        child_name=party.child.name,
        child_age=DateHelpers.calculate_age(party.child.birth_date, today),
        event_datetime=party.event_datetime,
        location=party.location,
        theme=party.theme or None,
        notes=party.notes or None,
        rsvp_url=build_rsvp_url(party.public_rsvp_token, base_url),
    )


class ReminderService:
    def __init__(
        self,
        repository: ReminderRepository,
        email_service: Optional[EmailService] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
        base_url: Optional[str] = None,
    ):
        self.repository = repository
        self.email_service = email_service or EmailService()
        self.clock = clock
        self.base_url = base_url

    def create_reminder_schedule(
        self, party_id: int, now: Optional[datetime] = None
    ) -> List[ReminderType]:
        """Create unsent reminder rows for every checkpoint still in the future"""

        now = now or self.clock()
        party = self.repository.get_party(party_id)
        if not party:
            raise PartyNotFoundError(f"Party {party_id} not found")

        scheduled = []
        for reminder_type, target in reminder_targets(party.event_datetime):
            if target <= now:
                continue
            self.repository.ensure_reminder(party_id, reminder_type)
            scheduled.append(reminder_type)

        logger.info(
            f"📅 Scheduled reminders for party {party_id}: "
            f"{[t.value for t in scheduled] or 'none'}"
        )
        return scheduled

    def process_reminders(self, now: Optional[datetime] = None) -> ReminderRunSummary:
        """Send every reminder checkpoint that is due at `now`"""

        now = now or self.clock()
        summary = ReminderRunSummary(run_at=now)

        parties = self.repository.find_parties_in_window(
            now, now + ReminderConstants.LOOKAHEAD_WINDOW
        )
        summary.parties_scanned = len(parties)

        for party in parties:
            party_id = party.id
            try:
                checkpoint = self._process_party(party, now, summary)
            except Exception as e:
                logger.error(
                    f"❌ Reminder processing failed for party {party_id}: {e}",
                    exc_info=True,
                )
                self.repository.rollback()
                summary.party_errors.append({"party_id": party_id, "error": str(e)})
                continue

            if checkpoint:
                summary.checkpoints.append(checkpoint)

        logger.info(
            f"🔔 Reminder run at {now.isoformat()}: {summary.parties_scanned} parties, "
            f"{len(summary.checkpoints)} checkpoints, {summary.emails_sent} sent, "
            f"{summary.emails_failed} failed, {len(summary.party_errors)} party errors"
        )
        return summary

    def _process_party(
        self, party: Party, now: datetime, summary: ReminderRunSummary
    ) -> Optional[CheckpointSummary]:
        party_id = party.id
        days_until_event = DateHelpers.days_until(party.event_datetime, now)
        reminder_type = checkpoint_for_days(days_until_event)
        if reminder_type is None:
            return None

        if self._already_sent(party, reminder_type):
            summary.already_sent += 1
            return None

        # Snapshot everything needed for the emails before claiming, so a
        # rendering problem cannot burn the checkpoint.
        facts = party_facts(party, now, self.base_url)
        guests = [
            (guest.id, guest.email, self._guest_names(guest)) for guest in party.guests
        ]

        if not self.repository.claim_reminder(party_id, reminder_type, now):
            summary.already_sent += 1
            return None

        checkpoint = CheckpointSummary(party_id=party_id, reminder_type=reminder_type)
        for guest_id, email, names in guests:
            checkpoint.results.append(
                self._send_to_guest(guest_id, email, names, facts, reminder_type)
            )

        logger.info(
            f"Sent {reminder_type.value} reminders for {facts.child_name}'s party "
            f"(party {checkpoint.party_id}): {checkpoint.sent_count} sent, "
            f"{checkpoint.failed_count} failed"
        )
        return checkpoint

    def _send_to_guest(
        self,
        guest_id: int,
        email: str,
        names: GuestNames,
        facts: PartyFacts,
        reminder_type: ReminderType,
    ) -> GuestDeliveryResult:
        try:
            content = generate_reminder_email(facts, names, reminder_type)
            self.email_service.send_email(
                to=email,
                subject=content.subject,
                text=content.text,
                html=content.html,
            )
        except Exception as e:
            logger.error(f"Failed to send {reminder_type.value} reminder to {email}: {e}")
            return GuestDeliveryResult(
                guest_id=guest_id,
                email=email,
                status=DeliveryStatus.FAILED,
                error=str(e),
            )

        return GuestDeliveryResult(
            guest_id=guest_id, email=email, status=DeliveryStatus.SENT
        )

    @staticmethod
    def _already_sent(party: Party, reminder_type: ReminderType) -> bool:
        return any(
            r.type == reminder_type.value and r.sent_at is not None
            for r in party.reminders
        )

    @staticmethod
    def _guest_names(guest: Guest) -> GuestNames:
        return GuestNames(
            parent_name=guest.parent_name or "there",
            child_name=guest.child_name or "your child",
        )
