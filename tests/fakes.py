"""Test doubles for the email sender and the reminder repository."""

from datetime import datetime
from typing import Dict, List, Optional

from kidparty.models.enums import ReminderType
from kidparty.models.party import Party
from kidparty.models.reminder import Reminder
from kidparty.services.reminder_repository import ReminderRepository
from kidparty.utils.email import EmailDeliveryError


class RecordingEmailService:
    """Stores messages instead of sending them; can be told to fail for some recipients"""

    def __init__(self, fail_for: Optional[set] = None):
        self.sent_emails: List[Dict] = []
        self.attempts: List[str] = []
        self.fail_for = set(fail_for or ())

    def send_email(self, to: str, subject: str, text: str, html: Optional[str] = None) -> bool:
        self.attempts.append(to)
        if to in self.fail_for:
            raise EmailDeliveryError(f"Failed to send email to {to}: mailbox unavailable")

        self.sent_emails.append(
            {"to": to, "subject": subject, "text": text, "html": html}
        )
        return True

    def recipients(self) -> List[str]:
        return [email["to"] for email in self.sent_emails]

    def clear_sent_emails(self):
        self.sent_emails = []
        self.attempts = []


class InMemoryReminderRepository(ReminderRepository):
    """Keeps transient Party objects in a dict; same contract as the SQL version"""

    def __init__(self, parties: Optional[List[Party]] = None):
        self.parties: Dict[int, Party] = {p.id: p for p in parties or []}
        self.rollbacks = 0

    def add(self, party: Party):
        self.parties[party.id] = party

    def get_party(self, party_id: int) -> Optional[Party]:
        return self.parties.get(party_id)

    def find_parties_in_window(self, start: datetime, end: datetime) -> List[Party]:
        return sorted(
            (p for p in self.parties.values() if start <= p.event_datetime <= end),
            key=lambda p: p.id,
        )

    def _find(self, party_id: int, reminder_type: ReminderType) -> Optional[Reminder]:
        for reminder in self.parties[party_id].reminders:
            if reminder.type == reminder_type.value:
                return reminder
        return None

    def ensure_reminder(self, party_id: int, reminder_type: ReminderType) -> Reminder:
        existing = self._find(party_id, reminder_type)
        if existing:
            return existing
        reminder = Reminder(party_id=party_id, type=reminder_type.value, sent_at=None)
        self.parties[party_id].reminders.append(reminder)
        return reminder

    def claim_reminder(
        self, party_id: int, reminder_type: ReminderType, sent_at: datetime
    ) -> bool:
        existing = self._find(party_id, reminder_type)
        if existing is None:
            self.parties[party_id].reminders.append(
                Reminder(party_id=party_id, type=reminder_type.value, sent_at=sent_at)
            )
            return True
        if existing.sent_at is not None:
            return False
        existing.sent_at = sent_at
        return True

    def rollback(self) -> None:
        self.rollbacks += 1

    def reminder(self, party_id: int, reminder_type: ReminderType) -> Optional[Reminder]:
        return self._find(party_id, reminder_type)
