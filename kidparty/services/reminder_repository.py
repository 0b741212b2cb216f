from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from ..models.enums import ReminderType
from ..models.party import Party
from ..models.reminder import Reminder


class ReminderRepository(ABC):
    """Data access needed by the reminder scheduler"""

    @abstractmethod
    def get_party(self, party_id: int) -> Optional[Party]:
        pass

    @abstractmethod
    def find_parties_in_window(self, start: datetime, end: datetime) -> List[Party]:
        """Parties with start <= event_datetime <= end, guests/child/reminders loaded"""
        pass

    @abstractmethod
    def ensure_reminder(self, party_id: int, reminder_type: ReminderType) -> Reminder:
        """Return the (party, type) reminder, creating it unsent if missing"""
        pass

    @abstractmethod
    def claim_reminder(
        self, party_id: int, reminder_type: ReminderType, sent_at: datetime
    ) -> bool:
        """
        Atomically mark (party, type) as sent.

        Returns True only for the caller whose write set sent_at; a reminder
        that is already sent returns False.
        """
        pass

    def rollback(self) -> None:
        pass


class SQLAlchemyReminderRepository(ReminderRepository):
    def __init__(self, db: Session):
        self.db = db

    def get_party(self, party_id: int) -> Optional[Party]:
        return self.db.query(Party).filter(Party.id == party_id).first()

    def find_parties_in_window(self, start: datetime, end: datetime) -> List[Party]:
        return (
            self.db.query(Party)
            .options(
                joinedload(Party.child),
                selectinload(Party.guests),
                selectinload(Party.reminders),
            )
            .filter(Party.event_datetime >= start, Party.event_datetime <= end)
            .order_by(Party.id)
            .all()
        )

    def _find_reminder(
        self, party_id: int, reminder_type: ReminderType
    ) -> Optional[Reminder]:
        return (
            self.db.query(Reminder)
            .filter(
                Reminder.party_id == party_id,
                Reminder.type == reminder_type.value,
            )
            .first()
        )

    def ensure_reminder(self, party_id: int, reminder_type: ReminderType) -> Reminder:
        existing = self._find_reminder(party_id, reminder_type)
        if existing:
            return existing

        reminder = Reminder(party_id=party_id, type=reminder_type.value)
        self.db.add(reminder)
        try:
            self.db.commit()
        except IntegrityError:
            # Another writer created it first
            self.db.rollback()
            return self._find_reminder(party_id, reminder_type)

        self.db.refresh(reminder)
        return reminder

    def claim_reminder(
        self, party_id: int, reminder_type: ReminderType, sent_at: datetime
    ) -> bool:
        result = self.db.execute(
            update(Reminder)
            .where(
                Reminder.party_id == party_id,
                Reminder.type == reminder_type.value,
                Reminder.sent_at.is_(None),
            )
            .values(sent_at=sent_at)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            self.db.commit()
            return True

        if self._find_reminder(party_id, reminder_type) is not None:
            # Row exists and was already sent
            self.db.rollback()
            return False

        # No pre-created row: the unique (party_id, type) constraint arbitrates
        self.db.add(
            Reminder(party_id=party_id, type=reminder_type.value, sent_at=sent_at)
        )
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return False
        return True

    def rollback(self) -> None:
        self.db.rollback()
