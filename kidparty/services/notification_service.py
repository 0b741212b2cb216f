import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session, joinedload, selectinload

from ..models.child import Child
from ..models.email_notification import EmailNotification
from ..models.enums import (
    EmailNotificationStatus,
    EmailNotificationType,
    RSVPStatus,
)
from ..models.guest import Guest
from ..models.party import Party
from ..utils.constants import NotificationConstants
from ..utils.date_helpers import DateHelpers
from ..utils.email import EmailService
from ..utils.email_content import (
    GuestNames,
    generate_birthday_party_reminder_email,
    generate_photo_sharing_available_email,
)
from .exceptions import PartyNotFoundError
from .reminder_service import party_facts

logger = logging.getLogger(__name__)


class NotificationService:
    """Queued emails: photo-sharing announcements and birthday reminders"""

    def __init__(self, db: Session, email_service: Optional[EmailService] = None):
        self.db = db
        self.email_service = email_service or EmailService()

    # PHOTO SHARING
    def schedule_photo_sharing_notifications(
        self, party_id: int, now: Optional[datetime] = None
    ) -> List[EmailNotification]:
        """Queue a photo-sharing email for each attending guest with an account"""

        now = now or datetime.utcnow()
        party = (
            self.db.query(Party)
            .options(
                joinedload(Party.child),
                selectinload(Party.guests).joinedload(Guest.rsvp),
            )
            .filter(Party.id == party_id)
            .first()
        )
        if not party:
            raise PartyNotFoundError(f"Party {party_id} not found")

        if not party.allow_photo_sharing or not party.photo_sharing_paid:
            logger.info(
                f"Party {party_id}: photo sharing not enabled, skipping notifications"
            )
            return []

        # 10 AM the day after the party
        send_at = DateHelpers.at_hour(
            party.event_datetime + timedelta(days=1),
            NotificationConstants.PHOTO_SHARING_NOTIFY_HOUR,
        )
        facts = party_facts(party, now)

        attending = [
            guest
            for guest in party.guests
            if guest.rsvp and guest.rsvp.status == RSVPStatus.YES.value
        ]

        created = []
        for guest in attending:
            if guest.user_id is None:
                continue

            if self._notification_exists(
                guest.user_id, EmailNotificationType.PHOTO_SHARING_AVAILABLE, party_id
            ):
                continue

            content = generate_photo_sharing_available_email(
                facts,
                GuestNames(
                    parent_name=guest.parent_name or "there",
                    child_name=guest.child_name or "your child",
                ),
            )
            notification = EmailNotification(
                user_id=guest.user_id,
                email=guest.email,
                type=EmailNotificationType.PHOTO_SHARING_AVAILABLE.value,
                subject=content.subject,
                content=content.text,
                related_id=party_id,
                scheduled_at=send_at,
                created_at=now,
            )
            self.db.add(notification)
            created.append(notification)

        self.db.commit()
        logger.info(
            f"📷 Scheduled {len(created)} photo sharing notifications for party {party_id}"
        )
        return created

    # BIRTHDAY REMINDERS
    def schedule_birthday_reminders(
        self, now: Optional[datetime] = None
    ) -> List[EmailNotification]:
        """Queue a reminder to parents whose child's birthday is about three weeks out"""

        now = now or datetime.utcnow()
        today = now.date()
        created = []

        children = self.db.query(Child).options(joinedload(Child.parent)).all()
        for child in children:
            birthday = DateHelpers.next_birthday(child.birth_date, today)
            days_until = (birthday - today).days

            if not (
                NotificationConstants.BIRTHDAY_REMINDER_MIN_DAYS
                <= days_until
                <= NotificationConstants.BIRTHDAY_REMINDER_MAX_DAYS
            ):
                continue

            # Once per calendar year; a late-December reminder can repeat on Jan 1
            if self._notification_exists(
                child.user_id,
                EmailNotificationType.BIRTHDAY_PARTY_REMINDER,
                child.id,
                since=DateHelpers.start_of_year(now),
            ):
                logger.info(f"Birthday reminder already sent for {child.name} this year")
                continue

            parent = child.parent
            content = generate_birthday_party_reminder_email(
                child_name=child.name,
                upcoming_birthday=birthday,
                turning=DateHelpers.calculate_age(child.birth_date, birthday),
                parent_name=parent.name or "Parent",
            )
            notification = EmailNotification(
                user_id=child.user_id,
                email=parent.email,
                type=EmailNotificationType.BIRTHDAY_PARTY_REMINDER.value,
                subject=content.subject,
                content=content.text,
                related_id=child.id,
                scheduled_at=now,
                created_at=now,
            )
            self.db.add(notification)
            created.append(notification)
            logger.info(f"🎂 Scheduled birthday reminder for {child.name} ({parent.email})")

        self.db.commit()
        return created

    # DELIVERY
    def process_pending_emails(self, now: Optional[datetime] = None) -> int:
        """Send due queued emails; returns how many were attempted"""

        now = now or datetime.utcnow()
        pending = (
            self.db.query(EmailNotification)
            .filter(
                and_(
                    EmailNotification.status == EmailNotificationStatus.PENDING.value,
                    EmailNotification.scheduled_at <= now,
                    EmailNotification.attempts < NotificationConstants.MAX_EMAIL_ATTEMPTS,
                )
            )
            .order_by(EmailNotification.scheduled_at.asc())
            .limit(NotificationConstants.EMAIL_BATCH_SIZE)
            .all()
        )

        logger.info(f"📧 Processing {len(pending)} pending emails...")

        for notification in pending:
            notification.attempts = (notification.attempts or 0) + 1
            self.db.commit()

            try:
                self.email_service.send_email(
                    to=notification.email,
                    subject=notification.subject,
                    text=notification.content,
                )
            except Exception as e:
                logger.error(f"❌ Failed to send email to {notification.email}: {e}")
                notification.error = str(e)
                if notification.attempts >= NotificationConstants.MAX_EMAIL_ATTEMPTS:
                    notification.status = EmailNotificationStatus.FAILED.value
                self.db.commit()
                continue

            notification.status = EmailNotificationStatus.SENT.value
            notification.sent_at = now
            self.db.commit()

        return len(pending)

    def _notification_exists(
        self,
        user_id: int,
        notification_type: EmailNotificationType,
        related_id: int,
        since: Optional[datetime] = None,
    ) -> bool:
        query = self.db.query(EmailNotification).filter(
            EmailNotification.user_id == user_id,
            EmailNotification.type == notification_type.value,
            EmailNotification.related_id == related_id,
        )
        if since is not None:
            query = query.filter(EmailNotification.created_at >= since)
        return query.first() is not None
