from datetime import date, timedelta

from kidparty.models import RSVP, Child, EmailNotification, User
from kidparty.models.enums import (
    EmailNotificationStatus,
    EmailNotificationType,
    RSVPStatus,
)
from kidparty.services.notification_service import NotificationService

from .conftest import NOW
from .fakes import RecordingEmailService


def queue_email(db_session, user, scheduled_at, **fields):
    notification = EmailNotification(
        user_id=user.id,
        email=fields.pop("email", user.email),
        type=EmailNotificationType.BIRTHDAY_PARTY_REMINDER.value,
        subject="Hello",
        content="Body",
        related_id=1,
        scheduled_at=scheduled_at,
        created_at=scheduled_at,
        **fields,
    )
    db_session.add(notification)
    db_session.commit()
    return notification


class TestPhotoSharingNotifications:
    def _party_with_answers(self, db_session, make_party, **fields):
        party = make_party(
            NOW - timedelta(hours=2),
            guests=[
                ("yes@x.com", "Yara", "Yuki"),
                ("no@x.com", "Noel", "Nia"),
                ("anon@x.com", "Ann", "Abe"),
            ],
            **fields,
        )
        registered = User(email="yes@x.com", name="Yara")
        declined = User(email="no@x.com", name="Noel")
        db_session.add_all([registered, declined])
        db_session.flush()

        guests = {g.email: g for g in party.guests}
        guests["yes@x.com"].user_id = registered.id
        guests["no@x.com"].user_id = declined.id
        db_session.add_all(
            [
                RSVP(guest_id=guests["yes@x.com"].id, status=RSVPStatus.YES.value),
                RSVP(guest_id=guests["no@x.com"].id, status=RSVPStatus.NO.value),
                RSVP(guest_id=guests["anon@x.com"].id, status=RSVPStatus.YES.value),
            ]
        )
        db_session.commit()
        return party

    def test_queues_for_attending_registered_guests(self, db_session, make_party):
        party = self._party_with_answers(
            db_session, make_party, allow_photo_sharing=True, photo_sharing_paid=True
        )
        service = NotificationService(db_session, RecordingEmailService())

        created = service.schedule_photo_sharing_notifications(party.id, now=NOW)

        assert [n.email for n in created] == ["yes@x.com"]
        expected_send = (party.event_datetime + timedelta(days=1)).replace(
            hour=10, minute=0, second=0, microsecond=0
        )
        assert created[0].scheduled_at == expected_send
        assert created[0].status == EmailNotificationStatus.PENDING.value

        # Running again does not queue a second copy
        assert service.schedule_photo_sharing_notifications(party.id, now=NOW) == []
        assert db_session.query(EmailNotification).count() == 1

    def test_requires_paid_photo_sharing(self, db_session, make_party):
        party = self._party_with_answers(
            db_session, make_party, allow_photo_sharing=True, photo_sharing_paid=False
        )

        created = NotificationService(db_session).schedule_photo_sharing_notifications(
            party.id, now=NOW
        )

        assert created == []


class TestBirthdayReminders:
    def test_queues_reminder_three_weeks_out(self, db_session, host):
        db_session.add_all(
            [
                Child(name="Soon", birth_date=date(2019, 6, 22), user_id=host.id),
                Child(name="Later", birth_date=date(2019, 9, 1), user_id=host.id),
            ]
        )
        db_session.commit()
        service = NotificationService(db_session)

        created = service.schedule_birthday_reminders(now=NOW)

        assert len(created) == 1
        assert created[0].email == host.email
        assert "Soon" in created[0].subject
        assert created[0].scheduled_at == NOW

        # Once per year
        assert service.schedule_birthday_reminders(now=NOW + timedelta(days=1)) == []


class TestProcessPendingEmails:
    def test_sends_due_emails_only(self, db_session, host):
        due = queue_email(db_session, host, NOW - timedelta(minutes=5))
        later = queue_email(db_session, host, NOW + timedelta(hours=1))
        email_service = RecordingEmailService()

        processed = NotificationService(db_session, email_service).process_pending_emails(
            now=NOW
        )

        assert processed == 1
        db_session.refresh(due)
        db_session.refresh(later)
        assert due.status == EmailNotificationStatus.SENT.value
        assert due.sent_at == NOW
        assert due.attempts == 1
        assert later.status == EmailNotificationStatus.PENDING.value

    def test_gives_up_after_three_attempts(self, db_session, host):
        notification = queue_email(
            db_session, host, NOW - timedelta(minutes=5), email="broken@x.com"
        )
        email_service = RecordingEmailService(fail_for={"broken@x.com"})
        service = NotificationService(db_session, email_service)

        for expected_attempts in (1, 2):
            assert service.process_pending_emails(now=NOW) == 1
            db_session.refresh(notification)
            assert notification.attempts == expected_attempts
            assert notification.status == EmailNotificationStatus.PENDING.value

        assert service.process_pending_emails(now=NOW) == 1
        db_session.refresh(notification)
        assert notification.attempts == 3
        assert notification.status == EmailNotificationStatus.FAILED.value
        assert "mailbox unavailable" in notification.error

        assert service.process_pending_emails(now=NOW) == 0
        assert len(email_service.attempts) == 3
