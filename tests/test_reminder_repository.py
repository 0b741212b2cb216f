from datetime import timedelta

from kidparty.models import Reminder
from kidparty.models.enums import ReminderType
from kidparty.services.reminder_repository import SQLAlchemyReminderRepository
from kidparty.services.reminder_service import ReminderService

from .conftest import NOW
from .fakes import RecordingEmailService


def reminder_rows(db_session, party_id):
    db_session.expire_all()
    return {
        r.type: r
        for r in db_session.query(Reminder).filter(Reminder.party_id == party_id).all()
    }


class TestSQLAlchemyReminderRepository:
    def test_find_parties_in_window_is_inclusive(self, db_session, make_party):
        start, end = NOW, NOW + timedelta(days=8)
        at_start = make_party(start)
        at_end = make_party(end)
        make_party(start - timedelta(minutes=1))
        make_party(end + timedelta(minutes=1))

        found = SQLAlchemyReminderRepository(db_session).find_parties_in_window(start, end)

        assert [p.id for p in found] == [at_start.id, at_end.id]

    def test_ensure_reminder_is_idempotent(self, db_session, make_party):
        party = make_party(NOW + timedelta(days=30))
        repository = SQLAlchemyReminderRepository(db_session)

        first = repository.ensure_reminder(party.id, ReminderType.TWO_DAYS)
        second = repository.ensure_reminder(party.id, ReminderType.TWO_DAYS)

        assert first.id == second.id
        assert first.sent_at is None
        assert len(reminder_rows(db_session, party.id)) == 1

    def test_claim_marks_unsent_row_once(self, db_session, make_party):
        party = make_party(
            NOW + timedelta(days=7), reminders=[(ReminderType.SEVEN_DAYS, None)]
        )
        repository = SQLAlchemyReminderRepository(db_session)

        assert repository.claim_reminder(party.id, ReminderType.SEVEN_DAYS, NOW) is True
        assert repository.claim_reminder(party.id, ReminderType.SEVEN_DAYS, NOW) is False

        assert reminder_rows(db_session, party.id)["SEVEN_DAYS"].sent_at == NOW

    def test_claim_does_not_touch_already_sent_row(self, db_session, make_party):
        earlier = NOW - timedelta(hours=1)
        party = make_party(
            NOW + timedelta(days=7), reminders=[(ReminderType.SEVEN_DAYS, earlier)]
        )
        repository = SQLAlchemyReminderRepository(db_session)

        assert repository.claim_reminder(party.id, ReminderType.SEVEN_DAYS, NOW) is False
        assert reminder_rows(db_session, party.id)["SEVEN_DAYS"].sent_at == earlier

    def test_claim_inserts_missing_row(self, db_session, make_party):
        party = make_party(NOW + timedelta(days=2))
        repository = SQLAlchemyReminderRepository(db_session)

        assert repository.claim_reminder(party.id, ReminderType.TWO_DAYS, NOW) is True
        assert repository.claim_reminder(party.id, ReminderType.TWO_DAYS, NOW) is False

        rows = reminder_rows(db_session, party.id)
        assert list(rows) == ["TWO_DAYS"]
        assert rows["TWO_DAYS"].sent_at == NOW


class TestReminderServiceWithDatabase:
    def test_concrete_seven_day_run(self, db_session, make_party):
        party = make_party(
            NOW + timedelta(days=7),
            guests=[("a@x.com", "Alice", "Ava"), ("b@x.com", "Bob", "Ben")],
            reminders=[
                (ReminderType.SEVEN_DAYS, None),
                (ReminderType.TWO_DAYS, None),
                (ReminderType.SAME_DAY, None),
            ],
        )
        email_service = RecordingEmailService()
        service = ReminderService(
            SQLAlchemyReminderRepository(db_session),
            email_service,
            clock=lambda: NOW,
        )

        summary = service.process_reminders()

        assert sorted(email_service.recipients()) == ["a@x.com", "b@x.com"]
        assert summary.emails_sent == 2

        rows = reminder_rows(db_session, party.id)
        assert rows["SEVEN_DAYS"].sent_at == NOW
        assert rows["TWO_DAYS"].sent_at is None
        assert rows["SAME_DAY"].sent_at is None

        email_service.clear_sent_emails()
        again = service.process_reminders()
        assert email_service.sent_emails == []
        assert again.already_sent == 1

    def test_schedule_then_send_through_database(self, db_session, make_party):
        party = make_party(NOW + timedelta(days=30), guests=[("a@x.com", "Alice", "Ava")])
        email_service = RecordingEmailService()
        repository = SQLAlchemyReminderRepository(db_session)

        ReminderService(repository, email_service, clock=lambda: NOW).create_reminder_schedule(
            party.id
        )
        assert set(reminder_rows(db_session, party.id)) == {
            "SEVEN_DAYS",
            "TWO_DAYS",
            "SAME_DAY",
        }

        two_days_before = party.event_datetime - timedelta(days=2)
        ReminderService(
            repository, email_service, clock=lambda: two_days_before
        ).process_reminders()

        rows = reminder_rows(db_session, party.id)
        assert rows["TWO_DAYS"].sent_at == two_days_before
        assert rows["SEVEN_DAYS"].sent_at is None
        assert email_service.sent_emails[0]["subject"] == "Reminder: Mia's Party in 2 days"
