import uuid
from datetime import datetime, timedelta

import pytest

from kidparty.models import RSVP, Guest, User
from kidparty.models.enums import RSVPStatus
from kidparty.schemas.rsvp import RSVPCreate
from kidparty.services.exceptions import PartyNotFoundError, RSVPValidationError
from kidparty.services.rsvp_service import RSVPService

from .fakes import RecordingEmailService


def rsvp_payload(**overrides):
    data = {
        "parent_name": "Alice Parent",
        "child_name": "Ava",
        "email": "Alice@Example.com",
        "status": RSVPStatus.YES,
        "num_children": 1,
        "parent_staying": True,
    }
    data.update(overrides)
    return RSVPCreate(**data)


@pytest.fixture
def upcoming_party(make_party):
    return make_party(datetime.utcnow() + timedelta(days=10))


class TestPartyLookup:
    def test_malformed_token_is_rejected(self, db_session):
        with pytest.raises(RSVPValidationError):
            RSVPService(db_session).get_party_by_token("not-a-token")

    def test_unknown_token_is_not_found(self, db_session):
        with pytest.raises(PartyNotFoundError):
            RSVPService(db_session).get_party_by_token(str(uuid.uuid4()))

    def test_public_view_hides_host_details(self, db_session, upcoming_party):
        view = RSVPService(db_session).get_public_party(upcoming_party.public_rsvp_token)

        assert view["child_name"] == "Mia"
        assert view["location"] == "Funland, 12 Park Road"
        assert "user_id" not in view
        assert "public_rsvp_token" not in view


class TestSubmitRSVP:
    def test_first_answer_creates_guest_and_rsvp(self, db_session, upcoming_party):
        email_service = RecordingEmailService()
        rsvp = RSVPService(db_session, email_service).submit_rsvp(
            upcoming_party.public_rsvp_token, rsvp_payload()
        )

        guest = db_session.query(Guest).filter(Guest.id == rsvp.guest_id).one()
        assert guest.email == "alice@example.com"
        assert guest.party_id == upcoming_party.id
        assert rsvp.status == RSVPStatus.YES.value
        assert sorted(email_service.recipients()) == [
            "alice@example.com",
            "host@example.com",
        ]

    def test_second_answer_overwrites_first(self, db_session, upcoming_party):
        service = RSVPService(db_session, RecordingEmailService())
        token = upcoming_party.public_rsvp_token

        service.submit_rsvp(token, rsvp_payload())
        service.submit_rsvp(
            token,
            rsvp_payload(
                email="alice@example.com",
                status=RSVPStatus.NO,
                num_children=0,
                message="Sorry, we're away",
            ),
        )

        guests = db_session.query(Guest).filter(Guest.party_id == upcoming_party.id).all()
        assert len(guests) == 1
        rsvps = db_session.query(RSVP).all()
        assert len(rsvps) == 1
        assert rsvps[0].status == RSVPStatus.NO.value
        assert rsvps[0].message == "Sorry, we're away"

    def test_invited_guest_is_reused(self, db_session, make_party):
        party = make_party(
            datetime.utcnow() + timedelta(days=10),
            guests=[("alice@example.com", None, None)],
        )

        RSVPService(db_session, RecordingEmailService()).submit_rsvp(
            party.public_rsvp_token, rsvp_payload()
        )

        guests = db_session.query(Guest).filter(Guest.party_id == party.id).all()
        assert len(guests) == 1
        assert guests[0].parent_name == "Alice Parent"
        assert guests[0].rsvp.status == RSVPStatus.YES.value

    def test_registered_user_is_linked(self, db_session, upcoming_party):
        user = User(email="alice@example.com", name="Alice")
        db_session.add(user)
        db_session.commit()

        rsvp = RSVPService(db_session, RecordingEmailService()).submit_rsvp(
            upcoming_party.public_rsvp_token, rsvp_payload()
        )

        assert rsvp.guest.user_id == user.id

    def test_host_cannot_rsvp_to_own_party(self, db_session, upcoming_party):
        with pytest.raises(RSVPValidationError):
            RSVPService(db_session, RecordingEmailService()).submit_rsvp(
                upcoming_party.public_rsvp_token,
                rsvp_payload(email="HOST@example.com"),
            )
        assert db_session.query(Guest).count() == 0

    def test_email_failure_keeps_the_rsvp(self, db_session, upcoming_party):
        email_service = RecordingEmailService(fail_for={"alice@example.com"})

        rsvp = RSVPService(db_session, email_service).submit_rsvp(
            upcoming_party.public_rsvp_token, rsvp_payload()
        )

        assert rsvp.id is not None
        assert email_service.recipients() == ["host@example.com"]
