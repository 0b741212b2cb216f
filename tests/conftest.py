import os

# Must be set before kidparty.database creates its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PUBLIC_BASE_URL", "https://kidparty.test")

import uuid
from datetime import date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kidparty.database import Base, get_db
from kidparty.dependencies import get_current_user, get_email_service
from kidparty.main import app
from kidparty.models import Child, Guest, Party, Reminder, User

from .fakes import RecordingEmailService

NOW = datetime(2025, 6, 1, 12, 0, 0)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # A developer .env must not leak into the tests
    monkeypatch.delenv("CRON_SECRET", raising=False)
    monkeypatch.delenv("SMTP_HOST", raising=False)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def email_service():
    return RecordingEmailService()


@pytest.fixture
def host(db_session):
    user = User(email="host@example.com", name="Hannah Host", supabase_id="sb-host")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def child(db_session, host):
    kid = Child(name="Mia", birth_date=date(2019, 3, 15), user_id=host.id)
    db_session.add(kid)
    db_session.commit()
    db_session.refresh(kid)
    return kid


@pytest.fixture
def make_party(db_session, host, child):
    def _make_party(event_datetime, guests=(), reminders=(), **fields):
        party = Party(
            user_id=host.id,
            child_id=child.id,
            event_datetime=event_datetime,
            location=fields.pop("location", "Funland, 12 Park Road"),
            **fields,
        )
        db_session.add(party)
        db_session.flush()

        for email, parent_name, child_name in guests:
            db_session.add(
                Guest(
                    party_id=party.id,
                    email=email,
                    parent_name=parent_name,
                    child_name=child_name,
                )
            )
        for reminder_type, sent_at in reminders:
            db_session.add(
                Reminder(party_id=party.id, type=reminder_type.value, sent_at=sent_at)
            )

        db_session.commit()
        db_session.refresh(party)
        return party

    return _make_party


@pytest.fixture
def transient_party():
    """Build an unsaved Party graph for the in-memory repository"""
    counter = {"id": 0}

    def _transient_party(event_datetime, guests=(), reminders=(), theme=None, notes=None):
        counter["id"] += 1
        party_id = counter["id"]
        party = Party(
            id=party_id,
            user_id=1,
            child_id=1,
            event_datetime=event_datetime,
            location="Funland, 12 Park Road",
            theme=theme,
            notes=notes,
            public_rsvp_token=str(uuid.uuid4()),
        )
        party.child = Child(id=1, name="Mia", birth_date=date(2019, 3, 15), user_id=1)
        party.guests = [
            Guest(
                id=index + 1,
                party_id=party_id,
                email=email,
                parent_name=parent_name,
                child_name=child_name,
            )
            for index, (email, parent_name, child_name) in enumerate(guests)
        ]
        party.reminders = [
            Reminder(party_id=party_id, type=reminder_type.value, sent_at=sent_at)
            for reminder_type, sent_at in reminders
        ]
        return party

    return _transient_party


@pytest.fixture
def client(db_session, host, email_service):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: host
    app.dependency_overrides[get_email_service] = lambda: email_service

    yield TestClient(app)

    app.dependency_overrides.clear()


