"""
Pytest configuration and shared fixtures.
"""
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from config import Settings
from error_handling.exceptions import EmailDeliveryError
from models.database import Base
from notifications.email_service import EmailMessage
from services.auth_service import UserSession
from services.catalog_service import SqlCatalogStore
from services.storage_service import LocalFileStorage


AGENCY_EMAIL = "bookings@agency-example.com"


class FakeEmailSender:
    """
    EmailSender double that records every message it is asked to send.

    Args:
        fail_on: 1-based index of the send that should fail, if any
    """

    def __init__(self, fail_on: Optional[int] = None):
        self.fail_on = fail_on
        self.attempts = 0
        self.sent: List[EmailMessage] = []

    def send(self, message: EmailMessage) -> Optional[str]:
        self.attempts += 1
        if self.attempts == self.fail_on:
            raise EmailDeliveryError("Email delivery failed: mailbox unavailable", email=message.to[0])
        self.sent.append(message)
        return f"msg-{self.attempts}"


@pytest.fixture(scope="function")
def settings() -> Settings:
    """
    Settings with a fixed agency inbox and no external services.
    """
    return Settings(
        SENDGRID_API_KEY="SG.test-key",
        AGENCY_NAME="Strakotou Travel and Tours",
        AGENCY_EMAIL=AGENCY_EMAIL,
        MAIL_FROM_ADDRESS="onboarding@agency-example.com",
        MAIL_FROM_NAME="Strakotou Travel",
        ENVIRONMENT="test",
    )


@pytest.fixture(scope="function")
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture(scope="function")
def package_payload() -> dict:
    """
    Booking request body for a travel package, as posted by the site.
    """
    return {
        "type": "package",
        "customerName": "Alice",
        "customerEmail": "alice@example.com",
        "customerPhone": "+357 99 123456",
        "message": "Two adults, flexible dates.",
        "bookingDetails": {
            "title": "Mountain Adventure Escape",
            "price": 2499,
            "duration": "7 days",
            "location": "Swiss Alps",
            "maxGuests": 12,
        },
    }


@pytest.fixture(scope="function")
def ticket_payload() -> dict:
    """
    Booking request body for a round-trip air ticket.
    """
    return {
        "type": "ticket",
        "customerName": "Bob",
        "customerEmail": "bob@example.com",
        "bookingDetails": {
            "origin": "Larnaca",
            "destination": "Athens",
            "price": 149.5,
            "currency": "EUR",
            "departureDate": "2025-06-12",
            "returnDate": "2025-06-19",
            "airline": "Aegean Airlines",
            "flightClass": "economy",
            "availableSeats": 24,
        },
    }


@pytest.fixture(scope="function")
def db_engine():
    """
    Create an in-memory SQLite engine with all catalog tables.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_scope(db_engine):
    """
    Transactional session scope bound to the test engine.
    """
    SessionLocal = sessionmaker(bind=db_engine, autocommit=False, autoflush=False, expire_on_commit=False)

    @contextmanager
    def scope() -> Generator[Session, None, None]:
        session = SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return scope


@pytest.fixture(scope="function")
def catalog_store(session_scope) -> SqlCatalogStore:
    return SqlCatalogStore(session_scope)


@pytest.fixture(scope="function")
def file_storage(tmp_path) -> LocalFileStorage:
    return LocalFileStorage(tmp_path / "uploads", "http://files.example.com/")


@pytest.fixture(scope="function")
def admin_session() -> UserSession:
    return UserSession(user_id="admin-1", email="owner@example.com", is_admin=True)
