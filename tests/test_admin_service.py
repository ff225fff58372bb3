"""
Tests for the admin console and admin access gating.

Tests cover:
- Only admin sessions may open the console
- Create, update and delete for packages, tickets and news
- File uploads sorted into buckets and cleaned up on failure
- Failures reported as destructive notices
"""
from datetime import date
from pathlib import Path

import pytest
from unittest.mock import Mock

import models.database
from config import Settings
from error_handling.exceptions import AuthorizationError, CatalogError, StorageError
from models.schemas import (
    NewsCreate,
    NewsStatus,
    PackageCreate,
    PackageStatus,
    PackageUpdate,
    TicketCreate,
    TicketUpdate,
)
from services.admin_service import AdminConsole, open_admin_console
from services.auth_service import AuthService, UserSession, require_admin
from services.catalog_service import SqlCatalogStore
from services.storage_service import UploadedFile


JPEG = UploadedFile("cover.jpg", "image/jpeg", b"\xff\xd8jpeg")
PDF = UploadedFile("itinerary.pdf", "application/pdf", b"%PDF-1.4")


def stored_files(file_storage, bucket):
    bucket_dir = Path(file_storage.root) / bucket
    if not bucket_dir.exists():
        return []
    return sorted(p.name for p in bucket_dir.iterdir())


@pytest.fixture
def console(admin_session, catalog_store, file_storage):
    return AdminConsole(admin_session, catalog_store, file_storage)


@pytest.fixture
def package_data():
    return PackageCreate(
        title="Mountain Adventure Escape",
        description="Alpine lodges and guided hikes.",
        price=1299,
        duration="7 days",
        location="Swiss Alps",
        max_guests=8,
    )


@pytest.fixture
def ticket_data():
    return TicketCreate(
        origin="Larnaca",
        destination="Athens",
        price=149,
        currency="EUR",
        departure_date=date(2025, 6, 12),
        airline="Aegean Airlines",
        available_seats=24,
    )


class TestAccess:
    def test_auth_service_grants_admin_by_email(self):
        auth = AuthService(["Owner@Example.com", " "])

        assert auth.session_for("u1", "owner@example.com").is_admin is True
        assert auth.session_for("u2", "guest@example.com").is_admin is False

    def test_auth_service_from_settings(self):
        auth = AuthService.from_settings(Settings(ADMIN_EMAILS="Owner@Example.com"))

        assert auth.session_for("u1", "owner@example.com").is_admin is True

    def test_require_admin(self, admin_session):
        assert require_admin(admin_session) is admin_session

        with pytest.raises(AuthorizationError):
            require_admin(None)

    def test_non_admin_cannot_open_console(self, catalog_store, file_storage):
        guest = UserSession(user_id="u2", email="guest@example.com")

        with pytest.raises(AuthorizationError) as exc_info:
            AdminConsole(guest, catalog_store, file_storage)

        assert exc_info.value.recoverable is False


class TestPackages:
    def test_create_with_files(self, console, file_storage, package_data):
        notice = console.create_package(package_data, files=[JPEG, PDF])

        assert notice.title == "Package created"
        assert not notice.is_error
        package = console.packages[0]
        assert package.title == "Mountain Adventure Escape"
        assert len(package.images) == 1 and package.images[0].endswith("-cover.jpg")
        assert len(package.pdfs) == 1 and package.pdfs[0].endswith("-itinerary.pdf")
        assert stored_files(file_storage, "package-images") == package.images
        assert stored_files(file_storage, "package-pdfs") == package.pdfs

    def test_update_appends_new_images(self, console, package_data):
        console.create_package(package_data, files=[JPEG])
        package_id = console.packages[0].id

        notice = console.update_package(
            package_id,
            PackageUpdate(price=1499),
            files=[UploadedFile("beach.png", "image/png", b"png")],
        )

        assert notice.title == "Package updated"
        package = console.packages[0]
        assert package.price == 1499
        assert len(package.images) == 2
        assert package.images[1].endswith("-beach.png")

    def test_delete_removes_row_and_files(self, console, file_storage, package_data):
        console.create_package(package_data, files=[JPEG, PDF])
        package_id = console.packages[0].id

        notice = console.delete_package(package_id)

        assert notice.title == "Package deleted"
        assert console.packages == []
        assert stored_files(file_storage, "package-images") == []
        assert stored_files(file_storage, "package-pdfs") == []

    def test_delete_missing_package_is_error_notice(self, console):
        notice = console.delete_package(404)

        assert notice.is_error
        assert notice.description == "Failed to delete package"

    def test_unsupported_file_rejected_before_upload(self, console, file_storage, package_data):
        notice = console.create_package(
            package_data,
            files=[JPEG, UploadedFile("notes.docx", "application/msword", b"doc")],
        )

        assert notice.is_error
        assert notice.description == "Failed to create package"
        assert console.packages == []
        assert stored_files(file_storage, "package-images") == []

    def test_failed_insert_removes_uploaded_files(self, admin_session, file_storage, package_data):
        store = Mock()
        store.insert.side_effect = CatalogError("insert failed", table="packages")
        console = AdminConsole(admin_session, store, file_storage)

        notice = console.create_package(package_data, files=[JPEG])

        assert notice.is_error
        assert stored_files(file_storage, "package-images") == []


class TestTickets:
    def test_ticket_lifecycle(self, console, ticket_data):
        assert console.create_ticket(ticket_data).title == "Ticket created"
        ticket = console.tickets[0]
        assert ticket.route == "Larnaca → Athens"
        assert ticket.currency == "EUR"

        notice = console.update_ticket(ticket.id, TicketUpdate(available_seats=0, status="sold_out"))
        assert notice.title == "Ticket updated"
        assert console.tickets[0].available_seats == 0
        assert console.tickets[0].status.value == "sold_out"

        assert console.delete_ticket(ticket.id).title == "Ticket deleted"
        assert console.tickets == []

    def test_pdf_not_accepted_for_tickets(self, console, ticket_data):
        notice = console.create_ticket(ticket_data, files=[PDF])

        assert notice.is_error
        assert console.tickets == []


class TestNews:
    def test_publish_and_draft(self, console):
        published = console.create_news(NewsCreate(title="Summer deals"))
        draft = console.create_news(NewsCreate(title="Winter preview", status=NewsStatus.DRAFT))

        assert published.title == "News published"
        assert draft.title == "News saved"
        assert [n.title for n in console.news] == ["Winter preview", "Summer deals"]

    def test_delete_news(self, console):
        console.create_news(NewsCreate(title="Summer deals"), files=[JPEG])

        assert console.delete_news(console.news[0].id).title == "News deleted"
        assert console.news == []


def test_load_lists_every_status(console, catalog_store, package_data):
    console.create_package(package_data.model_copy(update={"status": PackageStatus.DRAFT}))
    console.create_news(NewsCreate(title="Hidden", status=NewsStatus.DRAFT))

    fresh = AdminConsole(console.session, catalog_store, console.storage)
    assert fresh.load() is None

    assert len(fresh.packages) == 1
    assert len(fresh.news) == 1
    assert fresh.tickets == []


def test_load_reports_unavailable_database(admin_session, file_storage, monkeypatch):
    monkeypatch.setattr(models.database, "SessionLocal", None)
    console = AdminConsole(admin_session, SqlCatalogStore(), file_storage)

    notice = console.load()

    assert notice.is_error
    assert notice.description == "Failed to load dashboard data"


def test_delete_succeeds_when_file_cleanup_fails(admin_session, catalog_store, file_storage, package_data):
    console = AdminConsole(admin_session, catalog_store, file_storage)
    console.create_package(package_data, files=[JPEG])
    package_id = console.packages[0].id
    console.storage = Mock(wraps=file_storage)
    console.storage.remove.side_effect = StorageError("permission denied", bucket="package-images")

    notice = console.delete_package(package_id)

    assert notice.title == "Package deleted"
    assert console.packages == []
    assert catalog_store.fetch("packages") == []


def test_featured_flag_and_rating_round_trip(console, package_data):
    console.create_package(package_data.model_copy(update={"featured": True, "rating": 4.9}))
    package_id = console.packages[0].id

    console.update_package(package_id, PackageUpdate(featured=False))

    package = console.packages[0]
    assert package.featured is False
    assert package.rating == 4.9


def test_open_admin_console_uses_configured_admins(tmp_path):
    settings = Settings(ADMIN_EMAILS="Owner@Example.com, ops@example.com", STORAGE_ROOT=str(tmp_path))

    console = open_admin_console("u1", "ops@example.com", settings)
    assert console.session.is_admin
    assert console.storage.root == tmp_path

    with pytest.raises(AuthorizationError):
        open_admin_console("u2", "guest@example.com", settings)
