"""
Tests for error notices, validation error summaries and email delivery logging.
"""
import pytest
from loguru import logger
from pydantic import ValidationError

from error_handling import (
    CatalogError,
    StorageError,
    describe_validation_error,
    error_notice,
    handle_errors,
    log_email_delivery,
)
from models.schemas import BookingRequest


def test_error_notice_uses_user_message():
    notice = error_notice(StorageError("disk full", bucket="package-images"))

    assert notice.variant == "destructive"
    assert notice.description == "disk full"


def test_error_notice_hides_unexpected_errors():
    notice = error_notice(RuntimeError("secret stack detail"), title="Oops")

    assert notice.title == "Oops"
    assert "secret" not in notice.description


def test_handle_errors_returns_notice_for_handled_errors():
    @handle_errors(title="Error", description="Failed to load travel packages")
    def load():
        raise CatalogError("connection refused", table="packages")

    notice = load()

    assert notice.is_error
    assert notice.description == "Failed to load travel packages"


def test_handle_errors_passes_through_results_and_other_errors():
    @handle_errors()
    def ok():
        return 42

    @handle_errors()
    def broken():
        raise KeyError("boom")

    assert ok() == 42
    with pytest.raises(KeyError):
        broken()


def test_describe_validation_error(package_payload):
    package_payload["customerEmail"] = "not-an-email"
    del package_payload["customerName"]

    with pytest.raises(ValidationError) as exc_info:
        BookingRequest.model_validate(package_payload)

    summary = describe_validation_error(exc_info.value)
    assert "customerName: Field required" in summary
    assert "customerEmail: value is not a valid email address" in summary


def test_email_delivery_logged_under_email_category():
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="INFO")
    try:
        log_email_delivery("alice@example.com", "Booking Request Confirmation", True, 0.25, message_id="abc123")
        log_email_delivery("alice@example.com", "Booking Request Confirmation", False, 0.5, error="status 401")
    finally:
        logger.remove(sink_id)

    sent, failed = records
    assert sent["extra"]["category"] == "EMAIL"
    assert sent["level"].name == "INFO"
    assert "EMAIL SENT" in sent["message"] and "id=abc123" in sent["message"]
    assert failed["level"].name == "WARNING"
    assert "error=status 401" in failed["message"]
