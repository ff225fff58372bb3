"""
Unit tests for BookingNotificationService.

Tests cover:
- Exactly two sends per valid request, agency first
- Reply-to addresses and recipients
- Failure of the first send aborts the second
- Malformed bodies produce no sends
- Aggregate success/failure results
"""
import pytest
from unittest.mock import Mock

from error_handling.exceptions import BookingPayloadError, EmailDeliveryError
from services.notification_service import BookingNotificationService, SUCCESS_MESSAGE

from conftest import AGENCY_EMAIL, FakeEmailSender


@pytest.fixture
def service(email_sender, settings):
    return BookingNotificationService(email_sender, settings)


class TestSendOrder:
    def test_two_sends_agency_first(self, service, email_sender, package_payload):
        result = service.handle(package_payload)

        assert result.success is True
        assert result.message == SUCCESS_MESSAGE
        assert len(email_sender.sent) == 2

        agency, customer = email_sender.sent
        assert agency.to == [AGENCY_EMAIL]
        assert customer.to == ["alice@example.com"]

    def test_reply_to_points_at_the_other_party(self, service, email_sender, package_payload):
        service.handle(package_payload)

        agency, customer = email_sender.sent
        assert agency.reply_to == "alice@example.com"
        assert customer.reply_to == AGENCY_EMAIL

    def test_sender_identity_from_settings(self, service, email_sender, ticket_payload):
        service.handle(ticket_payload)

        for message in email_sender.sent:
            assert message.from_address == "onboarding@agency-example.com"
            assert message.from_name == "Strakotou Travel"

    def test_subjects(self, service, email_sender, ticket_payload):
        service.handle(ticket_payload)

        agency, customer = email_sender.sent
        assert agency.subject == "New Air Ticket Booking Request - Larnaca to Athens"
        assert customer.subject == "Booking Request Confirmation - Larnaca to Athens"


class TestFailures:
    def test_agency_failure_skips_customer_email(self, settings, package_payload):
        sender = FakeEmailSender(fail_on=1)
        service = BookingNotificationService(sender, settings)

        result = service.handle(package_payload)

        assert result.success is False
        assert "mailbox unavailable" in result.error
        assert sender.attempts == 1
        assert sender.sent == []

    def test_customer_failure_reported_after_agency_sent(self, settings, package_payload):
        sender = FakeEmailSender(fail_on=2)
        service = BookingNotificationService(sender, settings)

        result = service.handle(package_payload)

        assert result.success is False
        assert result.message is None
        assert [m.to for m in sender.sent] == [[AGENCY_EMAIL]]

    @pytest.mark.parametrize("payload", [
        None,
        [],
        "booking",
        {},
        {"type": "package", "customerName": "Alice"},
    ])
    def test_malformed_body_sends_nothing(self, service, email_sender, payload):
        result = service.handle(payload)

        assert result.success is False
        assert result.error
        assert email_sender.sent == []

    def test_unexpected_sender_error_becomes_failure(self, settings, package_payload):
        sender = Mock()
        sender.send.side_effect = RuntimeError("connection reset")
        service = BookingNotificationService(sender, settings)

        result = service.handle(package_payload)

        assert result.success is False
        assert result.error == "connection reset"
        assert sender.send.call_count == 1


class TestParseBookingRequest:
    def test_non_object_body(self):
        with pytest.raises(BookingPayloadError, match="must be a JSON object"):
            BookingNotificationService.parse_booking_request(["not", "an", "object"])

    def test_validation_errors_are_described(self, package_payload):
        package_payload["customerEmail"] = "nope"

        with pytest.raises(BookingPayloadError) as exc_info:
            BookingNotificationService.parse_booking_request(package_payload)

        assert "customerEmail" in str(exc_info.value)
        assert exc_info.value.errors

    def test_send_booking_notifications_propagates_delivery_errors(self, settings, package_payload):
        sender = FakeEmailSender(fail_on=1)
        service = BookingNotificationService(sender, settings)
        request = service.parse_booking_request(package_payload)

        with pytest.raises(EmailDeliveryError):
            service.send_booking_notifications(request)
