"""
Tests for the SendGrid email sender.
"""
import pytest
from unittest.mock import Mock

from config import reset_settings
from error_handling.exceptions import ConfigurationError, EmailDeliveryError
from notifications.email_service import EmailMessage, SendGridEmailSender


@pytest.fixture
def message():
    return EmailMessage(
        from_address="onboarding@agency-example.com",
        from_name="Strakotou Travel",
        to=["alice@example.com"],
        subject="Booking Request Confirmation - Mountain Adventure Escape",
        html="<p>Thank you!</p>",
        reply_to="bookings@agency-example.com",
    )


def sendgrid_response(status_code=202, headers=None, body=b""):
    response = Mock()
    response.status_code = status_code
    response.headers = headers if headers is not None else {"X-Message-Id": "abc123"}
    response.body = body
    return response


def test_send_builds_mail(message):
    client = Mock()
    client.send.return_value = sendgrid_response()
    sender = SendGridEmailSender(client=client)

    assert sender.send(message) == "abc123"

    mail = client.send.call_args[0][0].get()
    assert mail["from"] == {"email": "onboarding@agency-example.com", "name": "Strakotou Travel"}
    assert mail["subject"] == "Booking Request Confirmation - Mountain Adventure Escape"
    assert mail["personalizations"][0]["to"] == [{"email": "alice@example.com"}]
    assert mail["reply_to"] == {"email": "bookings@agency-example.com"}
    assert mail["content"] == [{"type": "text/html", "value": "<p>Thank you!</p>"}]


def test_provider_exception_wrapped(message):
    client = Mock()
    error = Exception("HTTP Error 401: Unauthorized")
    error.body = b'{"errors":[{"message":"The provided authorization grant is invalid"}]}'
    client.send.side_effect = error
    sender = SendGridEmailSender(client=client)

    with pytest.raises(EmailDeliveryError, match="authorization grant is invalid") as exc_info:
        sender.send(message)

    assert exc_info.value.recipient == "alice@example.com"
    assert exc_info.value.original_error is error


def test_unexpected_status_raises(message):
    client = Mock()
    client.send.return_value = sendgrid_response(status_code=400, body=b"bad request")
    sender = SendGridEmailSender(client=client)

    with pytest.raises(EmailDeliveryError, match="status code 400"):
        sender.send(message)


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("SENDGRID_API_KEY", raising=False)
    reset_settings()
    try:
        with pytest.raises(ConfigurationError) as exc_info:
            SendGridEmailSender()
    finally:
        reset_settings()

    assert exc_info.value.setting == "SENDGRID_API_KEY"


def test_from_settings_does_not_fall_back_to_environment(settings, monkeypatch):
    monkeypatch.setenv("SENDGRID_API_KEY", "SG.global-key")
    reset_settings()
    try:
        with pytest.raises(ConfigurationError):
            SendGridEmailSender.from_settings(settings.model_copy(update={"sendgrid_api_key": None}))
    finally:
        reset_settings()
