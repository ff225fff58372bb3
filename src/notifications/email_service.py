"""
Email delivery for booking notifications using SendGrid.

This module provides:
- EmailMessage, the provider-neutral message handed to a sender
- EmailSender, the narrow interface the notification service depends on
- SendGridEmailSender, the production implementation backed by SendGrid

Senders raise EmailDeliveryError when the provider rejects or fails a send;
they never retry on their own.
"""
import time
from dataclasses import dataclass
from typing import List, Optional, Protocol

from loguru import logger
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, Email, To, Content

from config import Settings, get_settings
from error_handling.exceptions import ConfigurationError, EmailDeliveryError
from error_handling.logging_config import log_email_delivery


@dataclass
class EmailMessage:
    """A single outbound email: {from, to, subject, html}."""
    from_address: str
    to: List[str]
    subject: str
    html: str
    from_name: Optional[str] = None
    reply_to: Optional[str] = None


class EmailSender(Protocol):
    """Anything that can deliver an EmailMessage."""

    def send(self, message: EmailMessage) -> Optional[str]:
        """
        Deliver one message.

        Returns:
            Provider message id when available

        Raises:
            EmailDeliveryError: If the provider rejects or fails the send
        """
        ...


def _missing_api_key() -> ConfigurationError:
    return ConfigurationError(
        "SendGrid API key not configured. "
        "Please set SENDGRID_API_KEY environment variable.",
        setting="SENDGRID_API_KEY"
    )


class SendGridEmailSender:
    """
    Email sender that delivers through the SendGrid v3 API.

    Example:
        sender = SendGridEmailSender(api_key="SG.xxx")
        sender.send(EmailMessage(
            from_address="bookings@agency.com",
            to=["customer@example.com"],
            subject="Booking Request Confirmation",
            html="<p>Thank you!</p>",
        ))
    """

    def __init__(self, api_key: Optional[str] = None, client: Optional[SendGridAPIClient] = None):
        """
        Initialize the SendGrid sender.

        Args:
            api_key: SendGrid API key (falls back to SENDGRID_API_KEY setting)
            client: Pre-built SendGrid client, mainly for tests

        Raises:
            ConfigurationError: If no API key is available
        """
        if client is None:
            api_key = api_key or get_settings().sendgrid_api_key
            if not api_key:
                raise _missing_api_key()
            client = SendGridAPIClient(api_key=api_key)

        self.client = client
        logger.info("SendGrid email sender initialized")

    @classmethod
    def from_settings(cls, settings: Settings) -> "SendGridEmailSender":
        """Build a sender from the given settings only, without the global fallback."""
        if not settings.sendgrid_api_key:
            raise _missing_api_key()
        return cls(api_key=settings.sendgrid_api_key)

    def _build_mail(self, message: EmailMessage) -> Mail:
        mail = Mail(
            from_email=Email(message.from_address, message.from_name),
            to_emails=[To(address) for address in message.to],
            subject=message.subject,
            html_content=Content("text/html", message.html)
        )
        if message.reply_to:
            mail.reply_to = Email(message.reply_to)
        return mail

    def send(self, message: EmailMessage) -> Optional[str]:
        """
        Send one message via SendGrid.

        Args:
            message: Message to deliver

        Returns:
            SendGrid message id from the X-Message-Id header, if present

        Raises:
            EmailDeliveryError: If SendGrid rejects the message or cannot be reached
        """
        recipients = ", ".join(message.to)
        logger.debug(f"Sending email via SendGrid | to={recipients} | subject={message.subject}")

        started = time.perf_counter()
        try:
            response = self.client.send(self._build_mail(message))
        except Exception as e:
            # python_http_client errors carry the API response body
            detail = getattr(e, "body", None) or str(e)
            if isinstance(detail, bytes):
                detail = detail.decode("utf-8", errors="replace")
            log_email_delivery(recipients, message.subject, False, time.perf_counter() - started, error=detail)
            raise EmailDeliveryError(
                f"Email delivery failed: {detail}",
                email=recipients,
                original_error=e
            ) from e

        duration = time.perf_counter() - started
        if response.status_code not in (200, 201, 202):
            log_email_delivery(
                recipients, message.subject, False, duration, error=f"status {response.status_code}"
            )
            raise EmailDeliveryError(
                f"SendGrid returned status code {response.status_code}: {response.body}",
                email=recipients,
                status_code=response.status_code
            )

        headers = response.headers or {}
        message_id = headers.get("X-Message-Id")
        log_email_delivery(recipients, message.subject, True, duration, message_id=message_id)
        return message_id
