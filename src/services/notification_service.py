"""
Booking notification service.

Receives one booking request, renders the agency notification and the
customer confirmation, and sends them in that order. The two sends are
sequential: if the agency email fails the customer is never emailed and the
whole request is reported as failed.
"""
from typing import Any, Optional

from loguru import logger
from pydantic import ValidationError

from config import Settings, get_settings
from error_handling.exceptions import BookingPayloadError
from error_handling.handlers import describe_validation_error, log_error
from error_handling.logging_config import LogContext, log_booking_event
from models.schemas import BookingRequest, BookingResult
from notifications.email_service import EmailMessage, EmailSender
from notifications.templates import render_agency_email, render_customer_confirmation


SUCCESS_MESSAGE = "Booking request sent successfully"


class BookingNotificationService:
    """
    Service that turns a booking request into two emails.

    Example:
        service = BookingNotificationService(SendGridEmailSender())
        result = service.handle({
            "type": "package",
            "customerName": "Alice",
            "customerEmail": "alice@example.com",
            "bookingDetails": {"title": "Mountain Adventure Escape", "price": 2499},
        })
        assert result.success
    """

    def __init__(self, email_sender: EmailSender, settings: Optional[Settings] = None):
        """
        Initialize the notification service.

        Args:
            email_sender: Delivery collaborator used for both emails
            settings: Agency and sender configuration (defaults to global settings)
        """
        settings = settings or get_settings()
        self.email_sender = email_sender
        self.agency_name = settings.agency_name
        self.agency_email = settings.agency_email
        self.from_address = settings.mail_from_address
        self.from_name = settings.mail_from_name

    @staticmethod
    def parse_booking_request(payload: Any) -> BookingRequest:
        """
        Validate a decoded JSON body as a booking request.

        Args:
            payload: Decoded request body

        Returns:
            Validated BookingRequest

        Raises:
            BookingPayloadError: If the body does not describe a valid booking request
        """
        if not isinstance(payload, dict):
            raise BookingPayloadError(
                "Invalid booking request: body must be a JSON object",
                received=type(payload).__name__
            )

        try:
            return BookingRequest.model_validate(payload)
        except ValidationError as e:
            raise BookingPayloadError(
                f"Invalid booking request: {describe_validation_error(e)}",
                errors=e.errors(include_url=False, include_context=False)
            ) from e

    def _message(self, to: str, subject: str, html: str, reply_to: Optional[str]) -> EmailMessage:
        return EmailMessage(
            from_address=self.from_address,
            from_name=self.from_name,
            to=[to],
            subject=subject,
            html=html,
            reply_to=reply_to,
        )

    def send_booking_notifications(self, request: BookingRequest) -> None:
        """
        Send the agency notification, then the customer confirmation.

        Args:
            request: Validated booking request

        Raises:
            EmailDeliveryError: If either send fails; a failed agency send
                means the confirmation is never attempted
        """
        logger.info(
            f"Processing booking request | type={request.kind.value} | "
            f"customer={request.customer_name} | email={request.customer_email}"
        )

        agency_email = render_agency_email(request, self.agency_name)
        self.email_sender.send(
            self._message(
                to=self.agency_email,
                subject=agency_email.subject,
                html=agency_email.html,
                reply_to=request.customer_email,
            )
        )
        logger.info(f"Agency notification email sent | to={self.agency_email}")

        confirmation = render_customer_confirmation(request, self.agency_name, self.agency_email)
        self.email_sender.send(
            self._message(
                to=request.customer_email,
                subject=confirmation.subject,
                html=confirmation.html,
                reply_to=self.agency_email,
            )
        )
        logger.info(f"Customer confirmation email sent | to={request.customer_email}")

    def handle(self, payload: Any) -> BookingResult:
        """
        Parse a booking request body and send both emails.

        Any failure (invalid payload or a failed send) is reported as a single
        unsuccessful result carrying the error message.

        Args:
            payload: Decoded request body

        Returns:
            BookingResult describing the aggregate outcome
        """
        logger.info("Booking notification request received")

        try:
            request = self.parse_booking_request(payload)
            with LogContext(booking_kind=request.kind.value):
                self.send_booking_notifications(request)
        except Exception as e:
            log_error(e, operation="send_booking_notifications")
            log_booking_event("FAILED", details={"error": str(e)})
            return BookingResult(success=False, error=str(e))

        log_booking_event(
            "NOTIFIED",
            customer_email=request.customer_email,
            offering=request.offering_identity,
            details={"type": request.kind.value},
        )
        return BookingResult(success=True, message=SUCCESS_MESSAGE)
