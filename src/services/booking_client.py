"""
Booking form logic for the public site.

Turns a selected package or ticket plus the customer's contact details into
a BookingRequest, posts it to the booking notification endpoint, and tracks
the form state the booking dialog displays.
"""
import threading
from dataclasses import dataclass
from typing import Optional, Protocol, Union

import requests
from loguru import logger
from pydantic import ValidationError

from config import Settings, get_settings
from error_handling.exceptions import BookingPayloadError, BookingSubmissionError
from error_handling.handlers import describe_validation_error
from models.schemas import (
    BookingKind,
    BookingRequest,
    Notice,
    Package,
    PackageDetails,
    Ticket,
    TicketDetails,
)


Offering = Union[Package, Ticket]

SUCCESS_NOTICE = Notice(
    title="Booking Request Sent!",
    description="We've received your booking request and will contact you shortly.",
)

FAILURE_NOTICE = Notice(
    title="Error",
    description="Failed to send booking request. Please try again.",
    variant="destructive",
)


@dataclass
class BookingFormData:
    """Contact fields as typed into the booking dialog."""
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    message: str = ""


def _optional(value: str) -> Optional[str]:
    """Blank form fields are sent as absent rather than as empty strings."""
    value = value.strip()
    return value or None


def offering_details(offering: Offering) -> Union[PackageDetails, TicketDetails]:
    """Snapshot the fields of a catalog item that go into a booking request."""
    if isinstance(offering, Package):
        return PackageDetails(
            title=offering.title,
            price=offering.price,
            duration=offering.duration,
            location=offering.location,
            max_guests=offering.max_guests,
        )
    return TicketDetails(
        origin=offering.origin,
        destination=offering.destination,
        price=offering.price,
        currency=offering.currency,
        departure_date=offering.departure_date,
        return_date=offering.return_date,
        airline=offering.airline,
        flight_class=offering.flight_class,
        available_seats=offering.available_seats,
    )


def build_booking_request(offering: Offering, form: BookingFormData) -> BookingRequest:
    """
    Normalize a catalog selection and contact details into a BookingRequest.

    Args:
        offering: Selected package or ticket
        form: Contact details from the booking dialog

    Returns:
        Validated BookingRequest

    Raises:
        BookingPayloadError: If required contact fields are missing or invalid
    """
    kind = BookingKind.PACKAGE if isinstance(offering, Package) else BookingKind.TICKET
    try:
        return BookingRequest(
            kind=kind,
            customer_name=form.customer_name,
            customer_email=form.customer_email.strip(),
            customer_phone=_optional(form.customer_phone),
            message=_optional(form.message),
            offering_details=offering_details(offering),
        )
    except ValidationError as e:
        raise BookingPayloadError(
            f"Invalid booking details: {describe_validation_error(e)}",
            errors=e.errors(include_url=False, include_context=False)
        ) from e


class BookingEndpoint(Protocol):
    """Remote booking notification function."""

    def invoke(self, payload: dict) -> dict:
        ...


class HttpBookingEndpoint:
    """
    Calls the booking notification endpoint over HTTP.

    Example:
        endpoint = HttpBookingEndpoint.from_settings(get_settings())
        endpoint.invoke(request.to_payload())
    """

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpBookingEndpoint":
        return cls(
            url=settings.booking_endpoint_url,
            api_key=settings.backend_api_key,
            timeout=settings.request_timeout,
        )

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def invoke(self, payload: dict) -> dict:
        """
        POST the payload and return the decoded response body.

        Raises:
            BookingSubmissionError: On transport errors, non-2xx responses
                or a response reporting success=false
        """
        try:
            response = self.session.post(
                self.url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise BookingSubmissionError(
                f"Booking endpoint unreachable: {e}",
                original_error=e
            ) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if not response.ok or not body.get("success", False):
            error = body.get("error") or response.reason or "unknown error"
            raise BookingSubmissionError(
                f"Booking endpoint returned {response.status_code}: {error}",
                status_code=response.status_code
            )

        return body


class BookingForm:
    """
    State of the booking dialog for one selected offering.

    The form submits at most one request at a time, also across threads. A
    successful submission clears the fields and closes the dialog; a failed
    one keeps everything so the customer can try again.
    """

    def __init__(self, offering: Offering, endpoint: BookingEndpoint):
        self.offering = offering
        self.endpoint = endpoint
        self.data = BookingFormData()
        self.is_open = True
        self.is_submitting = False
        self._submit_lock = threading.Lock()

    @property
    def kind(self) -> BookingKind:
        return BookingKind.PACKAGE if isinstance(self.offering, Package) else BookingKind.TICKET

    @property
    def title(self) -> str:
        if isinstance(self.offering, Package):
            return f"Book {self.offering.title}"
        return f"Book Flight: {self.offering.route}"

    def reset(self) -> None:
        self.data = BookingFormData()

    def close(self) -> None:
        self.is_open = False

    def submit(self) -> Optional[Notice]:
        """
        Send the booking request.

        Returns:
            Notice to show the customer, or None if a submission is already
            in progress
        """
        with self._submit_lock:
            if self.is_submitting:
                logger.warning("Booking submission ignored: a request is already in progress")
                return None

            try:
                request = build_booking_request(self.offering, self.data)
            except BookingPayloadError as e:
                logger.warning(f"Booking form incomplete: {e}")
                return Notice(
                    title="Missing details",
                    description="Please enter your name and a valid email address.",
                    variant="destructive",
                )

            self.is_submitting = True

        try:
            self.endpoint.invoke(request.to_payload())
        except BookingSubmissionError as e:
            logger.error(f"Error sending booking request: {e}")
            return FAILURE_NOTICE
        finally:
            self.is_submitting = False

        logger.info(f"Booking request sent | offering={request.offering_identity}")
        self.reset()
        self.close()
        return SUCCESS_NOTICE


def open_booking_form(offering: Offering, settings: Optional[Settings] = None) -> BookingForm:
    """Open a booking form wired to the configured HTTP endpoint."""
    settings = settings or get_settings()
    return BookingForm(offering, HttpBookingEndpoint.from_settings(settings))
