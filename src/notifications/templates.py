"""
HTML email templates for booking requests.

Two emails are produced for every booking request:
- the agency notification, listing the customer and the offering details
- the customer confirmation, a fixed thank-you note echoing the offering

All customer-supplied text is HTML-escaped before it is placed in a body.
Missing optional details render as "N/A" so the layout never changes shape.
"""
import html
from dataclasses import dataclass
from typing import List, Optional, Tuple

from models.schemas import (
    BookingRequest,
    DEFAULT_CURRENCY,
    PackageDetails,
    TicketDetails,
)


NOT_AVAILABLE = "N/A"

ACCENT_COLOR = "#007bff"


@dataclass
class RenderedEmail:
    """Subject and HTML body of a rendered email."""
    subject: str
    html: str


def format_price(price: float) -> str:
    """Render a price without a trailing '.0' for whole amounts."""
    if float(price).is_integer():
        return str(int(price))
    return f"{price:.2f}"


def _display(value) -> str:
    """Escaped display text for a detail value, or N/A when absent."""
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, str):
        if not value.strip():
            return NOT_AVAILABLE
        return html.escape(value)
    return html.escape(str(value))


def _subject_text(text: str) -> str:
    """Collapse whitespace so subjects stay on a single header line."""
    return " ".join(text.split())


def _ticket_subject_identity(details: TicketDetails) -> str:
    return f"{details.origin} to {details.destination}"


def package_detail_lines(details: PackageDetails) -> List[Tuple[str, str]]:
    return [
        ("Package", _display(details.title)),
        ("Price", f"${format_price(details.price)}"),
        ("Duration", _display(details.duration)),
        ("Location", _display(details.location)),
        ("Max Guests", _display(details.max_guests)),
    ]


def ticket_detail_lines(details: TicketDetails) -> List[Tuple[str, str]]:
    currency = details.currency or DEFAULT_CURRENCY
    flight_class = details.flight_class.label if details.flight_class else None
    departure = details.departure_date.isoformat() if details.departure_date else None

    lines = [
        ("Route", f"{html.escape(details.origin)} → {html.escape(details.destination)}"),
        ("Airline", _display(details.airline)),
        ("Price", f"{format_price(details.price)} {html.escape(currency)}"),
        ("Class", _display(flight_class)),
        ("Departure", _display(departure)),
    ]
    # Return line only exists for round trips
    if details.return_date is not None:
        lines.append(("Return", details.return_date.isoformat()))
    lines.append(("Available Seats", _display(details.available_seats)))
    return lines


def detail_lines(request: BookingRequest) -> List[Tuple[str, str]]:
    """
    Ordered (label, value) pairs describing the booked offering.

    Args:
        request: Validated booking request

    Returns:
        Label/value pairs in display order; values are already HTML-safe
    """
    details = request.offering_details
    if isinstance(details, PackageDetails):
        return package_detail_lines(details)
    return ticket_detail_lines(details)


def _list_items(lines: List[Tuple[str, str]]) -> str:
    return "\n".join(
        f"        <li><strong>{label}:</strong> {value}</li>" for label, value in lines
    )


def render_details_block(request: BookingRequest) -> str:
    """Render the offering details section shared by the agency email."""
    heading = "Package Details" if request.is_package else "Flight Details"
    return (
        f"<h3>{heading}:</h3>\n"
        f"<ul>\n{_list_items(detail_lines(request))}\n</ul>"
    )


def render_customer_block(request: BookingRequest) -> str:
    lines = [
        ("Name", html.escape(request.customer_name)),
        ("Email", html.escape(request.customer_email)),
    ]
    if request.customer_phone:
        lines.append(("Phone", html.escape(request.customer_phone)))
    return f"<h3>Customer Information:</h3>\n<ul>\n{_list_items(lines)}\n</ul>"


def render_message_block(message: Optional[str]) -> str:
    if not message:
        return ""
    return (
        "<h3>Customer Message:</h3>\n"
        f'<p style="background-color: #f8f9fa; padding: 15px; '
        f'border-left: 4px solid {ACCENT_COLOR}; margin: 20px 0;">\n'
        f"  {html.escape(message)}\n"
        "</p>"
    )


def agency_subject(request: BookingRequest) -> str:
    details = request.offering_details
    if isinstance(details, PackageDetails):
        return _subject_text(f"New Travel Package Booking Request - {details.title}")
    return _subject_text(
        f"New Air Ticket Booking Request - {_ticket_subject_identity(details)}"
    )


def confirmation_subject(request: BookingRequest) -> str:
    details = request.offering_details
    if isinstance(details, PackageDetails):
        identity = details.title
    else:
        identity = _ticket_subject_identity(details)
    return _subject_text(f"Booking Request Confirmation - {identity}")


def render_agency_email(request: BookingRequest, agency_name: str) -> RenderedEmail:
    """
    Render the notification sent to the agency inbox.

    The body contains the customer information, the offering details and,
    when given, the customer's message.

    Args:
        request: Validated booking request
        agency_name: Agency name used in the footer

    Returns:
        RenderedEmail with subject and HTML body
    """
    offering_label = "Travel Package" if request.is_package else "Air Ticket"

    body = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333; border-bottom: 2px solid {ACCENT_COLOR}; padding-bottom: 10px;">
    New {offering_label} Booking Request
  </h2>

  {render_customer_block(request)}

  {render_details_block(request)}

  {render_message_block(request.message)}

  <hr style="margin: 30px 0;">
  <p style="color: #666; font-size: 14px;">
    This booking request was submitted from your {html.escape(agency_name)} website.
    Please contact the customer to confirm availability and complete the booking.
  </p>
</div>
"""
    return RenderedEmail(subject=agency_subject(request), html=body)


def render_customer_confirmation(
    request: BookingRequest,
    agency_name: str,
    agency_email: str
) -> RenderedEmail:
    """
    Render the thank-you email sent to the customer.

    Args:
        request: Validated booking request
        agency_name: Agency name for the greeting and signature
        agency_email: Contact address shown to the customer

    Returns:
        RenderedEmail with subject and HTML body
    """
    offering_label = "travel package" if request.is_package else "air ticket"
    agency = html.escape(agency_name)

    body = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333; border-bottom: 2px solid {ACCENT_COLOR}; padding-bottom: 10px;">
    Thank you for your booking request!
  </h2>

  <p>Dear {html.escape(request.customer_name)},</p>

  <p>We have received your {offering_label} booking request for:</p>
  <div style="background-color: #f8f9fa; padding: 15px; border-left: 4px solid {ACCENT_COLOR}; margin: 20px 0;">
    <strong>{html.escape(request.offering_identity)}</strong>
  </div>

  <p>Our team will review your request and contact you shortly to confirm availability and discuss the next steps.</p>

  <p>If you have any immediate questions, please don't hesitate to contact us at:</p>
  <ul>
    <li>Email: {html.escape(agency_email)}</li>
  </ul>

  <p>Thank you for choosing {agency}!</p>

  <p>Best regards,<br>
  The {agency} Team</p>
</div>
"""
    return RenderedEmail(subject=confirmation_subject(request), html=body)
