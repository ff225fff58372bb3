"""
Notifications package for the travel agency booking workflow.

Provides the booking email templates and email delivery via SendGrid.
"""
from .email_service import EmailMessage, EmailSender, SendGridEmailSender
from .templates import (
    RenderedEmail,
    render_agency_email,
    render_customer_confirmation,
    render_details_block,
    detail_lines,
)

__all__ = [
    "EmailMessage",
    "EmailSender",
    "SendGridEmailSender",
    "RenderedEmail",
    "render_agency_email",
    "render_customer_confirmation",
    "render_details_block",
    "detail_lines",
]
