"""
Custom Exception Classes for the travel agency site backend.

This module defines exception classes for different error categories:
- Booking errors (malformed payloads, client submission failures)
- Notification errors (email delivery)
- Catalog, storage and access errors for the admin console

Each exception includes context for logging and user-facing reporting.
"""

from typing import Optional, Any, Dict, List


class TravelSiteError(Exception):
    """Base exception for all travel site errors."""

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = True
    ):
        """
        Initialize travel site error.

        Args:
            message: Technical error message for logging
            user_message: User-friendly message for notices
            context: Additional context for logging
            recoverable: Whether the user can retry the operation
        """
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message
        self.context = context or {}
        self.recoverable = recoverable


# ============================================================================
# Booking Errors
# ============================================================================

class BookingPayloadError(TravelSiteError):
    """
    Raised when a booking request payload cannot be parsed.

    Examples:
    - Body is not JSON
    - Unknown booking type
    - Missing customer name or email
    - bookingDetails does not match the selected type
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        **kwargs
    ):
        """
        Initialize booking payload error.

        Args:
            message: Reason the payload was rejected
            errors: Field level validation errors
            **kwargs: Additional context
        """
        context = {
            "errors": errors or [],
            **kwargs
        }
        super().__init__(
            message,
            user_message="Please check your booking details and try again.",
            context=context,
            recoverable=True
        )
        self.errors = errors or []


class BookingSubmissionError(TravelSiteError):
    """Raised by the client when the booking endpoint call fails."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
        **kwargs
    ):
        context = {
            "status_code": status_code,
            "original_error": str(original_error) if original_error else None,
            **kwargs
        }
        super().__init__(
            message,
            user_message="Failed to send booking request. Please try again.",
            context=context,
            recoverable=True
        )
        self.status_code = status_code
        self.original_error = original_error


# ============================================================================
# Notification Errors
# ============================================================================

class NotificationError(TravelSiteError):
    """
    Raised when a notification cannot be delivered.

    Examples:
    - Email provider rejects the message
    - Provider unreachable
    - Invalid API key
    """

    def __init__(
        self,
        message: str,
        notification_type: str = "email",
        recipient: Optional[str] = None,
        original_error: Optional[Exception] = None,
        **kwargs
    ):
        """
        Initialize notification error.

        Args:
            message: Error message
            notification_type: Channel that failed
            recipient: Recipient address
            original_error: Original provider exception
            **kwargs: Additional context
        """
        context = {
            "notification_type": notification_type,
            "recipient": recipient,
            "original_error": str(original_error) if original_error else None,
            **kwargs
        }
        super().__init__(message, context=context, recoverable=True)
        self.notification_type = notification_type
        self.recipient = recipient
        self.original_error = original_error


class EmailDeliveryError(NotificationError):
    """Raised when email delivery fails."""

    def __init__(self, message: str, email: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            notification_type="email",
            recipient=email,
            **kwargs
        )


# ============================================================================
# Catalog, Storage and Access Errors
# ============================================================================

class CatalogError(TravelSiteError):
    """
    Raised when a catalog fetch or mutation fails.

    Examples:
    - Database unreachable
    - Row not found on update/delete
    - Constraint violation
    """

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
        **kwargs
    ):
        context = {
            "table": table,
            "operation": operation,
            "original_error": str(original_error) if original_error else None,
            **kwargs
        }
        super().__init__(message, context=context, recoverable=True)
        self.table = table
        self.operation = operation
        self.original_error = original_error


class StorageError(TravelSiteError):
    """Raised when a file cannot be stored or removed."""

    def __init__(
        self,
        message: str,
        bucket: Optional[str] = None,
        filename: Optional[str] = None,
        original_error: Optional[Exception] = None,
        **kwargs
    ):
        context = {
            "bucket": bucket,
            "filename": filename,
            "original_error": str(original_error) if original_error else None,
            **kwargs
        }
        super().__init__(message, context=context, recoverable=True)
        self.bucket = bucket
        self.filename = filename
        self.original_error = original_error


class AuthorizationError(TravelSiteError):
    """Raised when a session is not allowed into the admin console."""

    def __init__(self, message: str = "Admin access required", email: Optional[str] = None):
        super().__init__(
            message,
            user_message="You need an admin account to access this page.",
            context={"email": email},
            recoverable=False
        )
        self.email = email


class ConfigurationError(TravelSiteError):
    """Raised when required configuration is missing."""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(message, context={"setting": setting}, recoverable=False)
        self.setting = setting
