"""
Error handling module for the travel site backend.

This module provides error handling infrastructure including:
- Custom exception hierarchy for booking, notification, catalog and access errors
- Centralized handlers that turn recoverable errors into user-facing notices
- Logging utilities

Main Components:
    - exceptions: Custom exception classes for all error scenarios
    - handlers: Decorators and utilities for error handling
    - logging_config: loguru configuration and audit logging helpers
"""

from .exceptions import (
    # Base exception
    TravelSiteError,

    # Booking errors
    BookingPayloadError,
    BookingSubmissionError,

    # Notification errors
    NotificationError,
    EmailDeliveryError,

    # Catalog, storage and access errors
    CatalogError,
    StorageError,
    AuthorizationError,
    ConfigurationError,
)

from .handlers import (
    describe_validation_error,
    log_error,
    error_notice,
    handle_errors,
)

from .logging_config import (
    configure_logging,
    init_logging,
    log_booking_event,
    log_email_delivery,
    log_error_with_context,
    LogContext,
)

__all__ = [
    "TravelSiteError",
    "BookingPayloadError",
    "BookingSubmissionError",
    "NotificationError",
    "EmailDeliveryError",
    "CatalogError",
    "StorageError",
    "AuthorizationError",
    "ConfigurationError",
    "describe_validation_error",
    "log_error",
    "error_notice",
    "handle_errors",
    "configure_logging",
    "init_logging",
    "log_booking_event",
    "log_email_delivery",
    "log_error_with_context",
    "LogContext",
]
