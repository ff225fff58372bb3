"""
Centralized error handling utilities for the travel site backend.

This module provides utilities for:
- Error logging with context
- Turning recoverable errors into user-facing notices
- Readable summaries of validation failures
"""
import functools
from typing import Optional, Callable, Tuple, Type

from pydantic import ValidationError

from models.schemas import Notice
from .exceptions import TravelSiteError, CatalogError, StorageError
from .logging_config import log_error_with_context


GENERIC_ERROR_DESCRIPTION = "Something went wrong. Please try again."


def describe_validation_error(error: ValidationError) -> str:
    """Flatten pydantic errors into 'field: message' pairs."""
    parts = []
    for err in error.errors(include_url=False):
        location = ".".join(str(part) for part in err["loc"])
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "; ".join(parts)


def log_error(error: Exception, operation: Optional[str] = None, **context) -> None:
    """
    Log an error with the context attached to travel site exceptions.

    Args:
        error: Exception that occurred
        operation: Name of the failed operation
        **context: Additional context
    """
    error_context = {"operation": operation, **context}
    if isinstance(error, TravelSiteError):
        error_context.update(error.context)
        severity = "WARNING" if error.recoverable else "ERROR"
    else:
        severity = "ERROR"

    log_error_with_context(error, error_context, severity=severity)


def error_notice(
    error: Exception,
    title: str = "Error",
    description: Optional[str] = None
) -> Notice:
    """
    Build a destructive notice for an error.

    Args:
        error: Exception to report
        title: Notice title
        description: Overrides the error's user message

    Returns:
        Notice with variant "destructive"
    """
    if description is None:
        if isinstance(error, TravelSiteError):
            description = error.user_message
        else:
            description = GENERIC_ERROR_DESCRIPTION
    return Notice(title=title, description=description, variant="destructive")


def handle_errors(
    title: str = "Error",
    description: Optional[str] = None,
    exceptions: Tuple[Type[Exception], ...] = (CatalogError, StorageError)
):
    """
    Decorator that reports recoverable failures as a notice instead of raising.

    The wrapped function keeps its own return value on success. When one of
    ``exceptions`` is raised, the error is logged and a destructive Notice is
    returned in its place.

    Args:
        title: Notice title on failure
        description: Notice description on failure (defaults to the error's user message)
        exceptions: Exception types to handle

    Example:
        @handle_errors(title="Error", description="Failed to delete package")
        def delete_package(self, package_id):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except exceptions as e:
                log_error(e, operation=func.__name__)
                return error_notice(e, title=title, description=description)

        return wrapper
    return decorator
