"""
Centralized logging configuration for the travel site backend.

This module configures loguru for structured logging with different
levels and formats for development vs production.
"""
import sys
from pathlib import Path
from typing import Optional
from loguru import logger


def configure_logging(
    log_level: str = "INFO",
    log_to_file: bool = True,
    log_dir: str = "logs",
    rotation: str = "100 MB",
    retention: str = "30 days",
    format_type: str = "detailed"
) -> None:
    """
    Configure loguru logging for the application.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to files in addition to console
        log_dir: Directory for log files
        rotation: When to rotate log files (e.g., "100 MB", "1 day")
        retention: How long to keep old log files
        format_type: Format style ("simple", "detailed")
    """
    logger.remove()

    if format_type == "simple":
        format_string = "<level>{level: <8}</level> | <level>{message}</level>"
    else:  # detailed
        format_string = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )

    logger.add(
        sys.stderr,
        format=format_string,
        level=log_level,
        colorize=True,
        backtrace=True,
        diagnose=False
    )

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # General log file (all levels)
        logger.add(
            log_path / "travel_site_{time:YYYY-MM-DD}.log",
            format=format_string,
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=False
        )

        # Error log file (ERROR and CRITICAL only)
        logger.add(
            log_path / "errors_{time:YYYY-MM-DD}.log",
            format=format_string,
            level="ERROR",
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=False
        )

        # Booking requests audit trail
        logger.add(
            log_path / "bookings_{time:YYYY-MM-DD}.log",
            format=format_string,
            level="INFO",
            rotation="1 day",
            retention="1 year",
            compression="zip",
            filter=lambda record: "BOOKING" in record["extra"].get("category", "")
        )

        # Outbound email deliveries
        logger.add(
            log_path / "email_{time:YYYY-MM-DD}.log",
            format=format_string,
            level="INFO",
            rotation="1 day",
            retention=retention,
            compression="zip",
            filter=lambda record: record["extra"].get("category") == "EMAIL"
        )

    logger.info(
        f"Logging configured: level={log_level}, "
        f"file_logging={log_to_file}, "
        f"format={format_type}"
    )


def log_booking_event(
    event_type: str,
    customer_email: Optional[str] = None,
    offering: Optional[str] = None,
    details: Optional[dict] = None
) -> None:
    """
    Log a booking-request event for the audit trail.

    Args:
        event_type: Type of event (e.g., "RECEIVED", "NOTIFIED", "FAILED")
        customer_email: Customer who submitted the request
        offering: Package title or ticket route
        details: Additional event details
    """
    details = details or {}

    logger.bind(category="BOOKING").info(
        f"BOOKING {event_type} | "
        f"customer={customer_email} | "
        f"offering={offering} | "
        f"details={details}"
    )


def log_email_delivery(
    recipient: str,
    subject: str,
    success: bool,
    duration: float,
    message_id: Optional[str] = None,
    error: Optional[str] = None
) -> None:
    """
    Log one outbound email send with its timing.

    Args:
        recipient: Address (or comma separated addresses) the email went to
        subject: Email subject
        success: Whether the provider accepted the message
        duration: Time spent in the provider call, in seconds
        message_id: Provider message id, when returned
        error: Failure detail for unsuccessful sends
    """
    level = "INFO" if success else "WARNING"
    outcome = f"id={message_id}" if success else f"error={error}"

    logger.bind(category="EMAIL").log(
        level,
        f"EMAIL {'SENT' if success else 'FAILED'} | "
        f"to={recipient} | "
        f"subject={subject} | "
        f"duration={duration:.3f}s | "
        f"{outcome}"
    )


def log_error_with_context(
    error: Exception,
    context: dict,
    severity: str = "ERROR"
) -> None:
    """
    Log an error with full context information.

    Args:
        error: Exception that occurred
        context: Context dictionary with relevant information
        severity: Log severity (ERROR, WARNING, CRITICAL)
    """
    logger.bind(category="ERROR", **context).opt(exception=error).log(
        severity,
        f"Error occurred: {type(error).__name__}: {str(error)}"
    )


class LogContext:
    """
    Context manager for adding context to all logs within a block.

    Example:
        with LogContext(booking_kind="package", customer="alice@example.com"):
            logger.info("Sending agency notification")
    """

    def __init__(self, **context):
        self.context = context
        self.token = None

    def __enter__(self):
        """Enter context - bind context to logger."""
        self.token = logger.contextualize(**self.context)
        self.token.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context - unbind context."""
        if self.token:
            self.token.__exit__(exc_type, exc_val, exc_tb)


def init_logging(environment: str = "development", log_level: Optional[str] = None) -> None:
    """
    Initialize logging with environment-specific settings.

    Args:
        environment: Environment name ("development", "production", "test")
        log_level: Overrides the environment's default level
    """
    if environment == "production":
        configure_logging(
            log_level=log_level or "INFO",
            log_to_file=True,
            format_type="detailed",
            rotation="100 MB",
            retention="90 days"
        )
    elif environment == "test":
        configure_logging(
            log_level=log_level or "WARNING",
            log_to_file=False,
            format_type="simple"
        )
    else:  # development
        configure_logging(
            log_level=log_level or "DEBUG",
            log_to_file=True,
            format_type="detailed",
            rotation="50 MB",
            retention="7 days"
        )

    logger.info(f"Logging initialized for {environment} environment")
