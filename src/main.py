"""
Main entry point for the travel agency booking API.

Configures logging and serves the booking notification endpoint with uvicorn.
"""
import sys

import uvicorn
from loguru import logger

from api.app import create_app
from config import get_settings
from error_handling.logging_config import init_logging


def main():
    """
    Main entry point for the booking API server.
    """
    settings = get_settings()
    init_logging(settings.environment, settings.log_level)

    logger.info("=" * 80)
    logger.info(f"{settings.agency_name} - Booking API")
    logger.info("=" * 80)

    if not settings.sendgrid_api_key:
        logger.warning("SENDGRID_API_KEY is not set; booking requests will fail until it is configured")

    try:
        uvicorn.run(
            create_app(settings),
            host=settings.api_host,
            port=settings.api_port,
            log_level=settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        logger.info("Server interrupted by user")
        return 130
    finally:
        logger.info("Booking API shutting down...")

    return 0


if __name__ == "__main__":
    sys.exit(main())
