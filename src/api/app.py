"""
FastAPI application exposing the booking notification endpoint.

The public site posts a booking request to ``/send-booking-email``; the
endpoint emails the agency and then the customer and answers with a single
success or failure body. Every response carries permissive CORS headers so
the browser can call it from any origin.
"""
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from loguru import logger

from config import Settings, get_settings
from error_handling.exceptions import BookingPayloadError, TravelSiteError
from error_handling.handlers import log_error
from models.schemas import BookingResult
from notifications.email_service import SendGridEmailSender
from services.notification_service import BookingNotificationService


BOOKING_PATH = "/send-booking-email"
FILES_PATH = "/files"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def get_notification_service(request: Request) -> BookingNotificationService:
    """
    Build the notification service for one request from the app's settings.

    Raises:
        ConfigurationError: If the SendGrid API key is not configured
    """
    settings = request.app.state.settings
    return BookingNotificationService(SendGridEmailSender.from_settings(settings), settings)


def _result_response(result: BookingResult) -> JSONResponse:
    return JSONResponse(
        content=result.to_response(),
        status_code=200 if result.success else 500,
        headers=CORS_HEADERS,
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Application settings (defaults to global settings)

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()
    app = FastAPI(title=f"{settings.agency_name} Booking API")
    app.state.settings = settings

    @app.exception_handler(TravelSiteError)
    async def travel_site_error_handler(request: Request, exc: TravelSiteError) -> JSONResponse:
        log_error(exc, operation=request.url.path)
        return _result_response(BookingResult(success=False, error=str(exc)))

    @app.options(BOOKING_PATH)
    async def booking_preflight() -> Response:
        return Response(status_code=200, headers=CORS_HEADERS)

    @app.post(BOOKING_PATH)
    async def send_booking_email(
        request: Request,
        service: BookingNotificationService = Depends(get_notification_service),
    ) -> JSONResponse:
        try:
            payload = await request.json()
        except ValueError as e:
            error = BookingPayloadError(f"Invalid JSON body: {e}", original_error=str(e))
            log_error(error, operation="send_booking_email")
            return _result_response(BookingResult(success=False, error=str(error)))

        result = await run_in_threadpool(service.handle, payload)
        logger.info(f"Booking endpoint responded | success={result.success}")
        return _result_response(result)

    # Uploaded catalog images and PDFs, addressed as {STORAGE_PUBLIC_URL}/{bucket}/{path}
    app.mount(FILES_PATH, StaticFiles(directory=settings.storage_root, check_dir=False), name="files")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "environment": settings.environment}

    return app
