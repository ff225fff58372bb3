"""
Services package - Business logic and external integrations.
"""
from .notification_service import BookingNotificationService, SUCCESS_MESSAGE
from .booking_client import (
    BookingEndpoint,
    BookingForm,
    BookingFormData,
    HttpBookingEndpoint,
    build_booking_request,
    open_booking_form,
)
from .catalog_service import CatalogService, CatalogStore, SqlCatalogStore, open_catalog
from .storage_service import FileStorage, LocalFileStorage, UploadedFile
from .auth_service import AuthService, UserSession, require_admin
from .admin_service import AdminConsole, open_admin_console

__all__ = [
    "BookingNotificationService",
    "SUCCESS_MESSAGE",
    "BookingEndpoint",
    "BookingForm",
    "BookingFormData",
    "HttpBookingEndpoint",
    "build_booking_request",
    "open_booking_form",
    "CatalogService",
    "CatalogStore",
    "SqlCatalogStore",
    "open_catalog",
    "FileStorage",
    "LocalFileStorage",
    "UploadedFile",
    "AuthService",
    "UserSession",
    "require_admin",
    "AdminConsole",
    "open_admin_console",
]
