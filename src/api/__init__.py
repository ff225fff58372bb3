"""
HTTP API - the booking notification endpoint.
"""
from .app import CORS_HEADERS, create_app, get_notification_service

__all__ = [
    "CORS_HEADERS",
    "create_app",
    "get_notification_service",
]
