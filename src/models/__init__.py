"""
Models package - SQLAlchemy ORM models and Pydantic schemas.
"""
from .database import (
    Base,
    TravelPackage,
    AirTicket,
    NewsArticle,
    TABLES,
    init_db,
    create_tables,
    get_db_session,
)

from .schemas import (
    BookingKind,
    FlightClass,
    PackageDetails,
    TicketDetails,
    BookingRequest,
    BookingResult,
    Package,
    PackageCreate,
    PackageUpdate,
    PackageStatus,
    Ticket,
    TicketCreate,
    TicketUpdate,
    TicketStatus,
    NewsItem,
    NewsCreate,
    NewsUpdate,
    NewsStatus,
    Notice,
)

__all__ = [
    # Database models
    "Base",
    "TravelPackage",
    "AirTicket",
    "NewsArticle",
    "TABLES",
    # Database utilities
    "init_db",
    "create_tables",
    "get_db_session",
    # Booking schemas
    "BookingKind",
    "FlightClass",
    "PackageDetails",
    "TicketDetails",
    "BookingRequest",
    "BookingResult",
    # Catalog schemas
    "Package",
    "PackageCreate",
    "PackageUpdate",
    "PackageStatus",
    "Ticket",
    "TicketCreate",
    "TicketUpdate",
    "TicketStatus",
    "NewsItem",
    "NewsCreate",
    "NewsUpdate",
    "NewsStatus",
    "Notice",
]
