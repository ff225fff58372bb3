"""
Pydantic models for data validation and serialization.

Booking requests arrive in the camelCase wire format used by the site
(``customerName``, ``bookingDetails``, ...); catalog entities mirror the
rows of the catalog database.
"""
from datetime import date, datetime
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


DEFAULT_CURRENCY = "USD"


def _blank_to_none(v):
    """Treat empty and whitespace-only strings as absent."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


class BookingKind(str, Enum):
    """The two kinds of offering a customer can book."""

    PACKAGE = "package"
    TICKET = "ticket"


class FlightClass(str, Enum):
    """Cabin class of an air ticket."""

    ECONOMY = "economy"
    PREMIUM_ECONOMY = "premium_economy"
    BUSINESS = "business"
    FIRST = "first"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class WireModel(BaseModel):
    """Base for models exchanged with the site in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ============================================================================
# Booking Request
# ============================================================================

class PackageDetails(WireModel):
    """Snapshot of a travel package embedded in a booking request."""

    kind: Literal["package"] = "package"
    title: str = Field(..., max_length=255, description="Package title")
    price: float = Field(..., ge=0, description="Price in the site's base currency")
    duration: Optional[str] = Field(None, description="Free-text duration, e.g. '7 days'")
    location: Optional[str] = Field(None, description="Free-text destination")
    max_guests: Optional[int] = Field(None, ge=0, description="Maximum number of guests")

    @field_validator("duration", "location", "max_guests", mode="before")
    @classmethod
    def blank_optional_fields(cls, v):
        return _blank_to_none(v)


class TicketDetails(WireModel):
    """Snapshot of an air ticket offer embedded in a booking request."""

    kind: Literal["ticket"] = "ticket"
    origin: str = Field(..., min_length=1, description="Departure city or airport")
    destination: str = Field(..., min_length=1, description="Arrival city or airport")
    price: float = Field(..., ge=0)
    currency: Optional[str] = Field(None, max_length=3, description="ISO currency code")
    departure_date: Optional[date] = None
    return_date: Optional[date] = None
    airline: Optional[str] = None
    flight_class: Optional[FlightClass] = None
    available_seats: Optional[int] = Field(None, ge=0)
    title: Optional[str] = None

    @field_validator(
        "currency",
        "departure_date",
        "return_date",
        "airline",
        "flight_class",
        "available_seats",
        "title",
        mode="before",
    )
    @classmethod
    def blank_optional_fields(cls, v):
        return _blank_to_none(v)

    @property
    def route(self) -> str:
        return f"{self.origin} → {self.destination}"


OfferingDetails = Union[PackageDetails, TicketDetails]


class BookingRequest(WireModel):
    """
    Normalized booking request sent from the site to the notification service.

    ``type`` selects which shape ``bookingDetails`` must have; the details are
    validated as exactly that variant.
    """

    kind: BookingKind = Field(..., alias="type", description="package or ticket")
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: Optional[str] = Field(None, max_length=50)
    message: Optional[str] = Field(None, description="Free-text message from the customer")
    offering_details: OfferingDetails = Field(
        ...,
        alias="bookingDetails",
        discriminator="kind",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "package",
                "customerName": "Alice",
                "customerEmail": "alice@example.com",
                "bookingDetails": {
                    "title": "Mountain Adventure Escape",
                    "price": 2499,
                    "duration": "7 days",
                    "location": "Swiss Alps",
                },
            }
        }
    )

    @model_validator(mode="before")
    @classmethod
    def tag_offering_details(cls, data):
        """Copy the top-level ``type`` into the details so the variant is selected by it."""
        if not isinstance(data, dict):
            return data

        kind = data.get("type", data.get("kind"))
        if isinstance(kind, BookingKind):
            kind = kind.value

        for key in ("bookingDetails", "offering_details"):
            details = data.get(key)
            if isinstance(details, dict) and kind is not None:
                data = {**data, key: {**details, "kind": kind}}
        return data

    @field_validator("customer_name")
    @classmethod
    def validate_customer_name(cls, v: str) -> str:
        """Validate customer name is not empty after stripping whitespace."""
        if not v.strip():
            raise ValueError("Customer name cannot be empty")
        return v.strip()

    @field_validator("customer_phone", "message", mode="before")
    @classmethod
    def blank_optional_fields(cls, v):
        return _blank_to_none(v)

    @model_validator(mode="after")
    def check_variant_matches_kind(self) -> "BookingRequest":
        if self.offering_details.kind != self.kind.value:
            raise ValueError(
                f"bookingDetails describe a {self.offering_details.kind}, "
                f"not a {self.kind.value}"
            )
        return self

    @property
    def is_package(self) -> bool:
        return self.kind is BookingKind.PACKAGE

    @property
    def offering_identity(self) -> str:
        """Package title, or the route of a ticket."""
        details = self.offering_details
        if isinstance(details, PackageDetails):
            return details.title
        return details.route

    def to_payload(self) -> dict:
        """Serialize to the JSON body expected by the booking endpoint."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude={"offering_details": {"kind"}},
        )


class BookingResult(BaseModel):
    """Aggregate outcome of a booking notification request."""

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None

    def to_response(self) -> dict:
        return self.model_dump(exclude_none=True)


# ============================================================================
# Catalog Entities
# ============================================================================

class PackageStatus(str, Enum):
    ACTIVE = "active"
    DRAFT = "draft"
    INACTIVE = "inactive"


class TicketStatus(str, Enum):
    ACTIVE = "active"
    DRAFT = "draft"
    SOLD_OUT = "sold_out"


class NewsStatus(str, Enum):
    PUBLISHED = "published"
    DRAFT = "draft"


class Package(BaseModel):
    """
    Pydantic model for travel packages read from the catalog.
    """
    id: int
    title: str
    description: Optional[str] = None
    price: float
    duration: Optional[str] = None
    location: Optional[str] = None
    max_guests: Optional[int] = None
    rating: Optional[float] = None
    featured: bool = False
    images: List[str] = Field(default_factory=list)
    pdfs: List[str] = Field(default_factory=list)
    status: PackageStatus = PackageStatus.ACTIVE
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Mountain Adventure Escape",
                "description": "Experience breathtaking mountain views and thrilling adventures.",
                "price": 2499,
                "duration": "7 days",
                "location": "Swiss Alps",
                "max_guests": 12,
                "rating": 4.9,
                "featured": True,
                "images": ["1f0c...-mountain1.jpg"],
                "pdfs": ["a93e...-mountain-itinerary.pdf"],
                "status": "active",
                "created_at": "2024-01-15T10:30:00"
            }
        }
    )


class PackageCreate(BaseModel):
    """
    Pydantic model for creating travel packages from the admin console.
    """
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", description="Long description shown on the site")
    price: float = Field(..., ge=0)
    duration: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=255)
    max_guests: int = Field(..., ge=1)
    rating: Optional[float] = Field(None, ge=0, le=5, description="Average guest rating out of 5")
    featured: bool = Field(False, description="Shown in the featured selection")
    status: PackageStatus = PackageStatus.ACTIVE


class PackageUpdate(BaseModel):
    """
    Pydantic model for partial package updates.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    duration: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    max_guests: Optional[int] = Field(None, ge=1)
    rating: Optional[float] = Field(None, ge=0, le=5)
    featured: Optional[bool] = None
    status: Optional[PackageStatus] = None


class Ticket(BaseModel):
    """
    Pydantic model for air ticket offers read from the catalog.
    """
    id: int
    origin: str
    destination: str
    price: float
    currency: str = DEFAULT_CURRENCY
    departure_date: Optional[date] = None
    return_date: Optional[date] = None
    airline: Optional[str] = None
    flight_class: Optional[FlightClass] = None
    available_seats: Optional[int] = None
    description: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    status: TicketStatus = TicketStatus.ACTIVE
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @property
    def route(self) -> str:
        return f"{self.origin} → {self.destination}"


class TicketCreate(BaseModel):
    """
    Pydantic model for creating air ticket offers.
    """
    origin: str = Field(..., min_length=1, max_length=100)
    destination: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., ge=0)
    currency: str = Field(DEFAULT_CURRENCY, min_length=3, max_length=3)
    departure_date: date
    return_date: Optional[date] = None
    airline: str = Field(..., min_length=1, max_length=100)
    flight_class: FlightClass = FlightClass.ECONOMY
    available_seats: int = Field(..., ge=0)
    description: Optional[str] = None
    status: TicketStatus = TicketStatus.ACTIVE

    @field_validator("currency")
    @classmethod
    def uppercase_currency(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def validate_return_after_departure(self) -> "TicketCreate":
        """A return flight cannot leave before the outbound flight."""
        if self.return_date is not None and self.return_date < self.departure_date:
            raise ValueError("Return date cannot be before departure date")
        return self


class TicketUpdate(BaseModel):
    """
    Pydantic model for partial ticket updates.
    """
    origin: Optional[str] = Field(None, min_length=1, max_length=100)
    destination: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    departure_date: Optional[date] = None
    return_date: Optional[date] = None
    airline: Optional[str] = Field(None, min_length=1, max_length=100)
    flight_class: Optional[FlightClass] = None
    available_seats: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    status: Optional[TicketStatus] = None


class NewsItem(BaseModel):
    """
    Pydantic model for news articles read from the catalog.
    """
    id: int
    title: str
    excerpt: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    status: NewsStatus = NewsStatus.PUBLISHED
    published_on: Optional[date] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NewsCreate(BaseModel):
    """
    Pydantic model for publishing news articles.
    """
    title: str = Field(..., min_length=1, max_length=255)
    excerpt: str = Field("", max_length=500)
    content: str = ""
    category: str = Field("", max_length=100)
    status: NewsStatus = NewsStatus.PUBLISHED
    published_on: date = Field(default_factory=date.today)


class NewsUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    excerpt: Optional[str] = Field(None, max_length=500)
    content: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    status: Optional[NewsStatus] = None
    published_on: Optional[date] = None


# ============================================================================
# User Feedback
# ============================================================================

class Notice(BaseModel):
    """Transient user-facing message (the site's toast)."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"
