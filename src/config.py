"""
Configuration module for the travel agency site backend.

Loads environment variables (and an optional .env file) and provides
settings for email delivery, the catalog database, file storage and the
booking endpoint used by the client.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        sendgrid_api_key: SendGrid API key used for booking emails
        agency_email: Fixed inbox that receives booking notifications
        database_url: Catalog database connection string
        admin_emails: Accounts allowed into the admin console
    """

    # Email delivery
    sendgrid_api_key: Optional[str] = Field(
        default=None,
        alias="SENDGRID_API_KEY",
        description="SendGrid API key for booking emails"
    )

    mail_from_address: str = Field(
        default="onboarding@strakotoutravel.com",
        alias="MAIL_FROM_ADDRESS",
        description="Sender address for outgoing email"
    )

    mail_from_name: str = Field(
        default="Strakotou Travel",
        alias="MAIL_FROM_NAME",
        description="Sender display name for outgoing email"
    )

    # Agency
    agency_name: str = Field(
        default="Strakotou Travel and Tours",
        alias="AGENCY_NAME",
        description="Agency name used in email templates"
    )

    agency_email: str = Field(
        default="estravel@cytanet.com.cy",
        alias="AGENCY_EMAIL",
        description="Inbox that receives booking notifications"
    )

    # Catalog database
    database_url: str = Field(
        default="sqlite:///./travel_catalog.db",
        alias="DATABASE_URL",
        description="Catalog database connection string"
    )

    # File storage
    storage_root: str = Field(
        default="uploads",
        alias="STORAGE_ROOT",
        description="Directory holding uploaded images and PDFs"
    )

    storage_public_url: str = Field(
        default="http://localhost:8000/files",
        alias="STORAGE_PUBLIC_URL",
        description="Base URL that serves uploaded files"
    )

    # Admin access
    admin_emails: str = Field(
        default="",
        alias="ADMIN_EMAILS",
        description="Comma separated list of admin account emails"
    )

    # Booking client
    booking_endpoint_url: str = Field(
        default="http://localhost:8000/send-booking-email",
        alias="BOOKING_ENDPOINT_URL",
        description="URL of the booking notification endpoint"
    )

    backend_api_key: Optional[str] = Field(
        default=None,
        alias="BACKEND_API_KEY",
        description="Public API key sent with endpoint calls"
    )

    request_timeout: float = Field(
        default=15.0,
        alias="REQUEST_TIMEOUT",
        description="Timeout in seconds for endpoint calls"
    )

    # Runtime
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")

    @property
    def admin_email_list(self) -> List[str]:
        """Admin emails, normalised to lower case."""
        return [
            email.strip().lower()
            for email in self.admin_emails.split(",")
            if email.strip()
        ]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"
        populate_by_name = True


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the global settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call reloads the environment."""
    global _settings
    _settings = None
