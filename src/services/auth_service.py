"""
Session and admin gating for the admin console.

The current session is resolved once and passed explicitly to whatever
needs it; nothing reads the logged-in user from module state.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from loguru import logger

from config import Settings
from error_handling.exceptions import AuthorizationError


@dataclass(frozen=True)
class UserSession:
    """The signed-in user as seen by the site."""
    user_id: str
    email: str
    is_admin: bool = False


class AuthService:
    """
    Resolves sessions and decides who may use the admin console.

    Admin rights are granted to the configured admin email addresses.
    """

    def __init__(self, admin_emails: Iterable[str]):
        self.admin_emails = {email.strip().lower() for email in admin_emails if email.strip()}

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthService":
        """Admin rights for the accounts listed in ADMIN_EMAILS."""
        return cls(settings.admin_email_list)

    def session_for(self, user_id: str, email: str) -> UserSession:
        """
        Build the session for an authenticated user.

        Args:
            user_id: Identity from the authentication provider
            email: The user's email address

        Returns:
            UserSession with the admin flag set
        """
        is_admin = email.strip().lower() in self.admin_emails
        logger.debug(f"Session resolved | user={user_id} | admin={is_admin}")
        return UserSession(user_id=user_id, email=email, is_admin=is_admin)


def require_admin(session: Optional[UserSession]) -> UserSession:
    """
    Ensure the session belongs to an admin.

    Raises:
        AuthorizationError: For anonymous or non-admin sessions
    """
    if session is None:
        raise AuthorizationError("Sign in required for the admin console")
    if not session.is_admin:
        logger.warning(f"Admin access denied | user={session.user_id} | email={session.email}")
        raise AuthorizationError(email=session.email)
    return session
