"""Delivery of password reset tokens.

Email dispatch is owned by an external service. ``LoggingResetNotifier`` is
the built-in implementation: it writes the reset link to the structured log,
which is enough for development and for deployments where a log shipper
forwards the event to the mailer.
"""

from datetime import datetime
from urllib.parse import urlencode

from authcore.core.logging import get_logger

logger = get_logger(__name__)


class NotificationError(Exception):
    """Raised when a reset token cannot be delivered."""


class LoggingResetNotifier:
    """Reset notifier that emits the reset link as a log event."""

    def __init__(self, reset_url: str) -> None:
        """Initialize the notifier.

        Args:
            reset_url: Base URL of the reset page; the token is appended as
                the ``token`` query parameter.
        """
        self.reset_url = reset_url

    def build_reset_link(self, token: str) -> str:
        separator = "&" if "?" in self.reset_url else "?"
        return f"{self.reset_url}{separator}{urlencode({'token': token})}"

    async def send_reset_token(self, email: str, token: str, expires_at: datetime) -> None:
        logger.info(
            "Password reset link issued",
            email=email,
            reset_link=self.build_reset_link(token),
            expires_at=expires_at.isoformat(),
        )
