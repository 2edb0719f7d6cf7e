"""Outbound services used by the domain layer."""

from authcore.infrastructure.services.reset_notifier import (
    LoggingResetNotifier,
    NotificationError,
)

__all__ = ["LoggingResetNotifier", "NotificationError"]
