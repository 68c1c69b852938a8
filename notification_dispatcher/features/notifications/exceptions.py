"""Domain errors raised while dispatching notifications."""

from __future__ import annotations


class NotificationDispatchError(Exception):
    """Base class for notification dispatch failures."""


class RecipientNotFoundError(NotificationDispatchError):
    """The notification's recipient does not exist."""

    def __init__(self, recipient_id: str) -> None:
        self.recipient_id = recipient_id
        super().__init__(f"Recipient not found: {recipient_id}")


class ChannelDeliveryError(NotificationDispatchError):
    """A channel could not hand the notification to its sink.

    Attributes:
        channel: Channel that failed (``push``, ``email``, ``in_app``).
        code: Machine-readable failure code (e.g. ``unavailable``, ``missing-email``).
        token_invalid: Whether the failure was caused by a dead push token.
    """

    def __init__(
        self,
        channel: str,
        message: str,
        *,
        code: str = "unknown",
        token_invalid: bool = False,
    ) -> None:
        self.channel = channel
        self.code = code
        self.token_invalid = token_invalid
        super().__init__(message)


class UnsupportedChannelError(NotificationDispatchError):
    """The notification names a channel this service cannot deliver through."""

    def __init__(self, channel: str) -> None:
        self.channel = channel
        super().__init__(f"Unsupported channel: {channel}")


class StoreError(NotificationDispatchError):
    """A read or write against the notification store failed."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"Store operation '{operation}' failed: {message}")


class InvalidPayloadError(NotificationDispatchError):
    """The stored payload does not match the notification payload schema."""
