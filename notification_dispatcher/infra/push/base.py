"""Transport protocol and typed errors for push delivery."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Protocol


class PushErrorCode(StrEnum):
    """Classified push transport failures."""

    INVALID_TOKEN = "invalid-token"
    TOKEN_NOT_REGISTERED = "token-not-registered"
    QUOTA_EXCEEDED = "quota-exceeded"
    UNAUTHENTICATED = "unauthenticated"
    UNAVAILABLE = "unavailable"
    NOT_CONFIGURED = "not-configured"
    UNKNOWN = "unknown"


# Codes meaning the device token is dead and should be forgotten
TOKEN_ERROR_CODES = frozenset({PushErrorCode.INVALID_TOKEN, PushErrorCode.TOKEN_NOT_REGISTERED})


class PushTransportError(Exception):
    """Raised by a push transport when a message cannot be delivered."""

    def __init__(self, code: PushErrorCode, message: str, status_code: int | None = None) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"{code}: {message}")

    @property
    def is_token_error(self) -> bool:
        return self.code in TOKEN_ERROR_CODES


class PushTransport(Protocol):
    """Sends one structured push message addressed to a device token."""

    async def send(self, message: dict[str, Any]) -> str:
        """Send a message and return the provider's message id.

        Raises:
            PushTransportError: If the provider rejects or cannot accept the message.
        """
        ...
