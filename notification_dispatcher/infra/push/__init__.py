"""Push delivery transport (Firebase Cloud Messaging)."""

from .base import TOKEN_ERROR_CODES, PushErrorCode, PushTransport, PushTransportError
from .credentials import AccessTokenSource, ServiceAccountTokenSource, StaticAccessToken
from .fcm import FcmPushClient

__all__ = [
    "TOKEN_ERROR_CODES",
    "AccessTokenSource",
    "FcmPushClient",
    "PushErrorCode",
    "PushTransport",
    "PushTransportError",
    "ServiceAccountTokenSource",
    "StaticAccessToken",
]
