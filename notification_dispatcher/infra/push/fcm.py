"""Firebase Cloud Messaging HTTP v1 client."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Self

import httpx
from google.auth import exceptions as google_auth_exceptions

from .base import PushErrorCode, PushTransportError
from .credentials import ServiceAccountTokenSource, StaticAccessToken

if TYPE_CHECKING:
    from types import TracebackType

    from notification_dispatcher.core.settings.push import PushSettings

    from .credentials import AccessTokenSource

logger = logging.getLogger(__name__)

_FCM_ERROR_TYPE = "type.googleapis.com/google.firebase.fcm.v1.FcmError"


class FcmPushClient:
    """Push transport backed by the FCM HTTP v1 ``messages:send`` endpoint.

    Handles:
    - Bearer authentication from an ``AccessTokenSource`` (service-account
      credentials are refreshed before expiry, and once more on a 401)
    - Mapping FCM error payloads onto ``PushErrorCode``
    - Timeouts and connection failures (reported as ``unavailable``)

    The client owns its ``httpx.AsyncClient`` unless one is injected, and
    should be closed via ``aclose()`` or ``async with``.
    """

    def __init__(
        self,
        project_id: str | None,
        credentials: AccessTokenSource | str | None,
        *,
        base_url: str = "https://fcm.googleapis.com/v1",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if isinstance(credentials, str):
            credentials = StaticAccessToken(credentials)
        self._credentials = credentials
        self.project_id = project_id or (credentials.project_id if credentials else None)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, settings: PushSettings, client: httpx.AsyncClient | None = None) -> Self:
        credentials: AccessTokenSource | None = None
        if settings.enabled:
            if settings.service_account_json is not None:
                credentials = ServiceAccountTokenSource.from_info(
                    settings.service_account_json.get_secret_value(),
                )
            elif settings.service_account_file is not None:
                credentials = ServiceAccountTokenSource.from_file(settings.service_account_file)
            elif settings.access_token is not None:
                credentials = StaticAccessToken(settings.access_token.get_secret_value())
        return cls(
            settings.project_id if settings.enabled else None,
            credentials,
            base_url=settings.base_url,
            timeout=settings.timeout,
            client=client,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.project_id and self._credentials)

    @property
    def send_url(self) -> str:
        return f"{self.base_url}/projects/{self.project_id}/messages:send"

    async def send(self, message: dict[str, Any]) -> str:
        """Send one message and return the FCM message name.

        Raises:
            PushTransportError: On any non-2xx response or transport failure.
        """
        if not self.is_configured:
            raise PushTransportError(PushErrorCode.NOT_CONFIGURED, "Push transport is not configured")

        start_time = time.time()
        response = await self._post(message, await self._token())
        if response.status_code == 401:
            # Token revoked or expired early; mint a fresh one and try once more
            logger.info("FCM rejected access token, refreshing")
            response = await self._post(message, await self._token(force_refresh=True))

        response_time_ms = int((time.time() - start_time) * 1000)

        if response.is_success:
            message_id = str(response.json().get("name", ""))
            logger.debug(
                "Push message accepted",
                extra={"message_id": message_id, "response_time_ms": response_time_ms},
            )
            return message_id

        error = classify_error(response)
        logger.warning(
            "Push message rejected",
            extra={
                "status_code": response.status_code,
                "error_code": str(error.code),
                "response_time_ms": response_time_ms,
            },
        )
        raise error

    async def _token(self, *, force_refresh: bool = False) -> str:
        if self._credentials is None:
            raise PushTransportError(PushErrorCode.NOT_CONFIGURED, "Push transport has no credentials")
        try:
            return await self._credentials.get_token(force_refresh=force_refresh)
        except google_auth_exceptions.RefreshError as exc:
            logger.error("FCM access token refresh was rejected", extra={"error": str(exc)})
            raise PushTransportError(PushErrorCode.UNAUTHENTICATED, str(exc)) from exc
        except google_auth_exceptions.TransportError as exc:
            logger.warning("FCM access token refresh failed", extra={"error": str(exc)})
            raise PushTransportError(PushErrorCode.UNAVAILABLE, str(exc)) from exc

    async def _post(self, message: dict[str, Any], token: str) -> httpx.Response:
        try:
            return await self._client.post(
                self.send_url,
                json={"message": message},
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            logger.warning("FCM request timed out", extra={"timeout_seconds": self.timeout})
            raise PushTransportError(
                PushErrorCode.UNAVAILABLE, f"Request timeout after {self.timeout}s",
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("FCM request failed", extra={"error": str(exc)})
            raise PushTransportError(PushErrorCode.UNAVAILABLE, str(exc)) from exc


    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def classify_error(response: httpx.Response) -> PushTransportError:
    """Map an FCM error response onto a ``PushTransportError``.

    FCM reports errors as ``{"error": {"status": ..., "message": ...,
    "details": [{"@type": "...FcmError", "errorCode": ...}]}}``; the
    ``errorCode`` detail is more specific than ``status`` when present.
    """
    try:
        body = response.json()
    except ValueError:
        body = {}
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        error = {}

    status = str(error.get("status", ""))
    message = str(error.get("message") or response.reason_phrase or f"HTTP {response.status_code}")
    fcm_code = next(
        (
            str(detail.get("errorCode", ""))
            for detail in error.get("details", [])
            if isinstance(detail, dict) and detail.get("@type") == _FCM_ERROR_TYPE
        ),
        "",
    )

    if fcm_code == "UNREGISTERED" or status == "NOT_FOUND":
        code = PushErrorCode.TOKEN_NOT_REGISTERED
    elif "INVALID_ARGUMENT" in (fcm_code, status) and "registration token" in message.lower():
        code = PushErrorCode.INVALID_TOKEN
    elif fcm_code != "SENDER_ID_MISMATCH" and (
        response.status_code in (401, 403) or status in ("UNAUTHENTICATED", "PERMISSION_DENIED")
    ):
        code = PushErrorCode.UNAUTHENTICATED
    elif response.status_code == 429 or "QUOTA_EXCEEDED" in (fcm_code, status):
        code = PushErrorCode.QUOTA_EXCEEDED
    elif response.status_code >= 500 or fcm_code in ("UNAVAILABLE", "INTERNAL"):
        code = PushErrorCode.UNAVAILABLE
    else:
        code = PushErrorCode.UNKNOWN

    return PushTransportError(code, message, status_code=response.status_code)
