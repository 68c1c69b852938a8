"""OAuth2 access tokens for the FCM HTTP v1 API."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Protocol, Self

from google.auth.transport.requests import Request
from google.oauth2 import service_account

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"


class AccessTokenSource(Protocol):
    """Supplies the bearer token sent with every FCM request."""

    project_id: str | None

    async def get_token(self, *, force_refresh: bool = False) -> str: ...


class StaticAccessToken:
    """A pre-issued token; it cannot be refreshed and expires with its issuer's TTL."""

    def __init__(self, token: str, project_id: str | None = None) -> None:
        self._token = token
        self.project_id = project_id

    async def get_token(self, *, force_refresh: bool = False) -> str:
        return self._token


class ServiceAccountTokenSource:
    """Mints and refreshes tokens from Google service-account credentials.

    ``google-auth`` refreshes synchronously over ``requests``, so the refresh
    runs in a worker thread. A lock keeps concurrent senders from refreshing
    the same expired token more than once.
    """

    def __init__(self, credentials: service_account.Credentials) -> None:
        self._credentials = credentials
        self._lock = asyncio.Lock()
        self.project_id: str | None = credentials.project_id

    @classmethod
    def from_info(cls, info: str | dict) -> Self:
        creds_info = json.loads(info) if isinstance(info, str) else info
        return cls(service_account.Credentials.from_service_account_info(creds_info, scopes=[FCM_SCOPE]))

    @classmethod
    def from_file(cls, path: str | Path) -> Self:
        return cls(service_account.Credentials.from_service_account_file(str(path), scopes=[FCM_SCOPE]))

    async def get_token(self, *, force_refresh: bool = False) -> str:
        async with self._lock:
            if force_refresh or not self._credentials.valid:
                logger.debug("Refreshing FCM access token", extra={"forced": force_refresh})
                await asyncio.to_thread(self._credentials.refresh, Request())
            return self._credentials.token
