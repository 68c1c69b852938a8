"""HTTP-facing exceptions rendered as RFC 7807 problem details."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any


class AppException(Exception):
    """Base application exception.

    The handlers in ``app.exception_handlers`` turn it into an
    ``application/problem+json`` response.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Client-visible message; never internal error text.
        type: Problem type identifier (e.g. ``dispatch-failed``).
        title: Short summary; defaults to the HTTP reason phrase.
        instance: Occurrence URI; the handler falls back to the request path.
        extra: Additional members merged into the problem body.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or HTTPStatus(status_code).phrase
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)


class ServiceUnavailableException(AppException):
    """A backing service (database, broker) is not available.

    Example:
        raise ServiceUnavailableException(
            detail="Database is not configured",
            type="database-unavailable",
        )
    """

    def __init__(self, detail: str, type: str = "service-unavailable", **kwargs: Any) -> None:
        super().__init__(503, detail, type=type, **kwargs)


class InternalServerException(AppException):
    """Processing failed server-side; ``detail`` must stay generic."""

    def __init__(self, detail: str, type: str = "internal-error", **kwargs: Any) -> None:
        super().__init__(500, detail, type=type, **kwargs)
