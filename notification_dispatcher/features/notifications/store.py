"""Notification store protocol and its SQLAlchemy binding.

The dispatcher treats persistence as a document store: independent
per-record reads and writes plus one batched delete. Every write runs in
its own short transaction, so a failed best-effort write (token clearing,
fallback inbox entry) never rolls back an earlier primary outcome.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import ValidationError
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from notification_dispatcher.core.models import User

from .enums import EmailRequestStatus, NotificationStatus
from .exceptions import StoreError
from .models import EmailQueueItem, InAppNotification, NotificationLog, ScheduledNotification
from .schemas import NotificationPayload

if TYPE_CHECKING:
    import uuid
    from collections.abc import AsyncIterator, Collection, Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NotificationSnapshot:
    """A due notification as read at selection time.

    A stored payload that does not validate yields an empty ``payload`` and
    the validation message in ``payload_error``; the processor turns that
    into an ordinary delivery failure for this record alone.
    """

    id: uuid.UUID
    recipient_id: str
    channel: str
    payload: NotificationPayload
    attempts: int = 0
    scheduled_for: datetime | None = None
    payload_error: str | None = None


@dataclass(frozen=True, slots=True)
class Recipient:
    id: str
    email: str | None = None
    push_token: str | None = None


@dataclass(frozen=True, slots=True)
class EmailRequest:
    to: str
    subject: str
    body: str
    event_id: str | None
    template_id: str
    status: EmailRequestStatus = EmailRequestStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True, slots=True)
class InAppMessage:
    user_id: str
    title: str
    body: str
    event_id: str | None
    type: str
    read: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True, slots=True)
class DeliveryLogEntry:
    notification_id: uuid.UUID
    event_id: str | None
    user_id: str
    channel: str
    status: NotificationStatus
    error: str | None = None
    sent_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


def parse_payload(raw: Any) -> tuple[NotificationPayload, str | None]:
    """Validate a stored payload, returning ``(payload, error)`` instead of raising."""
    try:
        return NotificationPayload.model_validate(raw if raw is not None else {}), None
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'payload'}: {err['msg']}"
            for err in exc.errors()
        )
        return NotificationPayload(), f"Invalid payload: {problems}"


class NotificationStore(Protocol):
    """Persistence operations the dispatch engine depends on."""

    async def fetch_due_notifications(
        self, now: datetime, limit: int,
    ) -> list[NotificationSnapshot]:
        """Return up to ``limit`` scheduled notifications with ``scheduled_for <= now``."""
        ...

    async def update_notification(
        self,
        notification_id: uuid.UUID,
        values: Mapping[str, Any],
        log_entry: DeliveryLogEntry | None = None,
    ) -> None:
        """Apply ``values``; when ``log_entry`` is given, append it in the same transaction."""
        ...

    async def get_user(self, user_id: str) -> Recipient | None: ...

    async def clear_push_token(self, user_id: str) -> None: ...

    async def add_email_request(self, request: EmailRequest) -> None: ...

    async def add_in_app_notification(self, message: InAppMessage) -> None: ...

    async def fetch_expired_notification_ids(
        self,
        statuses: Collection[NotificationStatus],
        cutoff: datetime,
        limit: int,
    ) -> list[uuid.UUID]:
        """Return up to ``limit`` ids in ``statuses`` last updated before ``cutoff``."""
        ...

    async def delete_notifications(self, notification_ids: Sequence[uuid.UUID]) -> int:
        """Delete all ids atomically and return the number removed."""
        ...


class SqlAlchemyNotificationStore:
    """``NotificationStore`` over the async SQLAlchemy ORM.

    Opens one session per operation, which keeps it safe to share between
    concurrently running notification tasks.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session, session.begin():
                yield session
        except SQLAlchemyError as exc:
            logger.error(
                "Notification store operation failed",
                extra={"operation": operation, "error": str(exc)},
            )
            raise StoreError(operation, str(exc)) from exc

    async def fetch_due_notifications(
        self, now: datetime, limit: int,
    ) -> list[NotificationSnapshot]:
        stmt = (
            select(ScheduledNotification)
            .where(
                ScheduledNotification.status == NotificationStatus.SCHEDULED.value,
                ScheduledNotification.scheduled_for <= now,
            )
            .order_by(ScheduledNotification.scheduled_for)
            .limit(limit)
        )
        async with self._transaction("fetch_due_notifications") as session:
            rows = (await session.execute(stmt)).scalars().all()

        snapshots = []
        for row in rows:
            payload, payload_error = parse_payload(row.payload)
            if payload_error is not None:
                logger.warning(
                    "Stored notification payload is invalid",
                    extra={"notification_id": str(row.id), "error": payload_error},
                )
            snapshots.append(
                NotificationSnapshot(
                    id=row.id,
                    recipient_id=row.recipient_id,
                    channel=row.channel,
                    payload=payload,
                    attempts=row.attempts,
                    scheduled_for=row.scheduled_for,
                    payload_error=payload_error,
                ),
            )
        return snapshots

    async def update_notification(
        self,
        notification_id: uuid.UUID,
        values: Mapping[str, Any],
        log_entry: DeliveryLogEntry | None = None,
    ) -> None:
        stmt = (
            update(ScheduledNotification)
            .where(ScheduledNotification.id == notification_id)
            .values(**values)
        )
        async with self._transaction("update_notification") as session:
            await session.execute(stmt)
            if log_entry is not None:
                session.add(
                    NotificationLog(
                        notification_id=log_entry.notification_id,
                        event_id=log_entry.event_id,
                        user_id=log_entry.user_id,
                        channel=log_entry.channel,
                        status=log_entry.status.value,
                        error=log_entry.error,
                        sent_at=log_entry.sent_at,
                        created_at=log_entry.created_at,
                    ),
                )

    async def get_user(self, user_id: str) -> Recipient | None:
        async with self._transaction("get_user") as session:
            user = await session.get(User, user_id)
            if user is None:
                return None
            return Recipient(id=user.id, email=user.email, push_token=user.fcm_token)

    async def clear_push_token(self, user_id: str) -> None:
        stmt = update(User).where(User.id == user_id).values(fcm_token=None)
        async with self._transaction("clear_push_token") as session:
            await session.execute(stmt)

    async def add_email_request(self, request: EmailRequest) -> None:
        async with self._transaction("add_email_request") as session:
            session.add(
                EmailQueueItem(
                    to=request.to,
                    subject=request.subject,
                    body=request.body,
                    event_id=request.event_id,
                    template_id=request.template_id,
                    status=request.status.value,
                    created_at=request.created_at,
                ),
            )

    async def add_in_app_notification(self, message: InAppMessage) -> None:
        async with self._transaction("add_in_app_notification") as session:
            session.add(
                InAppNotification(
                    user_id=message.user_id,
                    title=message.title,
                    body=message.body,
                    event_id=message.event_id,
                    type=message.type,
                    read=message.read,
                    created_at=message.created_at,
                ),
            )
