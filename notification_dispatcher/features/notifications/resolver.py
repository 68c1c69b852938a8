"""Recipient lookup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import RecipientNotFoundError

if TYPE_CHECKING:
    from .store import NotificationStore, Recipient

logger = logging.getLogger(__name__)


class RecipientResolver:
    """Loads the recipient of a notification; every call hits the store."""

    def __init__(self, store: NotificationStore) -> None:
        self._store = store

    async def resolve(self, recipient_id: str) -> Recipient:
        """Return the recipient record.

        Raises:
            RecipientNotFoundError: If no user exists with ``recipient_id``.
        """
        recipient = await self._store.get_user(recipient_id)
        if recipient is None:
            logger.warning("Recipient not found", extra={"recipient_id": recipient_id})
            raise RecipientNotFoundError(recipient_id)
        return recipient
