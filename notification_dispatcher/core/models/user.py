"""Recipient model.

Users are created and owned by the account service; the dispatcher only
reads them and clears ``fcm_token`` when the push transport reports it
as invalid.
"""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from notification_dispatcher.core.database.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Notification recipient keyed by the external user id."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    fcm_token: Mapped[str | None] = mapped_column(
        String(512),
        nullable=True,
        comment="Firebase Cloud Messaging device token; cleared when revoked",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, has_push_token={self.fcm_token is not None})>"
