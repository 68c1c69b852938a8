"""Shared ORM models owned outside the notification feature."""

from .user import User

__all__ = ["User"]
