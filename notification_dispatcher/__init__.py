"""Scheduled notification dispatcher service."""

__version__ = "1.0.0"
