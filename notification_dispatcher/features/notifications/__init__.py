"""Scheduled notification dispatch: retry policy, channels, retention."""
