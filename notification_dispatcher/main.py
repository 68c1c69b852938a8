"""Main entry point for notification-dispatcher."""

from __future__ import annotations

from notification_dispatcher.cli.main import main

if __name__ == "__main__":
    main()
