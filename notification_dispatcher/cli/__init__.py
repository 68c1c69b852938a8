"""click management commands."""
