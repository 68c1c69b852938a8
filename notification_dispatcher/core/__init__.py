"""Core building blocks: settings, exceptions and database primitives."""
