"""Infrastructure adapters: database session, logging, push transport."""
