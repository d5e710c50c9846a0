"""Infrastructure adapters: logging and database session management."""
