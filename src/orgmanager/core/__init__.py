"""Core infrastructure: auth, database, errors and logging."""
