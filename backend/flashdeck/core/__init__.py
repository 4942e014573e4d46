"""Core infrastructure: settings, database, errors and logging."""
