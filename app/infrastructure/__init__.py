"""Infrastructure: SQL persistence and bearer token security."""
