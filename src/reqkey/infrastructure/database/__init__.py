"""SQLite persistence for registered model keys."""
