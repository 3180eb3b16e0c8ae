"""Infrastructure adapters: SQLite storage, email notifications."""
