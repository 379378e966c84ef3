"""SQLite persistence: the shared connection and schema."""
from guildpanel.database.db_connection import ConnectionManager, db_connection

__all__ = ["ConnectionManager", "db_connection"]
