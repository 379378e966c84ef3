"""Guild settings and panel sessions: services over the SQLite repositories."""
