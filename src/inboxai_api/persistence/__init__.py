"""
PostgreSQL persistence layer.

- database.py: async connection pool opened at startup, closed at shutdown
"""

from inboxai_api.persistence.database import Database, DatabaseConnectionError

__all__ = [
    "Database",
    "DatabaseConnectionError",
]
