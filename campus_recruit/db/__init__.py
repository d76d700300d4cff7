"""
Database module - engine, sessions and table definitions.
"""
from campus_recruit.db.database import get_db_session, init_db, check_database_connection

__all__ = [
    "get_db_session",
    "init_db",
    "check_database_connection",
]
