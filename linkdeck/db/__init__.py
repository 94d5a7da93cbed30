"""Database module for the shortcut manager."""
from linkdeck.db.base import engine, get_engine, create_tables
from linkdeck.db.session import get_db, db_transaction

__all__ = [
    "engine",
    "get_engine",
    "create_tables",
    "get_db",
    "db_transaction",
]
