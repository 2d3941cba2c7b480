"""Database models for the task board."""

from .database import Base, get_database_url, init_db
from .list_column import ListColumn
from .ticket import Ticket

__all__ = [
    "Base",
    "init_db",
    "get_database_url",
    "ListColumn",
    "Ticket",
]
