"""Storage backends for the task board."""

from .memory import MemoryStore
from .protocol import LISTS, TICKETS, Record, Store, TransactionalStore
from .sqlalchemy_store import SQLAlchemyStore

__all__ = [
    "LISTS",
    "TICKETS",
    "Record",
    "Store",
    "TransactionalStore",
    "MemoryStore",
    "SQLAlchemyStore",
]
