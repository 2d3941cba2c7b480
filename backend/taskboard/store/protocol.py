"""Store protocol consumed by the board controller."""

from typing import Any, AsyncContextManager, Optional, Protocol, runtime_checkable

TICKETS = "tickets"
LISTS = "lists"

Record = dict[str, Any]


class Collection(Protocol):
    """A pending query over one table."""

    async def to_array(self) -> list[Record]:
        """Run the query and return matching records ordered by primary key."""
        ...

    async def sort_by(self, field: str) -> list[Record]:
        """Run the query and return matching records ordered by ``field``."""
        ...


class WhereClause(Protocol):
    def equals(self, value: Any) -> Collection:
        ...


@runtime_checkable
class Store(Protocol):
    """Interface for board storage backends.

    Records cross this boundary as plain dicts keyed by column name. Two
    tables are managed: ``tickets`` (integer ids assigned by the store) and
    ``lists`` (string ids chosen by the caller).
    """

    async def get(self, table: str, id: Any) -> Optional[Record]:
        """Get a single record by primary key.

        Returns:
            A copy of the record, or None if it does not exist.
        """
        ...

    async def put(self, table: str, record: Record) -> Any:
        """Insert or update a record.

        A record without an ``id`` is inserted and gets one assigned. A record
        whose ``id`` already exists has the supplied fields merged into it.

        Returns:
            The record's primary key.
        """
        ...

    async def bulk_put(self, table: str, records: list[Record]) -> list[Any]:
        """``put`` every record in one unit of work."""
        ...

    async def delete(self, table: str, id: Any) -> None:
        """Delete a record by primary key.

        Note:
            Does not raise an error if the record doesn't exist.
        """
        ...

    def where(self, table: str, field: str) -> WhereClause:
        ...

    def order_by(self, table: str, field: str) -> Collection:
        ...

    async def close(self) -> None:
        ...


@runtime_checkable
class TransactionalStore(Store, Protocol):
    """A store that can group several writes into one atomic unit."""

    def transaction(self) -> AsyncContextManager[None]:
        """Scope in which every store call shares one transaction.

        Commits when the block exits normally and rolls back on any exception.
        """
        ...
