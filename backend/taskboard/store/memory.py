"""In-process store, used when no database file is wanted."""

from typing import Any, Callable, Optional

from ..exceptions import UnknownTableError
from .protocol import LISTS, TICKETS, Record


class _MemoryQuery:
    def __init__(self, rows: Callable[[], list[Record]], sort_field: str = "id"):
        self._rows = rows
        self._sort_field = sort_field

    async def to_array(self) -> list[Record]:
        return await self.sort_by(self._sort_field)

    async def sort_by(self, field: str) -> list[Record]:
        return sorted(self._rows(), key=lambda r: (r.get(field), r["id"]))


class _MemoryWhere:
    def __init__(self, store: "MemoryStore", table: str, field: str):
        self._store = store
        self._table = table
        self._field = field

    def equals(self, value: Any) -> _MemoryQuery:
        def rows() -> list[Record]:
            return [r for r in self._store._rows(self._table) if r.get(self._field) == value]
        return _MemoryQuery(rows)


class MemoryStore:
    """Dict-backed store with no transaction support.

    Ticket ids are assigned from a counter, list ids must be supplied.
    Records are copied on the way in and out.
    """

    def __init__(self):
        self._tables: dict[str, dict[Any, Record]] = {TICKETS: {}, LISTS: {}}
        self._next_ticket_id = 1

    def _table(self, table: str) -> dict[Any, Record]:
        try:
            return self._tables[table]
        except KeyError:
            raise UnknownTableError(table) from None

    def _rows(self, table: str) -> list[Record]:
        return [dict(r) for r in self._table(table).values()]

    async def get(self, table: str, id: Any) -> Optional[Record]:
        row = self._table(table).get(id)
        return dict(row) if row is not None else None

    async def put(self, table: str, record: Record) -> Any:
        rows = self._table(table)
        pk = record.get("id")
        if pk is None:
            if table != TICKETS:
                raise ValueError(f"Records in {table} need an explicit id")
            pk = self._next_ticket_id
            self._next_ticket_id += 1
        elif table == TICKETS:
            self._next_ticket_id = max(self._next_ticket_id, pk + 1)

        row = rows.setdefault(pk, {})
        row.update(record)
        row["id"] = pk
        return pk

    async def bulk_put(self, table: str, records: list[Record]) -> list[Any]:
        return [await self.put(table, record) for record in records]

    async def delete(self, table: str, id: Any) -> None:
        self._table(table).pop(id, None)

    def where(self, table: str, field: str) -> _MemoryWhere:
        self._table(table)
        return _MemoryWhere(self, table, field)

    def order_by(self, table: str, field: str) -> _MemoryQuery:
        self._table(table)
        return _MemoryQuery(lambda: self._rows(table), sort_field=field)

    async def close(self) -> None:
        pass
