"""SQLAlchemy-backed store for the task board."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ..exceptions import StoreError, UnknownTableError
from ..models.database import Base
from ..models.list_column import ListColumn
from ..models.ticket import Ticket
from .protocol import LISTS, TICKETS, Record

logger = logging.getLogger(__name__)


def _to_record(obj: Base) -> Record:
    return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}


def _column(model: type[Base], field: str):
    if field not in model.__table__.columns.keys():
        raise ValueError(f"Unknown field '{field}' for table {model.__tablename__}")
    return getattr(model, field)


class _Query:
    """Deferred select, executed by to_array/sort_by."""

    def __init__(self, store: "SQLAlchemyStore", model: type[Base], query: Select):
        self._store = store
        self._model = model
        self._query = query

    async def to_array(self) -> list[Record]:
        return await self._store._fetch(self._query.order_by(self._model.id))

    async def sort_by(self, field: str) -> list[Record]:
        query = self._query.order_by(_column(self._model, field), self._model.id)
        return await self._store._fetch(query)


class _Where:
    def __init__(self, store: "SQLAlchemyStore", model: type[Base], field: str):
        self._store = store
        self._model = model
        self._column = _column(model, field)

    def equals(self, value: Any) -> _Query:
        query = select(self._model).where(self._column == value)
        return _Query(self._store, self._model, query)


class SQLAlchemyStore:
    """Store over an async SQLAlchemy engine.

    Each call runs in its own session and commits on success, unless it is
    made inside ``transaction()``, in which case all calls share the
    transaction's session and nothing is committed until the block exits.
    """

    _models: dict[str, type[Base]] = {TICKETS: Ticket, LISTS: ListColumn}

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._tx_session: Optional[AsyncSession] = None

    def _model(self, table: str) -> type[Base]:
        try:
            return self._models[table]
        except KeyError:
            raise UnknownTableError(table) from None

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        if self._tx_session is not None:
            try:
                yield self._tx_session
                await self._tx_session.flush()
            except SQLAlchemyError as e:
                raise StoreError(f"Store operation failed: {e}") from e
            return

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise StoreError(f"Store operation failed: {e}") from e
            except Exception:
                await session.rollback()
                raise

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Group every store call made inside the block into one transaction."""
        if self._tx_session is not None:
            # Nested scopes join the outer transaction
            yield
            return

        async with self._session_factory() as session:
            self._tx_session = session
            try:
                yield
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.warning(f"Transaction rolled back: {e}")
                if isinstance(e, SQLAlchemyError):
                    raise StoreError(f"Transaction failed: {e}") from e
                raise
            finally:
                self._tx_session = None

    async def _fetch(self, query: Select) -> list[Record]:
        async with self._session() as session:
            result = await session.execute(query)
            return [_to_record(obj) for obj in result.scalars().all()]

    async def _upsert(self, session: AsyncSession, model: type[Base], record: Record) -> Base:
        for key in record:
            _column(model, key)

        pk = record.get("id")
        obj = await session.get(model, pk) if pk is not None else None
        if obj is None:
            obj = model(**record)
            session.add(obj)
        else:
            for key, value in record.items():
                if key != "id":
                    setattr(obj, key, value)
        return obj

    async def get(self, table: str, id: Any) -> Optional[Record]:
        model = self._model(table)
        async with self._session() as session:
            obj = await session.get(model, id)
            return _to_record(obj) if obj is not None else None

    async def put(self, table: str, record: Record) -> Any:
        model = self._model(table)
        async with self._session() as session:
            obj = await self._upsert(session, model, record)
            await session.flush()
            return obj.id

    async def bulk_put(self, table: str, records: list[Record]) -> list[Any]:
        model = self._model(table)
        async with self._session() as session:
            objs = [await self._upsert(session, model, record) for record in records]
            await session.flush()
            return [obj.id for obj in objs]

    async def delete(self, table: str, id: Any) -> None:
        model = self._model(table)
        async with self._session() as session:
            obj = await session.get(model, id)
            if obj is not None:
                await session.delete(obj)

    def where(self, table: str, field: str) -> _Where:
        return _Where(self, self._model(table), field)

    def order_by(self, table: str, field: str) -> _Query:
        model = self._model(table)
        return _Query(self, model, select(model).order_by(_column(model, field)))

    async def close(self) -> None:
        await self._engine.dispose()
