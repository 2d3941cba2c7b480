"""Board controller: applies reorder plans to the store and keeps the projection."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from ..config import Config
from ..exceptions import ReferentialError
from ..models.database import get_database_url, init_db
from ..schemas import BoardSchema, DropEvent, ListColumnSchema, TicketSchema
from ..store import LISTS, TICKETS, MemoryStore, Record, SQLAlchemyStore, Store, TransactionalStore
from .reorder import (
    OrderPlan,
    insert_at,
    is_dense,
    move_across_lists,
    move_within_list,
    remove_and_compact,
    reorder_to,
)

logger = logging.getLogger(__name__)


# Created on first run if absent
DEFAULT_LISTS = [
    {"id": "todo", "name": "To Do", "order": 0},
    {"id": "in-progress", "name": "In Progress", "order": 1},
    {"id": "done", "name": "Done", "order": 2},
]

Step = tuple[Callable[[], Awaitable[Any]], Callable[[], Awaitable[Any]]]


@dataclass(frozen=True)
class BoardProjection:
    """Read-only snapshot of the board as of the last load."""

    lists: tuple[ListColumnSchema, ...] = ()
    tickets_by_list: Mapping[str, tuple[TicketSchema, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def to_schema(self) -> BoardSchema:
        return BoardSchema(
            lists=list(self.lists),
            tickets_by_list={k: list(v) for k, v in self.tickets_by_list.items()},
        )


class BoardController:
    """Orchestrates ticket operations against a store.

    All position arithmetic is delegated to the reorder module. Every mutating
    operation ends by reloading the projection from the store, which is the
    only way the projection changes. Mutations are serialized by one lock
    held across their read, write and reload.
    """

    def __init__(self, store: Store, strict_references: bool = False):
        self.store = store
        self.strict_references = strict_references
        self._projection = BoardProjection()
        self._lock = asyncio.Lock()

    @property
    def projection(self) -> BoardProjection:
        return self._projection

    def get_list_ids(self) -> list[str]:
        """List ids in display order."""
        return [column.id for column in self._projection.lists]

    def get_ticket(self, ticket_id: int) -> Optional[TicketSchema]:
        """Find a ticket in the current projection."""
        for tickets in self._projection.tickets_by_list.values():
            for ticket in tickets:
                if ticket.id == ticket_id:
                    return ticket
        return None

    # -------------------- loading --------------------

    async def initialize(self) -> None:
        """Create the default lists that are missing, then load."""
        async with self._lock:
            for list_data in DEFAULT_LISTS:
                if await self.store.get(LISTS, list_data["id"]) is None:
                    await self.store.put(LISTS, dict(list_data))
                    logger.info(f"Created default list '{list_data['id']}'")
            await self._reload()

    async def load(self) -> BoardProjection:
        """Replace the projection with a fresh read of the store."""
        async with self._lock:
            return await self._reload()

    async def _reload(self) -> BoardProjection:
        lists = await self.store.order_by(LISTS, "order").to_array()
        tickets = await self.store.order_by(TICKETS, "order").to_array()

        grouped: dict[str, list[TicketSchema]] = {column["id"]: [] for column in lists}
        for record in tickets:
            grouped.setdefault(record["list_id"], []).append(TicketSchema(**record))

        for list_id, items in grouped.items():
            if not is_dense(items):
                logger.warning(f"List '{list_id}' has non-contiguous ticket order")

        self._projection = BoardProjection(
            lists=tuple(ListColumnSchema(**column) for column in lists),
            tickets_by_list=MappingProxyType({k: tuple(v) for k, v in grouped.items()}),
        )
        return self._projection

    # -------------------- ticket operations --------------------

    async def add_ticket(
        self, list_id: str, title: Optional[str], description: Optional[str] = ""
    ) -> Optional[int]:
        """Append a ticket to the end of a list.

        A blank title is rejected silently: nothing is written and None is
        returned.
        """
        title = (title or "").strip()
        if not title:
            logger.debug(f"Ignoring ticket with blank title for list '{list_id}'")
            return None

        async with self._lock:
            await self._check_list(list_id)
            siblings = await self._list_tickets(list_id)
            ticket_id = await self.store.put(
                TICKETS,
                {
                    "title": title,
                    "description": (description or "").strip(),
                    "list_id": list_id,
                    "order": len(siblings),
                    "created_at": datetime.utcnow(),
                },
            )
            if not is_dense(siblings):
                # Appending after a gap would duplicate an order, renumber the list
                plan = insert_at(siblings, ticket_id, len(siblings), list_id)
                await self._apply([self._plan_step(plan, _positions(siblings))])
                logger.warning(f"Renumbered non-contiguous list '{list_id}' on add")
            logger.info(f"Added ticket {ticket_id} to '{list_id}' at position {len(siblings)}")
            await self._reload()
        return ticket_id

    async def delete_ticket(self, ticket_id: Optional[int]) -> None:
        """Delete a ticket and close the gap in its list.

        Deleting a ticket that does not exist is treated as already done.
        """
        if ticket_id is None:
            logger.debug("Ignoring delete without a ticket id")
            return

        async with self._lock:
            record = await self.store.get(TICKETS, ticket_id)
            if record is None:
                await self.store.delete(TICKETS, ticket_id)
                logger.debug(f"Ticket {ticket_id} already absent")
            else:
                list_id = record["list_id"]
                siblings = await self._list_tickets(list_id)
                plan = remove_and_compact(siblings, ticket_id, list_id)
                before = _positions(siblings)

                steps: list[Step] = [(
                    lambda: self.store.delete(TICKETS, ticket_id),
                    lambda: self.store.put(TICKETS, record),
                )]
                if not plan.is_empty:
                    steps.append(self._plan_step(plan, before))
                await self._apply(steps)
                logger.info(f"Deleted ticket {ticket_id} from '{list_id}'")

            await self._reload()

    async def update_ticket(
        self, ticket_id: Optional[int], fields: Mapping[str, Any]
    ) -> Optional[TicketSchema]:
        """Merge title/description into a ticket.

        Position fields are owned by the move operations and are ignored
        here, as is a blank title.
        """
        if ticket_id is None:
            return None

        changes: dict[str, Any] = {}
        if fields.get("title") is not None:
            title = str(fields["title"]).strip()
            if title:
                changes["title"] = title
            else:
                logger.debug(f"Ignoring blank title update for ticket {ticket_id}")
        if fields.get("description") is not None:
            changes["description"] = str(fields["description"]).strip()

        async with self._lock:
            if await self.store.get(TICKETS, ticket_id) is None:
                logger.debug(f"Ignoring update for missing ticket {ticket_id}")
                return None
            if changes:
                await self.store.put(TICKETS, {"id": ticket_id, **changes})
                logger.info(f"Updated ticket {ticket_id}: {sorted(changes)}")
            await self._reload()
        return self.get_ticket(ticket_id)

    async def move_ticket(self, drop: Union[DropEvent, Mapping[str, Any]]) -> None:
        """Apply a drag-and-drop result.

        Indices refer to positions in the lists as last loaded.
        """
        drop = DropEvent.model_validate(drop)
        source, target = drop.source_list_id, drop.target_list_id

        async with self._lock:
            await self._check_list(target)

            if source == target:
                items = await self._list_tickets(source)
                plan = move_within_list(items, drop.source_index, drop.target_index, source)
                if plan.is_empty:
                    logger.debug(f"Move within '{source}' is a no-op")
                else:
                    await self._apply([self._plan_step(plan, _positions(items))])
                    logger.info(
                        f"Moved ticket in '{source}' from {drop.source_index} to {drop.target_index}"
                    )
            else:
                source_items = await self._list_tickets(source)
                target_items = await self._list_tickets(target)
                source_plan, target_plan = move_across_lists(
                    source_items,
                    target_items,
                    drop.source_index,
                    drop.target_index,
                    source_list_id=source,
                    target_list_id=target,
                )
                if target_plan.is_empty:
                    logger.debug(f"No ticket at index {drop.source_index} in '{source}'")
                else:
                    before = _positions(source_items + target_items)
                    # Target first, so a failure leaves the moved ticket in its old list
                    steps = [self._plan_step(target_plan, before)]
                    if not source_plan.is_empty:
                        steps.append(self._plan_step(source_plan, before))
                    await self._apply(steps)
                    logger.info(
                        f"Moved ticket from '{source}'[{drop.source_index}] "
                        f"to '{target}'[{drop.target_index}]"
                    )

            await self._reload()

    async def reorder_tickets(self, list_id: str, ticket_ids: list[int]) -> None:
        """Renumber a list to follow ``ticket_ids``."""
        async with self._lock:
            await self._check_list(list_id)
            items = await self._list_tickets(list_id)
            plan = reorder_to(items, ticket_ids, list_id)
            if not plan.is_empty:
                await self._apply([self._plan_step(plan, _positions(items))])
                logger.info(f"Reordered {len(plan.placements)} tickets in '{list_id}'")
            await self._reload()

    async def close(self) -> None:
        await self.store.close()

    # -------------------- helpers --------------------

    async def _check_list(self, list_id: str) -> None:
        if self.strict_references and await self.store.get(LISTS, list_id) is None:
            raise ReferentialError(list_id)

    async def _list_tickets(self, list_id: str) -> list[Record]:
        return await self.store.where(TICKETS, "list_id").equals(list_id).sort_by("order")

    def _plan_step(self, plan: OrderPlan, before: Mapping[int, Record]) -> Step:
        undo = [before[i] for i in plan.ids if i in before]
        return (
            lambda: self.store.bulk_put(TICKETS, plan.records()),
            lambda: self.store.bulk_put(TICKETS, undo),
        )

    async def _apply(self, steps: list[Step]) -> None:
        """Run writes atomically.

        On a transactional store all steps share one transaction. Otherwise
        each step's undo is logged before it runs and, if any step fails, the
        logged undos are replayed newest first before the error is re-raised.
        """
        if isinstance(self.store, TransactionalStore):
            async with self.store.transaction():
                for do, _ in steps:
                    await do()
            return

        undo_log: list[Callable[[], Awaitable[Any]]] = []
        try:
            for do, undo in steps:
                undo_log.append(undo)
                await do()
        except Exception:
            logger.warning(f"Write failed, compensating {len(undo_log)} step(s)")
            for undo in reversed(undo_log):
                try:
                    await undo()
                except Exception as e:
                    logger.error(f"Compensating write failed: {e}")
            raise


def _positions(records: list[Record]) -> dict[int, Record]:
    """Position fields of each record, keyed by id, for undo."""
    return {
        r["id"]: {"id": r["id"], "order": r["order"], "list_id": r["list_id"]}
        for r in records
    }


_board: Optional[BoardController] = None


async def create_board_controller(config: Config) -> BoardController:
    """Open the configured store and build an initialized controller."""
    backend = config.database.backend
    if backend == "memory":
        store: Store = MemoryStore()
    elif backend == "sqlite":
        engine = await init_db(get_database_url(config.database.path))
        store = SQLAlchemyStore(engine)
    else:
        raise ValueError(f"Unknown database backend: {backend}")

    board = BoardController(store, strict_references=config.board.strict_references)
    await board.initialize()
    logger.info(f"Board ready ({backend} store, strict references: {board.strict_references})")
    return board


def set_board_controller(board: Optional[BoardController]) -> None:
    global _board
    _board = board


def get_board_controller() -> BoardController:
    """Get the application's board controller."""
    if _board is None:
        raise RuntimeError("Board controller not initialized")
    return _board
