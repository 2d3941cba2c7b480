"""Position arithmetic for ordered ticket lists.

Every function here is pure: it takes the current members of one or two lists
(anything exposing ``id`` and ``order``, as attributes or mapping keys) and
returns an ``OrderPlan`` describing the complete new assignment of positions.
Nothing is written; the board controller persists plans through the store.

Plans always cover every member of the affected list, numbered 0..n-1, so
writing the same plan twice gives the same result and any gap or duplicate
already present in the input is healed by the write.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class Placement:
    id: int
    order: int
    list_id: Optional[str] = None


@dataclass
class OrderPlan:
    """Full (id, order, list_id) assignment for one list."""

    list_id: Optional[str] = None
    placements: list[Placement] = field(default_factory=list)
    # Set by remove_and_compact; the record itself is deleted separately
    removed_id: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return not self.placements

    @property
    def ids(self) -> list[int]:
        return [p.id for p in self.placements]

    def records(self) -> list[dict[str, Any]]:
        """Partial records to bulk-write: id, order and, when known, list_id."""
        records = []
        for p in self.placements:
            record = {"id": p.id, "order": p.order}
            if p.list_id is not None:
                record["list_id"] = p.list_id
            records.append(record)
        return records


def _get(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item[name]
    return getattr(item, name)


def ordered_ids(items: Iterable[Any]) -> list[int]:
    """Ids sorted by (order, id)."""
    return [
        _get(item, "id")
        for item in sorted(items, key=lambda i: (_get(i, "order"), _get(i, "id")))
    ]


def is_dense(items: Iterable[Any]) -> bool:
    """True when the orders are exactly 0..n-1."""
    orders = sorted(_get(item, "order") for item in items)
    return orders == list(range(len(orders)))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _plan(ids: list[int], list_id: Optional[str], removed_id: Optional[int] = None) -> OrderPlan:
    return OrderPlan(
        list_id=list_id,
        placements=[Placement(id=i, order=n, list_id=list_id) for n, i in enumerate(ids)],
        removed_id=removed_id,
    )


def insert_at(
    items: Iterable[Any],
    new_item_id: int,
    target_index: int,
    list_id: Optional[str] = None,
) -> OrderPlan:
    """Place ``new_item_id`` at ``target_index``, shifting later items up by one.

    ``target_index`` is clamped to [0, len(items)].
    """
    ids = [i for i in ordered_ids(items) if i != new_item_id]
    ids.insert(_clamp(target_index, 0, len(ids)), new_item_id)
    return _plan(ids, list_id)


def remove_and_compact(
    items: Iterable[Any],
    removed_id: int,
    list_id: Optional[str] = None,
) -> OrderPlan:
    """Drop ``removed_id`` and close the gap it leaves.

    Items positioned after the removed one move down by one; items before it
    keep their order.
    """
    ids = [i for i in ordered_ids(items) if i != removed_id]
    return _plan(ids, list_id, removed_id=removed_id)


def move_within_list(
    items: Iterable[Any],
    source_index: int,
    target_index: int,
    list_id: Optional[str] = None,
) -> OrderPlan:
    """Array-move inside one list.

    Returns an empty plan when the indices are equal or ``source_index`` does
    not point at an item. ``target_index`` is clamped to the last position.
    """
    ids = ordered_ids(items)
    if not 0 <= source_index < len(ids):
        return OrderPlan(list_id=list_id)

    target_index = _clamp(target_index, 0, len(ids) - 1)
    if source_index == target_index:
        return OrderPlan(list_id=list_id)

    ids.insert(target_index, ids.pop(source_index))
    return _plan(ids, list_id)


def move_across_lists(
    source_items: Iterable[Any],
    target_items: Iterable[Any],
    source_index: int,
    target_index: int,
    source_list_id: Optional[str] = None,
    target_list_id: Optional[str] = None,
) -> tuple[OrderPlan, OrderPlan]:
    """Move the item at ``source_index`` into another list at ``target_index``.

    Returns ``(source_plan, target_plan)``. Both must be written together:
    writing only one leaves the other list with a gap or a duplicate. The
    target plan carries ``target_list_id`` for every placement, which is what
    reassigns the moved item.
    """
    source_items = list(source_items)
    source_ids = ordered_ids(source_items)
    if not 0 <= source_index < len(source_ids):
        return OrderPlan(list_id=source_list_id), OrderPlan(list_id=target_list_id)

    moved_id = source_ids[source_index]
    source_plan = remove_and_compact(source_items, moved_id, source_list_id)
    target_plan = insert_at(target_items, moved_id, target_index, target_list_id)
    # The item changes lists rather than being deleted
    source_plan.removed_id = None
    return source_plan, target_plan


def reorder_to(
    items: Iterable[Any],
    new_order: Iterable[int],
    list_id: Optional[str] = None,
) -> OrderPlan:
    """Number the list following ``new_order``.

    Ids that are not members of the list are ignored. Members missing from
    ``new_order`` follow the named ones in their current relative order.
    """
    current = ordered_ids(items)
    members = set(current)
    named = [i for i in dict.fromkeys(new_order) if i in members]
    seen = set(named)
    return _plan(named + [i for i in current if i not in seen], list_id)
