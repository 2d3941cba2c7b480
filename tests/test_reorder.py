"""Tests for the pure reorder functions."""

from types import SimpleNamespace

from taskboard.services.reorder import (
    insert_at,
    is_dense,
    move_across_lists,
    move_within_list,
    ordered_ids,
    remove_and_compact,
    reorder_to,
)


def items(*ids):
    """Dense list whose order follows the argument order."""
    return [{"id": i, "order": n} for n, i in enumerate(ids)]


def as_pairs(plan):
    return [(p.id, p.order) for p in plan.placements]


# -------------------- helpers --------------------


def test_ordered_ids_sorts_by_order_then_id():
    rows = [{"id": 3, "order": 1}, {"id": 1, "order": 2}, {"id": 2, "order": 1}]
    assert ordered_ids(rows) == [2, 3, 1]


def test_ordered_ids_accepts_objects():
    rows = [SimpleNamespace(id=5, order=1), SimpleNamespace(id=9, order=0)]
    assert ordered_ids(rows) == [9, 5]


def test_is_dense():
    assert is_dense(items(4, 5, 6))
    assert is_dense([])
    assert not is_dense([{"id": 1, "order": 0}, {"id": 2, "order": 2}])
    assert not is_dense([{"id": 1, "order": 0}, {"id": 2, "order": 0}])


# -------------------- insert_at --------------------


def test_insert_at_middle_shifts_later_items():
    plan = insert_at(items(1, 2, 3), 9, 1, list_id="todo")
    assert as_pairs(plan) == [(1, 0), (9, 1), (2, 2), (3, 3)]
    assert all(p.list_id == "todo" for p in plan.placements)


def test_insert_at_clamps_index():
    assert as_pairs(insert_at(items(1, 2), 9, 50)) == [(1, 0), (2, 1), (9, 2)]
    assert as_pairs(insert_at(items(1, 2), 9, -3)) == [(9, 0), (1, 1), (2, 2)]


def test_insert_into_empty_list():
    assert as_pairs(insert_at([], 7, 0)) == [(7, 0)]


# -------------------- remove_and_compact --------------------


def test_remove_shifts_only_later_items():
    plan = remove_and_compact(items(1, 2, 3, 4), 2)
    assert as_pairs(plan) == [(1, 0), (3, 1), (4, 2)]
    assert plan.removed_id == 2


def test_remove_last_item_leaves_empty_plan():
    plan = remove_and_compact(items(1), 1)
    assert plan.is_empty
    assert plan.removed_id == 1


def test_remove_heals_existing_gap():
    rows = [{"id": 1, "order": 0}, {"id": 2, "order": 3}, {"id": 3, "order": 7}]
    assert as_pairs(remove_and_compact(rows, 1)) == [(2, 0), (3, 1)]


# -------------------- move_within_list --------------------


def test_move_first_to_last():
    assert as_pairs(move_within_list(items(1, 2, 3), 0, 2)) == [(2, 0), (3, 1), (1, 2)]


def test_move_last_to_first():
    assert as_pairs(move_within_list(items(1, 2, 3), 2, 0)) == [(3, 0), (1, 1), (2, 2)]


def test_move_to_same_index_is_noop():
    assert move_within_list(items(1, 2, 3), 1, 1).is_empty


def test_move_with_bad_source_index_is_noop():
    assert move_within_list(items(1, 2), 5, 0).is_empty
    assert move_within_list([], 0, 0).is_empty


def test_move_target_clamped_to_last_position():
    assert as_pairs(move_within_list(items(1, 2, 3), 0, 10)) == [(2, 0), (3, 1), (1, 2)]


def test_plan_reapplied_is_stable():
    plan = move_within_list(items(1, 2, 3), 0, 2)
    applied = [{"id": p.id, "order": p.order} for p in plan.placements]
    assert move_within_list(applied, 1, 1).is_empty
    assert ordered_ids(applied) == plan.ids


# -------------------- move_across_lists --------------------


def test_move_across_into_middle():
    source_plan, target_plan = move_across_lists(
        items(10), items(1, 2), 0, 1, source_list_id="todo", target_list_id="in-progress"
    )
    assert source_plan.is_empty
    assert source_plan.removed_id is None
    assert as_pairs(target_plan) == [(1, 0), (10, 1), (2, 2)]
    assert {p.list_id for p in target_plan.placements} == {"in-progress"}


def test_move_across_compacts_source():
    source_plan, target_plan = move_across_lists(
        items(1, 2, 3), [], 1, 0, source_list_id="todo", target_list_id="done"
    )
    assert as_pairs(source_plan) == [(1, 0), (3, 1)]
    assert as_pairs(target_plan) == [(2, 0)]


def test_move_across_conserves_count():
    source_plan, target_plan = move_across_lists(items(1, 2, 3), items(4, 5), 2, 0)
    assert len(source_plan.placements) + len(target_plan.placements) == 5


def test_move_across_bad_source_index():
    source_plan, target_plan = move_across_lists(items(1), items(2), 3, 0)
    assert source_plan.is_empty
    assert target_plan.is_empty


# -------------------- reorder_to --------------------


def test_reorder_to_full_order():
    assert as_pairs(reorder_to(items(1, 2, 3), [3, 2, 1])) == [(3, 0), (2, 1), (1, 2)]


def test_reorder_to_ignores_strangers_and_keeps_missing_members():
    plan = reorder_to(items(1, 2, 3, 4), [4, 99, 2, 4])
    assert as_pairs(plan) == [(4, 0), (2, 1), (1, 2), (3, 3)]


def test_records_carry_list_id_only_when_known():
    assert insert_at([], 1, 0).records() == [{"id": 1, "order": 0}]
    assert insert_at([], 1, 0, list_id="done").records() == [
        {"id": 1, "order": 0, "list_id": "done"}
    ]
