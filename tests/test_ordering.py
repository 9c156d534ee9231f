import random

from blockpress.services.ordering import insert_item, move_item, remove_item, renumber, sort_by_order


def _orders(items):
    return [i["order"] for i in items]


def _contiguous(items):
    return _orders(items) == list(range(len(items)))


def test_sort_puts_missing_and_invalid_orders_last():
    items = [{"id": "a"}, {"id": "b", "order": 2}, {"id": "c", "order": "x"}, {"id": "d", "order": 0}]
    assert [i["id"] for i in sort_by_order(items)] == ["d", "b", "a", "c"]


def test_sort_is_stable_for_ties():
    items = [{"id": "a", "order": 1}, {"id": "b", "order": 1}, {"id": "c", "order": 0}]
    assert [i["id"] for i in sort_by_order(items)] == ["c", "a", "b"]


def test_structural_operations_keep_orders_contiguous():
    rng = random.Random(7)
    items = renumber([{"id": str(i)} for i in range(5)])

    for step in range(200):
        op = rng.choice(["insert", "remove", "move"])
        if op == "insert":
            items = insert_item(items, rng.randint(-2, len(items) + 2), {"id": f"n{step}"})
        elif op == "remove":
            items = remove_item(items, rng.randint(-1, len(items)))
        else:
            items = move_item(items, rng.randint(-1, len(items)), rng.randint(-1, len(items) + 1))
        assert _contiguous(items)


def test_move_item():
    items = renumber([{"id": "a"}, {"id": "b"}, {"id": "c"}])
    moved = move_item(items, 0, 2)
    assert [i["id"] for i in moved] == ["b", "c", "a"]
    assert _contiguous(moved)
    # original untouched
    assert [i["id"] for i in items] == ["a", "b", "c"]


def test_insert_and_remove():
    items = renumber([{"id": "a"}, {"id": "b"}])
    inserted = insert_item(items, 1, {"id": "x"})
    assert [i["id"] for i in inserted] == ["a", "x", "b"]
    removed = remove_item(inserted, 0)
    assert [i["id"] for i in removed] == ["x", "b"]
    assert _contiguous(removed)
