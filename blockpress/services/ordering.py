"""
Ordering helpers for sections, blocks and ordered sub-entities.

Every structural operation returns a new list whose ``order`` values are
the contiguous range [0, n-1].

The API replaces sections wholesale, so the editor applies insert, remove
and move locally; the server only sorts and renumbers what it receives.
"""

from typing import Any, Dict, List, Optional


def order_key(item: Any):
    """Sort key: valid integer orders first, missing or invalid orders last."""
    value = item.get("order") if isinstance(item, dict) else None
    if isinstance(value, bool):
        return (1, 0)
    if isinstance(value, (int, float)):
        return (0, value)
    if isinstance(value, str):
        try:
            return (0, int(value))
        except ValueError:
            pass
    return (1, 0)


def sort_by_order(items: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Stable sort by ``order``; ties keep their incoming position."""
    return sorted((i for i in (items or []) if isinstance(i, dict)), key=order_key)


def renumber(items: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    return [{**item, "order": idx} for idx, item in enumerate(items or [])]


def insert_item(items: List[Dict[str, Any]], index: int, item: Dict[str, Any]) -> List[Dict[str, Any]]:
    ordered = sort_by_order(items)
    index = max(0, min(index, len(ordered)))
    ordered.insert(index, item)
    return renumber(ordered)


def remove_item(items: List[Dict[str, Any]], index: int) -> List[Dict[str, Any]]:
    ordered = sort_by_order(items)
    if 0 <= index < len(ordered):
        del ordered[index]
    return renumber(ordered)


def move_item(items: List[Dict[str, Any]], from_index: int, to_index: int) -> List[Dict[str, Any]]:
    ordered = sort_by_order(items)
    if not 0 <= from_index < len(ordered):
        return renumber(ordered)
    moved = ordered.pop(from_index)
    to_index = max(0, min(to_index, len(ordered)))
    ordered.insert(to_index, moved)
    return renumber(ordered)
