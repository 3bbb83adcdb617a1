from typing import List, Sequence, TypeVar

T = TypeVar("T")


def compact_order(items: Sequence[T], order_field: str = "order") -> List[T]:
    """
    Re-assigns sequential order values (0..N-1) following list position.

    Items are pydantic models; the ones whose order changes are copied,
    the others are returned as they are.
    """
    compacted = []
    for index, item in enumerate(items):
        if getattr(item, order_field) != index:
            item = item.model_copy(update={order_field: index})
        compacted.append(item)
    return compacted


def sort_by_order(items: Sequence[T], order_field: str = "order") -> List[T]:
    """Stable sort: items sharing an order value keep their list position."""
    return sorted(items, key=lambda item: getattr(item, order_field))
