"""Ordering, pivoting and grouping helpers for plain iterables."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator
from typing import TypeVar

T = TypeVar("T")
K1 = TypeVar("K1", bound=Hashable)
K2 = TypeVar("K2", bound=Hashable)
V = TypeVar("V")


def _parse_sort_expression(sort_expression: str | None) -> tuple[str, bool]:
    """Split ``"attr [asc|desc]"`` into an attribute name and a descending flag."""
    parts = (sort_expression or "").split(" ")
    attribute = parts[0]
    descending = len(parts) > 1 and "esc" in parts[1].lower()
    return attribute, descending


def order_by(source: Iterable[T], sort_expression: str | None) -> list[T]:
    """Sort items by an attribute named in ``sort_expression``.

    ``"name"`` sorts ascending and ``"name desc"`` descending. An empty
    expression returns the items in their original order.
    """
    items = list(source)
    attribute, descending = _parse_sort_expression(sort_expression)
    if not attribute:
        return items

    for item in items:
        if not hasattr(item, attribute):
            raise AttributeError(f"No attribute {attribute!r} in {type(item).__name__}")

    return sorted(items, key=lambda item: getattr(item, attribute), reverse=descending)


def pivot(
    source: Iterable[T],
    first_key: Callable[[T], K1],
    second_key: Callable[[T], K2],
    aggregate: Callable[[list[T]], V],
) -> dict[K1, dict[K2, V]]:
    """Group by ``first_key``, spread ``second_key`` into columns and aggregate each cell."""
    rows: dict[K1, dict[K2, list[T]]] = {}
    for item in source:
        row = rows.setdefault(first_key(item), {})
        row.setdefault(second_key(item), []).append(item)

    return {
        row_key: {column_key: aggregate(cell) for column_key, cell in columns.items()}
        for row_key, columns in rows.items()
    }


def groupings_to_dict(groupings: Iterable[tuple[K1, Iterable[V]]]) -> dict[K1, list[V]]:
    """Convert ``(key, items)`` groupings, e.g. from ``itertools.groupby``, into a dict of lists."""
    return {key: list(group) for key, group in groupings}


def from_iterator(iterator: Iterator[T] | None) -> Iterator[T]:
    """Yield the remaining items of ``iterator``; a None iterator yields nothing."""
    if iterator is None:
        return
    yield from iterator

