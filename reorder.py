"""
Helpers for moving one item of a sorted list to a new position.

A reorder request names the target item and its new neighbours:
  - exactly one of `before_id` (the item that will come right after the
    target) or `to_last`
  - exactly one of `after_id` (the item that will come right before the
    target) or `to_first`

Given [A, B, C] and {target_id: B, before_id: C, after_id: A}, the neighbours
are worked out against [A, C] so that B lands between them (a no-op, but valid).
"""

from operator import attrgetter
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

from fractional_indexing import SortKeyProvider


class ReorderError(ValueError):
    pass


class ReorderNeighbors(NamedTuple):
    target: Any
    before: Optional[Any]
    after: Optional[Any]
    to_last: bool
    to_first: bool


class ReorderBisection(NamedTuple):
    target: Any
    target_index: int
    befores: List[Any]
    afters: List[Any]


_default_id = attrgetter("id")
_default_sort_key = attrgetter("sort_key")

_UNSET = object()


def _find(items: Sequence[Any], item_id: Any, id_getter: Callable[[Any], Any]) -> Any:
    for item in items:
        if id_getter(item) == item_id:
            return item
    return None


def _index_of(items: Sequence[Any], wanted: Any) -> int:
    for index, item in enumerate(items):
        if item is wanted:
            return index
    raise ValueError("item is not in the list")


def derive_reorder_neighbors(
    items: Sequence[Any],
    target_id: Any,
    before_id: Any = None,
    to_last: bool = False,
    after_id: Any = None,
    to_first: bool = False,
    id_getter: Callable[[Any], Any] = _default_id,
) -> ReorderNeighbors:
    """
    Validate a reorder request and resolve the target's new neighbours.

    `items` must already be in sort key order.

    Raises:
        ReorderError: If an item cannot be found, both a neighbour and its
            to_first/to_last flag are given, or the neighbours are not adjacent
    """
    target = _find(items, target_id, id_getter)
    if target is None:
        raise ReorderError(f"reorder operation cannot locate target_id '{target_id}'")

    others = [item for item in items if item is not target]

    # Identify the neighbour that follows the target
    before = _UNSET
    if to_last:
        before = None
    if before_id is not None:
        if before is not _UNSET:
            raise ReorderError(
                f"reorder operation cannot specify both before_id '{before_id}' and to_last"
            )
        before = _find(others, before_id, id_getter)
        if before is None:
            before = _UNSET
    if before is _UNSET:
        raise ReorderError(f"reorder operation cannot locate before_id '{before_id}'")

    # Identify the neighbour that precedes the target
    after = _UNSET
    if to_first:
        after = None
    if after_id is not None:
        if after is not _UNSET:
            raise ReorderError(
                f"reorder operation cannot specify both after_id '{after_id}' and to_first"
            )
        after = _find(others, after_id, id_getter)
        if after is None:
            after = _UNSET
    if after is _UNSET:
        raise ReorderError(f"reorder operation cannot locate after_id '{after_id}'")

    # The neighbours must currently sit next to each other
    if before is None:
        if after is None:
            if others:
                raise ReorderError(
                    "reorder operation cannot reorder to first-and-last unless the list only contains the target"
                )
        elif _index_of(others, after) != len(others) - 1:
            raise ReorderError(f"reorder operation expected after_id '{after_id}' to be the last item")
    else:
        before_index = _index_of(others, before)
        if after is None:
            if before_index != 0:
                raise ReorderError(f"reorder operation expected before_id '{before_id}' to be the first item")
        elif _index_of(others, after) != before_index - 1:
            raise ReorderError(
                f"reorder operation expected before_id '{before_id}' and after_id '{after_id}' to be adjacent"
            )

    return ReorderNeighbors(
        target=target,
        before=before,
        after=after,
        to_last=before is None,
        to_first=after is None,
    )


def bisect_reorder(items: Sequence[Any], neighbors: ReorderNeighbors) -> ReorderBisection:
    """Split the other items around the target's new position."""
    target = neighbors.target
    others = [item for item in items if item is not target]

    if neighbors.to_first:
        return ReorderBisection(target=target, target_index=0, befores=[], afters=others)

    try:
        after_index = _index_of(others, neighbors.after)
    except ValueError:
        raise ReorderError("reorder operation cannot locate the after item for bisection") from None

    target_index = after_index + 1
    return ReorderBisection(
        target=target,
        target_index=target_index,
        befores=others[:target_index],
        afters=others[target_index:],
    )


def sort_key_for_reorder(
    provider: SortKeyProvider,
    neighbors: ReorderNeighbors,
    sort_key_getter: Callable[[Any], Optional[str]] = _default_sort_key,
) -> str:
    """Generate the target's new sort key from its resolved neighbours."""
    if neighbors.after is None and neighbors.before is None:
        return provider.sort_key_initial_item()
    if neighbors.after is None:
        return provider.sort_key_at_first_before(sort_key_getter(neighbors.before))
    if neighbors.before is None:
        return provider.sort_key_at_last_after(sort_key_getter(neighbors.after))
    return provider.sort_key_between(
        sort_key_getter(neighbors.after),
        sort_key_getter(neighbors.before),
    )
