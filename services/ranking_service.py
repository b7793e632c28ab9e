"""
Generic ranking helpers shared by every dashboard section.

group_count: count-per-category, highest count first.
top_n: filter, sort by a caller-supplied key, truncate.

Both are pure functions over an in-memory collection; ordering policy
belongs to the caller.
"""

from collections import Counter
from typing import Any, Callable, Hashable, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")

UNKNOWN_GROUP = "Unknown"


def group_count(
    entities: Iterable[T],
    predicate: Optional[Callable[[T], bool]],
    key: Callable[[T], Optional[str]],
    limit: int,
) -> List[Tuple[str, int]]:
    """
    Count entities per group.

    Args:
        entities: Rows to aggregate
        predicate: Filter applied before grouping (None keeps everything)
        key: Group key, e.g. country. Empty keys group under "Unknown"
        limit: Maximum groups returned

    Returns:
        (key, count) pairs sorted by count descending, then key ascending
    """
    counts: Counter = Counter()
    for entity in entities:
        if predicate is not None and not predicate(entity):
            continue
        counts[key(entity) or UNKNOWN_GROUP] += 1

    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:max(limit, 0)]


def top_n(
    entities: Iterable[T],
    predicate: Optional[Callable[[T], bool]],
    sort_key: Callable[[T], Hashable],
    limit: int,
    reverse: bool = False,
) -> List[T]:
    """
    Select the first `limit` entities under `sort_key`.

    Sorting is stable, so entities with equal keys keep their input order.
    """
    selected = [e for e in entities if predicate is None or predicate(e)]
    selected.sort(key=sort_key, reverse=reverse)
    return selected[:max(limit, 0)]


def count_where(entities: Iterable[Any], predicate: Callable[[Any], bool]) -> int:
    """Number of entities matching `predicate`."""
    return sum(1 for e in entities if predicate(e))
