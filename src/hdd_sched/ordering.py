"""Ordering utility — an in-place quicksort with a pluggable key.

SSTF and SCAN both need the request batch grouped by track.  They get
there with two passes of the same sort:

    1. Sort by **sector**.
    2. Sort by **track**.

The second pass runs over a key with very few distinct values (0-200),
so it mostly shuffles whole track groups into place.  Requests that
share a track often keep the sector order from the first pass, but the
partition scheme is not stable, so nothing promises it.

The sort itself is the classic last-element-pivot (Lomuto) quicksort:
O(n log n) expected, O(n^2) on already-sorted or all-equal input.
Which field to compare is a *strategy* — a key function passed in —
so one partition routine serves both passes.

Ranges waiting to be partitioned are kept on an explicit stack rather
than the call stack, so a degenerate input costs time but can never
hit the interpreter's recursion limit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from hdd_sched.requests import Request

T = TypeVar("T")


def by_sector(request: Request) -> int:
    """Sort key: the request's sector."""
    return request.sector


def by_track(request: Request) -> int:
    """Sort key: the request's track."""
    return request.track


def partition(items: list[T], low: int, high: int, *, key: Callable[[T], int]) -> int:
    """Partition ``items[low:high + 1]`` around its last element.

    Everything with a key <= the pivot's ends up left of the pivot,
    everything greater ends up right of it.

    Returns:
        The pivot's final index.

    """
    pivot = key(items[high])
    boundary = low - 1
    for i in range(low, high):
        if key(items[i]) <= pivot:
            boundary += 1
            items[boundary], items[i] = items[i], items[boundary]
    items[boundary + 1], items[high] = items[high], items[boundary + 1]
    return boundary + 1


def quicksort(items: list[T], *, key: Callable[[T], int]) -> None:
    """Sort ``items`` in place so that ``key`` is non-decreasing.

    Ties are broken arbitrarily.
    """
    pending = [(0, len(items) - 1)]
    while pending:
        low, high = pending.pop()
        if low >= high:
            continue
        pivot_index = partition(items, low, high, key=key)
        pending.append((low, pivot_index - 1))
        pending.append((pivot_index + 1, high))


def sort_by_sector_then_track(requests: list[Request]) -> None:
    """Group ``requests`` by track in place (sector pass, then track pass)."""
    quicksort(requests, key=by_sector)
    quicksort(requests, key=by_track)
