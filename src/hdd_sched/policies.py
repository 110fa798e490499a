"""Disk scheduling policies — the order in which the head visits requests.

All four policies drive the same head simulator; they differ only in the
*order* they hand it.  Think of the head as an elevator in a building
with 201 floors:

    - **FIFO** — stop at floors in the order the buttons were pressed.
    - **LIFO** — serve the most recent button press first.
    - **SSTF** — start at the cheapest floor to reach, sweep away from
      the parking floor, then sweep back through the rest.
    - **SCAN** — go up from the parking floor to the top request, then
      come down through everything below.

SSTF here is a *batch* approximation.  True shortest-seek-time-first
re-evaluates the nearest request after every move, which is O(n^2).
Instead the batch is sorted once and walked in a single bidirectional
sweep starting from the best entry point.  The sweep is an explicit
state machine:

    UNSTARTED ──▶ ASCENDING ──▶ DESCENDING ──▶ DONE
        │                                       ▲
        └──────▶ DESCENDING ──▶ ASCENDING ──────┘

Each phase runs exactly once, as one linear walk over a slice of the
sorted batch.

All policies implement the ``DiskPolicy`` protocol (Strategy pattern).
They work on the list they are given, so callers pass a private copy.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from hdd_sched.ordering import sort_by_sector_then_track
from hdd_sched.simulator import projected_time

if TYPE_CHECKING:
    from hdd_sched.geometry import DriveGeometry
    from hdd_sched.requests import Request
    from hdd_sched.simulator import HeadState


class UnknownPolicyError(ValueError):
    """Raise when a policy id does not name a known policy."""


class PolicyId(StrEnum):
    """Identifiers of the available scheduling policies."""

    FIFO = "fifo"
    SSTF = "sstf"
    SCAN = "scan"
    LIFO = "lifo"


class DiskPolicy(Protocol):
    """Protocol for disk scheduling policies (Strategy pattern)."""

    name: str

    def schedule(
        self,
        requests: list[Request],
        *,
        head: HeadState,
        geometry: DriveGeometry,
    ) -> list[Request]:
        """Return the order in which requests should be visited.

        Args:
            requests: Private copy of the batch; may be reordered or consumed.
            head: The parked head the traversal starts from.
            geometry: The simulated drive.

        Returns:
            Every request exactly once, in visiting order.

        """
        ...  # pragma: no cover


class FIFOPolicy:
    """First In, First Out — visit requests in arrival order.

    The baseline: fair, but the arm zigzags wildly across the disk.
    """

    name = PolicyId.FIFO.value

    def schedule(
        self,
        requests: list[Request],
        *,
        head: HeadState,  # noqa: ARG002
        geometry: DriveGeometry,  # noqa: ARG002
    ) -> list[Request]:
        """Return requests in their original order."""
        return list(requests)


class LIFOPolicy:
    """Last In, First Out — the newest request is served first."""

    name = PolicyId.LIFO.value

    def schedule(
        self,
        requests: list[Request],
        *,
        head: HeadState,  # noqa: ARG002
        geometry: DriveGeometry,  # noqa: ARG002
    ) -> list[Request]:
        """Consume requests from the tail of the list."""
        order: list[Request] = []
        while requests:
            order.append(requests.pop())
        return order


class SweepState(StrEnum):
    """Phases of the SSTF bidirectional sweep."""

    UNSTARTED = "unstarted"
    ASCENDING = "ascending"
    DESCENDING = "descending"
    DONE = "done"


def next_sweep_state(state: SweepState, *, ascend_first: bool) -> SweepState:
    """Return the phase that follows ``state``.

    Both directional phases run exactly once; ``ascend_first`` picks
    which one leaves UNSTARTED.
    """
    match state:
        case SweepState.UNSTARTED:
            return SweepState.ASCENDING if ascend_first else SweepState.DESCENDING
        case SweepState.ASCENDING:
            return SweepState.DESCENDING if ascend_first else SweepState.DONE
        case SweepState.DESCENDING:
            return SweepState.DONE if ascend_first else SweepState.ASCENDING
        case _:
            return SweepState.DONE


def best_start_index(
    requests: list[Request],
    *,
    head: HeadState,
    geometry: DriveGeometry,
) -> int:
    """Return the index of the request that is quickest to reach from ``head``.

    Compares full projected time (seek + rotational wait).  Ties go to
    the lowest index.
    """
    best_index = 0
    best_time = projected_time(head, requests[0], geometry=geometry)
    for i in range(1, len(requests)):
        candidate = projected_time(head, requests[i], geometry=geometry)
        if candidate < best_time:
            best_index = i
            best_time = candidate
    return best_index


class SSTFPolicy:
    """Shortest Seek Time First, batch variant.

    The batch is grouped by track, the cheapest request to reach from
    the parked head becomes the entry point, and the head then sweeps
    once in each direction from there.  It moves first in the direction
    of the entry point relative to the parked track (up if the entry
    point is at or above it), so the entry point is always the first
    request visited.
    """

    name = PolicyId.SSTF.value

    def schedule(
        self,
        requests: list[Request],
        *,
        head: HeadState,
        geometry: DriveGeometry,
    ) -> list[Request]:
        """Return requests in entry-point-outward sweep order."""
        if not requests:
            return []
        sort_by_sector_then_track(requests)
        start = best_start_index(requests, head=head, geometry=geometry)
        ascend_first = requests[start].track >= head.track

        # The entry point belongs to whichever phase runs first.
        if ascend_first:
            upward = requests[start:]
            downward = requests[:start][::-1]
        else:
            upward = requests[start + 1 :]
            downward = requests[: start + 1][::-1]

        order: list[Request] = []
        state = next_sweep_state(SweepState.UNSTARTED, ascend_first=ascend_first)
        while state is not SweepState.DONE:
            order.extend(upward if state is SweepState.ASCENDING else downward)
            state = next_sweep_state(state, ascend_first=ascend_first)
        return order


class SCANPolicy:
    """SCAN (elevator) — sweep up from the head, then reverse.

    The head visits every request at or above its parked track in
    ascending order, then turns around and visits the rest in
    descending order.  One full back-and-forth pass over exactly this
    batch; nothing arrives mid-sweep.
    """

    name = PolicyId.SCAN.value

    def schedule(
        self,
        requests: list[Request],
        *,
        head: HeadState,
        geometry: DriveGeometry,  # noqa: ARG002
    ) -> list[Request]:
        """Return requests in SCAN (elevator) order."""
        if not requests:
            return []
        sort_by_sector_then_track(requests)
        start = len(requests)
        for i, req in enumerate(requests):
            if req.track >= head.track:
                start = i
                break
        return requests[start:] + requests[:start][::-1]


_POLICIES: dict[PolicyId, type[FIFOPolicy | LIFOPolicy | SSTFPolicy | SCANPolicy]] = {
    PolicyId.FIFO: FIFOPolicy,
    PolicyId.SSTF: SSTFPolicy,
    PolicyId.SCAN: SCANPolicy,
    PolicyId.LIFO: LIFOPolicy,
}


def parse_policy_id(policy_id: PolicyId | str) -> PolicyId:
    """Return the ``PolicyId`` named by ``policy_id`` (case-insensitive).

    Raises:
        UnknownPolicyError: If no policy has that name.

    """
    if isinstance(policy_id, PolicyId):
        return policy_id
    names = ", ".join(p.value for p in PolicyId)
    msg = f"Unknown policy '{policy_id}'. Use {names}."
    if not isinstance(policy_id, str):
        raise UnknownPolicyError(msg)
    try:
        return PolicyId(policy_id.strip().lower())
    except ValueError:
        raise UnknownPolicyError(msg) from None


def get_policy(policy_id: PolicyId | str) -> DiskPolicy:
    """Return a fresh policy instance for ``policy_id``."""
    return _POLICIES[parse_policy_id(policy_id)]()
