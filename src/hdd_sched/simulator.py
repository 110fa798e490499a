"""Head-state simulator — stepping a virtual disk head through requests.

The simulator owns one ``HeadState`` (track, sector, elapsed time) and
moves it through requests one **visit** at a time:

    1. Seek: move to the request's track, paying seek time and
       recording the distance.
    2. Land: work out which sector is under the head now.  The platter
       kept spinning during the seek, so this depends on total elapsed
       time, not on where the head was before.
    3. Wait: let the platter rotate forward to the request's sector.
    4. Transfer: move one block.
    5. Account: add the textbook access-time estimate to a separate
       accumulator (it never feeds back into elapsed time).

Every policy invocation gets a fresh simulator, parked at the geometry's
park position with zero elapsed time.  Nothing is shared between runs,
so replaying the same order twice gives identical results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from hdd_sched.geometry import DEFAULT_GEOMETRY, DriveGeometry
from hdd_sched.timing import (
    access_time,
    advance_sector_after_seek,
    advance_sector_by,
    rotational_latency,
    sector_distance,
    seek_duration,
    transfer_duration,
)

if TYPE_CHECKING:
    from hdd_sched.requests import Request


@dataclass
class HeadState:
    """Where the head is and how long the run has taken so far."""

    track: int
    sector: int
    elapsed_ms: float = 0.0


@dataclass(frozen=True)
class SimulationResult:
    """Summary of one policy's traversal of one request batch.

    Attributes:
        policy: Name of the policy that produced the visiting order.
        request_count: Number of requests visited.
        total_elapsed_ms: Simulated time from the first seek to the last
            transfer.
        average_seek_distance: Mean tracks crossed per request.
        average_access_time: Mean textbook access-time estimate.
        average_request_time: Mean simulated time per request.
        average_seek_time: Mean simulated seek time per request.
        average_rotational_delay: Mean simulated rotational wait.
        total_bytes: Bytes transferred over the whole run.
        visit_order: Requests in the order the head visited them.

    """

    policy: str
    request_count: int = 0
    total_elapsed_ms: float = 0.0
    average_seek_distance: float = 0.0
    average_access_time: float = 0.0
    average_request_time: float = 0.0
    average_seek_time: float = 0.0
    average_rotational_delay: float = 0.0
    total_bytes: int = 0
    visit_order: tuple[Request, ...] = ()


def projected_time(head: HeadState, request: Request, *, geometry: DriveGeometry) -> float:
    """Return the seek + rotational time to reach ``request`` from ``head``.

    Uses the same arithmetic as a visit step but leaves ``head`` alone.
    """
    seek = seek_duration(request.track - head.track, geometry=geometry)
    arrival = head.elapsed_ms + seek
    landed = advance_sector_after_seek(arrival, geometry=geometry)
    return seek + rotational_latency(landed, request.sector, geometry=geometry)


class HeadSimulator:
    """Drive one head through a sequence of visits and summarise the run."""

    def __init__(self, *, geometry: DriveGeometry = DEFAULT_GEOMETRY) -> None:
        """Create a simulator with the head parked.

        Args:
            geometry: The drive being simulated.

        """
        self._geometry = geometry
        self._head = HeadState(track=geometry.park_track, sector=geometry.park_sector)
        self._transfer_ms = transfer_duration(geometry=geometry)
        self._visited: list[Request] = []
        self._seek_distance = 0
        self._seek_ms = 0.0
        self._rotation_ms = 0.0
        self._access_ms = 0.0

    @property
    def head(self) -> HeadState:
        """Return a snapshot of the current head state."""
        return HeadState(
            track=self._head.track,
            sector=self._head.sector,
            elapsed_ms=self._head.elapsed_ms,
        )

    @property
    def visited(self) -> list[Request]:
        """Return the requests visited so far, in order."""
        return list(self._visited)

    def visit(self, request: Request) -> None:
        """Move the head to ``request`` and service it."""
        geometry = self._geometry
        head = self._head

        distance = abs(request.track - head.track)
        seek = seek_duration(distance, geometry=geometry)
        head.elapsed_ms += seek
        head.track = request.track
        self._seek_distance += distance
        self._seek_ms += seek

        head.sector = advance_sector_after_seek(head.elapsed_ms, geometry=geometry)

        wait = sector_distance(head.sector, request.sector, geometry=geometry)
        latency = rotational_latency(head.sector, request.sector, geometry=geometry)
        head.elapsed_ms += latency
        head.sector = advance_sector_by(head.sector, wait, geometry=geometry)
        self._rotation_ms += latency

        head.elapsed_ms += self._transfer_ms

        self._access_ms += access_time(self._transfer_ms, geometry=geometry)
        self._visited.append(request)

    def result(self, policy: str) -> SimulationResult:
        """Finalise the run into a ``SimulationResult``.

        A run with no visits yields an all-zero result rather than
        dividing by zero.
        """
        count = len(self._visited)
        if count == 0:
            return SimulationResult(policy=policy)
        elapsed = self._head.elapsed_ms
        return SimulationResult(
            policy=policy,
            request_count=count,
            total_elapsed_ms=elapsed,
            average_seek_distance=self._seek_distance / count,
            average_access_time=self._access_ms / count,
            average_request_time=elapsed / count,
            average_seek_time=self._seek_ms / count,
            average_rotational_delay=self._rotation_ms / count,
            total_bytes=count * self._geometry.block_bytes,
            visit_order=tuple(self._visited),
        )
