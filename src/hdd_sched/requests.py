"""I/O requests — what the disk head is asked to visit.

A request names one block on the platter by its ``(track, sector)``
address.  Requests are immutable values: policies reorder *lists* of
requests, but never change a request itself.

The generator draws tracks and sectors uniformly at random, the same
way a workload of unrelated processes scatters reads across a disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from hdd_sched.geometry import DEFAULT_GEOMETRY, DriveGeometry

if TYPE_CHECKING:
    import random
    from collections.abc import Iterable


class RequestRangeError(ValueError):
    """Raise when a request addresses a track or sector the drive lacks."""


@dataclass(frozen=True)
class Request:
    """A single block request at ``(track, sector)``."""

    track: int
    sector: int

    def __str__(self) -> str:
        """Format as ``track:sector``."""
        return f"{self.track}:{self.sector}"


def validate_requests(
    requests: Iterable[Request],
    *,
    geometry: DriveGeometry = DEFAULT_GEOMETRY,
) -> None:
    """Check that every request lies within the drive's bounds.

    Raises:
        RequestRangeError: On the first request outside the geometry.

    """
    for index, req in enumerate(requests):
        if not 0 <= req.track < geometry.track_count:
            msg = f"Request {index} track {req.track} outside [0, {geometry.track_count})"
            raise RequestRangeError(msg)
        if not 0 <= req.sector < geometry.sector_count:
            msg = f"Request {index} sector {req.sector} outside [0, {geometry.sector_count})"
            raise RequestRangeError(msg)


def parse_request(text: str) -> Request:
    """Parse a ``track:sector`` string into a request.

    Raises:
        ValueError: If the text is not two integers separated by ``:``.

    """
    track, sep, sector = text.partition(":")
    if not sep:
        msg = f"Expected 'track:sector', got {text!r}"
        raise ValueError(msg)
    return Request(track=int(track), sector=int(sector))


def generate_requests(
    count: int,
    *,
    rng: random.Random,
    geometry: DriveGeometry = DEFAULT_GEOMETRY,
) -> list[Request]:
    """Return ``count`` requests with uniformly distributed addresses.

    Args:
        count: Number of requests to generate.
        rng: The random source.  Each trial should own its own instance
            so trials stay reproducible and independent.
        geometry: Bounds for the generated tracks and sectors.

    """
    return [
        Request(
            track=rng.randrange(geometry.track_count),
            sector=rng.randrange(geometry.sector_count),
        )
        for _ in range(count)
    ]
