"""Timing model — converting distances and durations into milliseconds.

Servicing one request on a spinning disk costs three things:

    1. **Seek time** — moving the arm radially to the target track.
       Linear in the number of tracks crossed.
    2. **Rotational latency** — waiting for the platter to spin the
       target sector under the head.  The platter only turns one way,
       so the wait is the *forward* circular distance between sectors.
    3. **Transfer time** — reading or writing the block once positioned.

Think of a record player: moving the tone arm to the right groove is the
seek; waiting for the song's start to come around is the rotation; the
song playing is the transfer.

The platter never stops spinning, including while the arm is seeking.
So the sector under the head after a seek depends only on how much time
has passed since the experiment began, not on the sector before the
seek.

Every function here is pure and takes the drive geometry explicitly.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hdd_sched.geometry import DriveGeometry


def seek_duration(distance: int, *, geometry: DriveGeometry) -> float:
    """Return the time to move the arm across ``distance`` tracks."""
    return abs(distance) * geometry.seek_time_per_track


def sector_distance(current: int, target: int, *, geometry: DriveGeometry) -> int:
    """Return how many sectors must pass before ``target`` is under the head.

    The distance is forward-only: if the target has just gone by, the
    head waits almost a full rotation for it to come around again.  The
    result is always in ``[0, sector_count)``.
    """
    if target >= current:
        return target - current
    return (geometry.sector_count - current) + target


def rotational_latency(current: int, target: int, *, geometry: DriveGeometry) -> float:
    """Return the time spent waiting for ``target`` to rotate under the head."""
    return sector_distance(current, target, geometry=geometry) * geometry.ms_per_sector


def transfer_duration(*, geometry: DriveGeometry) -> float:
    """Return the time to transfer one block."""
    return geometry.transfer_ms


def access_time(transfer_ms: float, *, geometry: DriveGeometry) -> float:
    """Return the textbook access-time estimate for one request.

    Average seek + half a rotation + transfer.  This is a reference
    figure for reporting; it is not a replay of actual head motion.
    """
    return geometry.average_seek_ms + geometry.rotation_ms / 2 + transfer_ms


def advance_sector_after_seek(elapsed_ms: float, *, geometry: DriveGeometry) -> int:
    """Return the sector under the head after ``elapsed_ms`` of rotation.

    The platter has been turning since time zero, sweeping
    ``rotations_per_ms * sector_count`` sectors every millisecond.
    Flooring before reducing keeps the result in ``[0, sector_count)``
    for any non-negative elapsed time.
    """
    swept = math.floor(elapsed_ms * geometry.rotations_per_ms * geometry.sector_count)
    return (geometry.park_sector + swept) % geometry.sector_count


def advance_sector_by(sector: int, count: int, *, geometry: DriveGeometry) -> int:
    """Return ``sector`` stepped forward by ``count``, wrapping around the track."""
    return (sector + count) % geometry.sector_count
