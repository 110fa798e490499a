"""Drive geometry — the immutable configuration of the simulated disk.

A hard disk is described by a handful of numbers: how many tracks the
arm can reach, how many sectors fit on each track, how fast the platter
spins, how quickly the arm moves and how fast data streams off the
platter once it is positioned.

The simulated drive mirrors a small 12,000 RPM disk:

    - 201 tracks (0-200), 360 sectors per track (one per degree).
    - 12,000 RPM, so one full rotation takes 5 ms.
    - 2.5 ms average seek time.
    - 4 KB blocks transferred at 6 GB/s.

Every component receives a ``DriveGeometry`` explicitly instead of
reading module-level constants, so tests can shrink or reshape the
drive without touching global state.  ``DEFAULT_GEOMETRY`` is the
single shared instance used when callers don't supply one.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

_MS_PER_MINUTE = 60_000
_BYTES_PER_KB = 1024
_KB_PER_GB = 1024 * 1024


class GeometryError(ValueError):
    """Raise when a drive geometry is invalid or cannot be loaded."""


@dataclass(frozen=True)
class DriveGeometry:
    """Physical layout and timing parameters of the simulated drive.

    Attributes:
        track_count: Number of addressable tracks (0-based).
        sector_count: Sectors per track (0-based).
        rpm: Spindle speed in rotations per minute.
        average_seek_ms: Nominal average seek time in milliseconds.
        block_size_kb: Size of the block moved by one request.
        transfer_rate_gb_s: Sustained transfer rate in GB/s.
        park_track: Track the head parks on before every experiment.
        park_sector: Sector under the head before every experiment.

    """

    track_count: int = 201
    sector_count: int = 360
    rpm: int = 12_000
    average_seek_ms: float = 2.5
    block_size_kb: int = 4
    transfer_rate_gb_s: float = 6.0
    park_track: int = 100
    park_sector: int = 0

    def __post_init__(self) -> None:
        """Reject geometries the timing model cannot work with."""
        if self.track_count < 1:
            msg = f"track_count must be positive, got {self.track_count}"
            raise GeometryError(msg)
        if self.sector_count < 1:
            msg = f"sector_count must be positive, got {self.sector_count}"
            raise GeometryError(msg)
        if self.rpm <= 0:
            msg = f"rpm must be positive, got {self.rpm}"
            raise GeometryError(msg)
        if self.average_seek_ms < 0:
            msg = f"average_seek_ms must not be negative, got {self.average_seek_ms}"
            raise GeometryError(msg)
        if self.block_size_kb <= 0 or self.transfer_rate_gb_s <= 0:
            msg = "block_size_kb and transfer_rate_gb_s must be positive"
            raise GeometryError(msg)
        if not 0 <= self.park_track < self.track_count:
            msg = f"park_track {self.park_track} outside [0, {self.track_count})"
            raise GeometryError(msg)
        if not 0 <= self.park_sector < self.sector_count:
            msg = f"park_sector {self.park_sector} outside [0, {self.sector_count})"
            raise GeometryError(msg)

    @property
    def rotations_per_ms(self) -> float:
        """Return platter rotations per millisecond (0.2 at 12,000 RPM)."""
        return self.rpm / _MS_PER_MINUTE

    @property
    def rotation_ms(self) -> float:
        """Return the duration of one full platter rotation."""
        return 1 / self.rotations_per_ms

    @property
    def ms_per_sector(self) -> float:
        """Return how long one sector takes to pass under the head."""
        return self.rotation_ms / self.sector_count

    @property
    def mean_seek_distance(self) -> float:
        """Return the mean distance between two uniformly random tracks.

        For tracks drawn uniformly from ``0..N-1`` the expected value of
        ``|a - b|`` is ``(N^2 - 1) / (3N)``, about 67 tracks on a
        201-track drive.
        """
        n = self.track_count
        return (n * n - 1) / (3 * n)

    @property
    def seek_time_per_track(self) -> float:
        """Return the seek cost of one track of arm movement, in ms.

        Calibrated so that a seek over the mean random distance costs
        exactly the drive's nominal average seek time.
        """
        if self.mean_seek_distance == 0:
            return 0.0
        return self.average_seek_ms / self.mean_seek_distance

    @property
    def block_bytes(self) -> int:
        """Return the number of bytes moved by one request."""
        return self.block_size_kb * _BYTES_PER_KB

    @property
    def transfer_ms(self) -> float:
        """Return the time to move one block at the transfer rate."""
        return self.block_size_kb / (self.transfer_rate_gb_s * _KB_PER_GB) * 1000

    def to_dict(self) -> dict[str, int | float]:
        """Return the geometry as a plain JSON-friendly dict."""
        return asdict(self)


DEFAULT_GEOMETRY = DriveGeometry()


def load_geometry(path: Path) -> DriveGeometry:
    """Load a geometry from a JSON file of overrides.

    Keys missing from the file keep their default values.

    Args:
        path: Path to a JSON object such as ``{"track_count": 401}``.

    Returns:
        The resulting geometry.

    Raises:
        GeometryError: If the file cannot be read, is not a JSON object,
            names an unknown field, or describes an invalid drive.

    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load geometry: {e}"
        raise GeometryError(msg) from e

    if not isinstance(data, dict):
        msg = "Geometry file must contain a JSON object"
        raise GeometryError(msg)

    known = {f.name for f in fields(DriveGeometry)}
    unknown = sorted(set(data) - known)
    if unknown:
        msg = "Unknown geometry fields: " + ", ".join(unknown)
        raise GeometryError(msg)

    try:
        return DriveGeometry(**data)
    except TypeError as e:
        msg = f"Invalid geometry value: {e}"
        raise GeometryError(msg) from e
