"""Tests for the head-state simulator.

Each visit seeks, lands on whatever sector the spinning platter has
brought round, waits for the target sector, and transfers one block.
The textbook access-time estimate is accumulated on the side.
"""

import pytest

from hdd_sched.geometry import DEFAULT_GEOMETRY, DriveGeometry
from hdd_sched.requests import Request
from hdd_sched.simulator import HeadSimulator, HeadState, SimulationResult, projected_time
from hdd_sched.timing import advance_sector_after_seek, seek_duration

_G = DEFAULT_GEOMETRY
_PARK_TRACK = 100


class TestParkedHead:
    """Every simulator starts parked at the geometry's park position."""

    def test_initial_state(self) -> None:
        """Track 100, sector 0, no time elapsed."""
        head = HeadSimulator().head
        assert head == HeadState(track=_PARK_TRACK, sector=0, elapsed_ms=0.0)

    def test_custom_park(self) -> None:
        """The park position comes from the geometry."""
        geometry = DriveGeometry(park_track=3, park_sector=7)
        head = HeadSimulator(geometry=geometry).head
        assert (head.track, head.sector) == (3, 7)

    def test_head_is_snapshot(self) -> None:
        """Mutating the returned state does not move the real head."""
        sim = HeadSimulator()
        sim.head.track = 0
        assert sim.head.track == _PARK_TRACK


class TestVisit:
    """A single visit step."""

    def test_request_at_park_position(self) -> None:
        """No seek, no rotation: only the transfer is paid."""
        sim = HeadSimulator()
        sim.visit(Request(_PARK_TRACK, 0))
        result = sim.result("fifo")
        assert result.average_seek_distance == 0.0
        assert result.average_rotational_delay == 0.0
        assert result.total_elapsed_ms == _G.transfer_ms

    def test_rotation_only(self) -> None:
        """Same track, 90 sectors ahead: a quarter rotation plus transfer."""
        sim = HeadSimulator()
        sim.visit(Request(_PARK_TRACK, 90))
        result = sim.result("fifo")
        assert result.average_rotational_delay == pytest.approx(1.25)
        assert result.total_elapsed_ms == pytest.approx(1.25 + _G.transfer_ms)

    def test_seek_then_rotation(self) -> None:
        """The landing sector reflects rotation during the seek."""
        sim = HeadSimulator()
        sim.visit(Request(110, 0))
        seek = seek_duration(10, geometry=_G)
        landed = advance_sector_after_seek(seek, geometry=_G)
        wait = (_G.sector_count - landed) * _G.ms_per_sector
        result = sim.result("fifo")
        expected_distance = 10
        assert landed > 0
        assert result.average_seek_distance == expected_distance
        assert result.average_seek_time == pytest.approx(seek)
        assert result.total_elapsed_ms == pytest.approx(seek + wait + _G.transfer_ms)

    def test_head_ends_on_request(self) -> None:
        """After a visit the head sits over the requested block."""
        sim = HeadSimulator()
        for req in [Request(150, 10), Request(50, 300), Request(120, 0), Request(120, 359)]:
            sim.visit(req)
            assert (sim.head.track, sim.head.sector) == (req.track, req.sector)
            assert 0 <= sim.head.sector < _G.sector_count

    def test_elapsed_time_grows(self) -> None:
        """Every visit costs at least one transfer."""
        sim = HeadSimulator()
        previous = 0.0
        for req in [Request(100, 0), Request(100, 0), Request(0, 0)]:
            sim.visit(req)
            assert sim.head.elapsed_ms >= previous + _G.transfer_ms
            previous = sim.head.elapsed_ms

    def test_access_time_independent_of_motion(self) -> None:
        """The access-time estimate is the same per request regardless of path."""
        near = HeadSimulator()
        near.visit(Request(100, 0))
        far = HeadSimulator()
        far.visit(Request(0, 359))
        assert near.result("x").average_access_time == far.result("x").average_access_time

    def test_visited_trace(self) -> None:
        """The simulator records the visit order."""
        sim = HeadSimulator()
        order = [Request(1, 1), Request(2, 2)]
        for req in order:
            sim.visit(req)
        assert sim.visited == order


class TestResult:
    """Finalisation divides accumulators by the request count."""

    def test_empty_run(self) -> None:
        """No visits yields an all-zero result, not a ZeroDivisionError."""
        result = HeadSimulator().result("scan")
        assert result == SimulationResult(policy="scan")
        assert result.request_count == 0
        assert result.average_access_time == 0.0

    def test_averages(self) -> None:
        """Seek distance and request time are per-request means."""
        sim = HeadSimulator()
        sim.visit(Request(110, 0))
        sim.visit(Request(90, 0))
        result = sim.result("fifo")
        request_count = 2
        assert result.request_count == request_count
        assert result.average_seek_distance == pytest.approx(15.0)
        assert result.average_request_time == pytest.approx(result.total_elapsed_ms / 2)

    def test_total_bytes(self) -> None:
        """One block per request."""
        sim = HeadSimulator()
        for _ in range(3):
            sim.visit(Request(100, 0))
        assert sim.result("fifo").total_bytes == 3 * _G.block_bytes

    def test_injected_geometry_drives_result(self) -> None:
        """Block size and seek cost come from the geometry given at construction."""
        small = DriveGeometry(track_count=11, sector_count=8, park_track=5, block_size_kb=16)
        sim = HeadSimulator(geometry=small)
        sim.visit(Request(10, 0))
        result = sim.result("fifo")
        assert result.total_bytes == small.block_bytes
        assert result.average_seek_time == pytest.approx(seek_duration(5, geometry=small))

    def test_result_is_frozen(self) -> None:
        """Results cannot be modified after return."""
        result = HeadSimulator().result("fifo")
        with pytest.raises(AttributeError):
            result.request_count = 4  # type: ignore[misc]


class TestProjectedTime:
    """Projected time previews a visit without performing it."""

    def test_matches_visit(self) -> None:
        """Projected seek + rotation equals what the visit then spends."""
        sim = HeadSimulator()
        req = Request(160, 45)
        expected = projected_time(sim.head, req, geometry=_G)
        sim.visit(req)
        assert sim.head.elapsed_ms - _G.transfer_ms == pytest.approx(expected)

    def test_does_not_mutate(self) -> None:
        """The head state passed in is untouched."""
        head = HeadState(track=100, sector=0)
        projected_time(head, Request(0, 5), geometry=_G)
        assert head == HeadState(track=100, sector=0)

    def test_zero_for_parked_block(self) -> None:
        """The block under the parked head costs nothing to reach."""
        head = HeadState(track=100, sector=0)
        assert projected_time(head, Request(100, 0), geometry=_G) == 0.0
