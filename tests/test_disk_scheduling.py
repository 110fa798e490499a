"""Tests for the disk scheduling policies.

The policies decide the order in which the head visits a batch:

    - **FIFO** — arrival order.
    - **LIFO** — reverse arrival order.
    - **SSTF** — cheapest entry point, then one sweep each way.
    - **SCAN** — up from the parked track, then back down.
"""

import operator
import random
from collections import Counter
from itertools import pairwise

import pytest

from hdd_sched.geometry import DEFAULT_GEOMETRY
from hdd_sched.policies import (
    FIFOPolicy,
    LIFOPolicy,
    PolicyId,
    SCANPolicy,
    SSTFPolicy,
    SweepState,
    UnknownPolicyError,
    best_start_index,
    get_policy,
    next_sweep_state,
    parse_policy_id,
)
from hdd_sched.requests import Request, generate_requests
from hdd_sched.simulator import HeadState

# -- Example batch: head parked at track 100 ---------------------------------
_BATCH = [Request(150, 10), Request(50, 300), Request(120, 0)]
_G = DEFAULT_GEOMETRY


def _parked() -> HeadState:
    return HeadState(track=_G.park_track, sector=_G.park_sector)


def _tracks(order: list[Request]) -> list[int]:
    return [r.track for r in order]


def _is_two_phase(tracks: list[int]) -> bool:
    """Return True if tracks run one way, then the other way, once each."""
    for first, second in ((operator.le, operator.ge), (operator.ge, operator.le)):
        k = 1
        while k < len(tracks) and first(tracks[k - 1], tracks[k]):
            k += 1
        if all(second(a, b) for a, b in pairwise(tracks[k:])):
            return True
    return False


# -- FIFO / LIFO ---------------------------------------------------------------


class TestFIFO:
    """FIFO visits requests exactly as they arrived."""

    def test_input_order(self) -> None:
        """150, then 50, then 120."""
        order = FIFOPolicy().schedule(list(_BATCH), head=_parked(), geometry=_G)
        assert _tracks(order) == [150, 50, 120]

    def test_empty(self) -> None:
        """Nothing to schedule."""
        assert FIFOPolicy().schedule([], head=_parked(), geometry=_G) == []


class TestLIFO:
    """LIFO visits the newest request first."""

    def test_reverse_order(self) -> None:
        """120, then 50, then 150."""
        order = LIFOPolicy().schedule(list(_BATCH), head=_parked(), geometry=_G)
        assert _tracks(order) == [120, 50, 150]

    def test_consumes_input(self) -> None:
        """LIFO pops from the tail of the list it is given."""
        pending = list(_BATCH)
        LIFOPolicy().schedule(pending, head=_parked(), geometry=_G)
        assert pending == []

    def test_empty(self) -> None:
        """Nothing to schedule."""
        assert LIFOPolicy().schedule([], head=_parked(), geometry=_G) == []


# -- SSTF state machine ----------------------------------------------------------


class TestSweepStateMachine:
    """Each directional phase runs exactly once, then DONE."""

    def test_ascend_first(self) -> None:
        """UNSTARTED -> ASCENDING -> DESCENDING -> DONE."""
        state = SweepState.UNSTARTED
        seen = []
        while state is not SweepState.DONE:
            state = next_sweep_state(state, ascend_first=True)
            seen.append(state)
        assert seen == [SweepState.ASCENDING, SweepState.DESCENDING, SweepState.DONE]

    def test_descend_first(self) -> None:
        """UNSTARTED -> DESCENDING -> ASCENDING -> DONE."""
        state = SweepState.UNSTARTED
        seen = []
        while state is not SweepState.DONE:
            state = next_sweep_state(state, ascend_first=False)
            seen.append(state)
        assert seen == [SweepState.DESCENDING, SweepState.ASCENDING, SweepState.DONE]

    @pytest.mark.parametrize("ascend_first", [True, False])
    def test_done_is_terminal(self, ascend_first: bool) -> None:  # noqa: FBT001
        """DONE never leads anywhere else."""
        assert next_sweep_state(SweepState.DONE, ascend_first=ascend_first) is SweepState.DONE


# -- SSTF ------------------------------------------------------------------------


class TestSSTF:
    """SSTF starts at the cheapest request and sweeps out from it."""

    def test_best_start_uses_projected_time(self) -> None:
        """Track 50 is as far as 150 but its sector comes round sooner."""
        grouped = [Request(50, 300), Request(120, 0), Request(150, 10)]
        assert best_start_index(grouped, head=_parked(), geometry=_G) == 0

    def test_descend_first(self) -> None:
        """Entry point below the parked track: sweep down first, then up."""
        order = SSTFPolicy().schedule(list(_BATCH), head=_parked(), geometry=_G)
        assert _tracks(order) == [50, 120, 150]

    def test_ascend_first(self) -> None:
        """Entry point on the parked track: sweep up first, then down."""
        batch = [Request(20, 0), Request(180, 0), Request(100, 5)]
        order = SSTFPolicy().schedule(batch, head=_parked(), geometry=_G)
        assert _tracks(order) == [100, 180, 20]

    def test_entry_point_visited_first(self) -> None:
        """The chosen start request always comes first."""
        batch = generate_requests(80, rng=random.Random(5))
        policy = SSTFPolicy()
        grouped = list(batch)
        order = policy.schedule(grouped, head=_parked(), geometry=_G)
        start = best_start_index(grouped, head=_parked(), geometry=_G)
        assert order[0] == grouped[start]

    def test_every_request_once(self) -> None:
        """No request is dropped or repeated."""
        batch = generate_requests(120, rng=random.Random(6))
        order = SSTFPolicy().schedule(list(batch), head=_parked(), geometry=_G)
        assert Counter(order) == Counter(batch)

    def test_two_phase_monotonic(self) -> None:
        """Tracks move monotonically within each phase."""
        for seed in range(20):
            batch = generate_requests(60, rng=random.Random(seed))
            order = SSTFPolicy().schedule(list(batch), head=_parked(), geometry=_G)
            assert _is_two_phase(_tracks(order)), seed

    def test_single_request(self) -> None:
        """A lone request is simply visited."""
        order = SSTFPolicy().schedule([Request(3, 4)], head=_parked(), geometry=_G)
        assert order == [Request(3, 4)]

    def test_empty(self) -> None:
        """Nothing to schedule."""
        assert SSTFPolicy().schedule([], head=_parked(), geometry=_G) == []


# -- SCAN ------------------------------------------------------------------------


class TestSCAN:
    """SCAN sweeps up from the parked track, then reverses."""

    def test_example(self) -> None:
        """120 and 150 on the way up, 50 on the way down."""
        order = SCANPolicy().schedule(list(_BATCH), head=_parked(), geometry=_G)
        assert _tracks(order) == [120, 150, 50]

    def test_up_then_down(self) -> None:
        """The upward phase is non-decreasing, the downward non-increasing."""
        batch = generate_requests(150, rng=random.Random(8))
        order = SCANPolicy().schedule(list(batch), head=_parked(), geometry=_G)
        tracks = _tracks(order)
        up = [t for t in tracks if t >= _G.park_track]
        down = [t for t in tracks if t < _G.park_track]
        assert tracks == up + down
        assert up == sorted(up)
        assert down == sorted(down, reverse=True)

    def test_includes_parked_track(self) -> None:
        """A request on the parked track belongs to the upward sweep."""
        batch = [Request(90, 0), Request(100, 0), Request(110, 0)]
        order = SCANPolicy().schedule(batch, head=_parked(), geometry=_G)
        assert _tracks(order) == [100, 110, 90]

    def test_all_below(self) -> None:
        """With nothing above the head, SCAN only descends."""
        batch = [Request(10, 0), Request(60, 0), Request(30, 0)]
        order = SCANPolicy().schedule(batch, head=_parked(), geometry=_G)
        assert _tracks(order) == [60, 30, 10]

    def test_all_above(self) -> None:
        """With nothing below the head, no reversal is needed."""
        batch = [Request(160, 0), Request(120, 0), Request(140, 0)]
        order = SCANPolicy().schedule(batch, head=_parked(), geometry=_G)
        assert _tracks(order) == [120, 140, 160]

    def test_every_request_once(self) -> None:
        """No request is dropped or repeated."""
        batch = generate_requests(120, rng=random.Random(9))
        order = SCANPolicy().schedule(list(batch), head=_parked(), geometry=_G)
        assert Counter(order) == Counter(batch)

    def test_empty(self) -> None:
        """Nothing to schedule."""
        assert SCANPolicy().schedule([], head=_parked(), geometry=_G) == []


# -- Registry --------------------------------------------------------------------


class TestRegistry:
    """Policies are looked up by id."""

    @pytest.mark.parametrize(
        ("policy_id", "cls"),
        [
            (PolicyId.FIFO, FIFOPolicy),
            (PolicyId.SSTF, SSTFPolicy),
            (PolicyId.SCAN, SCANPolicy),
            (PolicyId.LIFO, LIFOPolicy),
        ],
    )
    def test_get_policy(self, policy_id: PolicyId, cls: type) -> None:
        """Each id maps to its policy class."""
        policy = get_policy(policy_id)
        assert isinstance(policy, cls)
        assert policy.name == policy_id.value

    def test_string_ids(self) -> None:
        """Ids may be given as case-insensitive strings."""
        assert parse_policy_id(" SSTF ") is PolicyId.SSTF

    def test_unknown(self) -> None:
        """Unknown ids raise UnknownPolicyError."""
        with pytest.raises(UnknownPolicyError, match="Unknown policy"):
            get_policy("elevator")

    def test_non_string(self) -> None:
        """Non-string ids are unknown, not a crash."""
        with pytest.raises(UnknownPolicyError):
            parse_policy_id(3)  # type: ignore[arg-type]
