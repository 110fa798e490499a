"""Simulation engine — one call, one policy, one request batch.

``simulate`` is the single entry point callers need:

    result = simulate("sstf", requests)

It validates the batch, hands a *private copy* to the policy (policies
sort and consume their input), replays the resulting order on a freshly
parked head, and returns the finalised ``SimulationResult``.  The
caller's sequence is never touched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hdd_sched.geometry import DEFAULT_GEOMETRY, DriveGeometry
from hdd_sched.logging import Logger, LogLevel
from hdd_sched.policies import PolicyId, get_policy
from hdd_sched.requests import RequestRangeError, validate_requests
from hdd_sched.simulator import HeadSimulator, SimulationResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hdd_sched.requests import Request

_SOURCE = "engine"


def simulate(
    policy_id: PolicyId | str,
    requests: Sequence[Request],
    *,
    geometry: DriveGeometry = DEFAULT_GEOMETRY,
    logger: Logger | None = None,
    load: int | None = None,
    trial: int | None = None,
) -> SimulationResult:
    """Replay ``requests`` under a scheduling policy.

    Args:
        policy_id: Which policy orders the visits (``"fifo"``, ``"sstf"``,
            ``"scan"`` or ``"lifo"``).
        requests: The batch to service.
        geometry: The simulated drive.
        logger: Optional log for finished, empty, and rejected runs.
        load: Load level the batch belongs to, recorded with log entries.
        trial: Trial index the batch belongs to, recorded with log entries.

    Returns:
        The run's summary.  An empty batch yields an all-zero result.

    Raises:
        UnknownPolicyError: If ``policy_id`` names no policy.
        RequestRangeError: If any request lies outside the geometry.

    """
    policy = get_policy(policy_id)
    try:
        validate_requests(requests, geometry=geometry)
    except RequestRangeError as e:
        if logger is not None:
            logger.log(
                LogLevel.ERROR, f"{policy.name}: {e}", source=_SOURCE, load=load, trial=trial
            )
        raise

    simulator = HeadSimulator(geometry=geometry)
    if not requests:
        if logger is not None:
            logger.log(
                LogLevel.WARNING,
                f"{policy.name}: empty request batch",
                source=_SOURCE,
                load=load,
                trial=trial,
            )
        return simulator.result(policy.name)

    order = policy.schedule(list(requests), head=simulator.head, geometry=geometry)
    for request in order:
        simulator.visit(request)
    result = simulator.result(policy.name)
    if logger is not None and logger.enabled_for(LogLevel.DEBUG):
        logger.log(
            LogLevel.DEBUG,
            f"{policy.name}: {result.request_count} requests in "
            f"{result.total_elapsed_ms:.3f} ms, "
            f"{result.average_seek_distance:.2f} tracks/request",
            source=_SOURCE,
            load=load,
            trial=trial,
        )
    return result


def simulate_all(
    requests: Sequence[Request],
    *,
    policies: Sequence[PolicyId] = tuple(PolicyId),
    geometry: DriveGeometry = DEFAULT_GEOMETRY,
    logger: Logger | None = None,
    load: int | None = None,
    trial: int | None = None,
) -> dict[PolicyId, SimulationResult]:
    """Replay the same batch under several policies."""
    return {
        policy_id: simulate(
            policy_id, requests, geometry=geometry, logger=logger, load=load, trial=trial
        )
        for policy_id in policies
    }
