"""Experiment harness — many random batches, every policy, averaged.

One random batch says little about a policy; the arm might get lucky.
The harness sweeps the **load** (requests per batch) from 50 to 150 in
steps of 10, and at every load level runs 1000 independent trials.
Each trial draws one random batch and replays *that same batch* under
every policy, so the policies are always compared on identical work.

Reproducibility:
    Every trial owns a ``random.Random`` seeded from the experiment seed,
    the load and the trial number.  Trials never share a generator, so
    they can run on worker threads in any order and still produce the
    same numbers as a sequential run.  When no seed is given, one is
    taken from the clock and recorded in the report.
"""

from __future__ import annotations

import hashlib
import random
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from hdd_sched.engine import simulate_all
from hdd_sched.geometry import DEFAULT_GEOMETRY, DriveGeometry
from hdd_sched.logging import Logger, LogLevel
from hdd_sched.policies import PolicyId
from hdd_sched.requests import generate_requests

if TYPE_CHECKING:
    from collections.abc import Callable

    from hdd_sched.simulator import SimulationResult

_SOURCE = "experiment"


@dataclass(frozen=True)
class ExperimentConfig:
    """Parameters of a load sweep.

    Attributes:
        min_requests: Smallest batch size.
        max_requests: Largest batch size (inclusive).
        step: Batch size increment between load levels.
        trials: Independent batches per load level.
        seed: Experiment seed, or None to derive one from the clock.
        policies: Policies to compare.
        workers: Worker threads for running trials (1 = sequential).

    """

    min_requests: int = 50
    max_requests: int = 150
    step: int = 10
    trials: int = 1000
    seed: int | None = None
    policies: tuple[PolicyId, ...] = field(default_factory=lambda: tuple(PolicyId))
    workers: int = 1

    def __post_init__(self) -> None:
        """Reject sweeps that would run nothing or loop forever."""
        for name in ("min_requests", "max_requests", "step", "trials", "workers"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                msg = f"{name} must be an integer, got {value!r}"
                raise ValueError(msg)  # noqa: TRY004
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            msg = f"seed must be an integer, got {self.seed!r}"
            raise ValueError(msg)  # noqa: TRY004
        if self.min_requests < 1:
            msg = f"min_requests must be positive, got {self.min_requests}"
            raise ValueError(msg)
        if self.max_requests < self.min_requests:
            msg = "max_requests must not be below min_requests"
            raise ValueError(msg)
        if self.step < 1:
            msg = f"step must be positive, got {self.step}"
            raise ValueError(msg)
        if self.trials < 1:
            msg = f"trials must be positive, got {self.trials}"
            raise ValueError(msg)
        if not self.policies:
            msg = "policies must not be empty"
            raise ValueError(msg)
        if self.workers < 1:
            msg = f"workers must be positive, got {self.workers}"
            raise ValueError(msg)

    @property
    def loads(self) -> list[int]:
        """Return the batch sizes of the sweep."""
        return list(range(self.min_requests, self.max_requests + 1, self.step))

    @property
    def load_count(self) -> int:
        """Return how many load levels the sweep visits, without listing them."""
        return (self.max_requests - self.min_requests) // self.step + 1


@dataclass(frozen=True)
class PolicyAggregate:
    """One policy's results at one load level, averaged over all trials."""

    policy: PolicyId
    load: int
    trials: int
    total_avg_access_time: float
    avg_req_time: float
    total_req: float
    avg_seek_distance: float
    avg_rotational_delay: float


@dataclass(frozen=True)
class ExperimentReport:
    """Everything a finished sweep produced."""

    config: ExperimentConfig
    seed: int
    geometry: DriveGeometry
    aggregates: tuple[PolicyAggregate, ...]

    def for_load(self, load: int) -> list[PolicyAggregate]:
        """Return the aggregates of one load level, in policy order."""
        return [a for a in self.aggregates if a.load == load]

    def get(self, policy: PolicyId, load: int) -> PolicyAggregate:
        """Return the aggregate for ``policy`` at ``load``.

        Raises:
            KeyError: If the sweep did not cover that combination.

        """
        for aggregate in self.aggregates:
            if aggregate.policy is policy and aggregate.load == load:
                return aggregate
        msg = f"No result for {policy} at load {load}"
        raise KeyError(msg)


def trial_seed(base_seed: int, load: int, trial: int) -> int:
    """Derive the seed of one trial from the experiment seed.

    Distinct ``(load, trial)`` pairs get unrelated seeds, and the same
    inputs always give the same seed.
    """
    digest = hashlib.blake2b(f"{base_seed}:{load}:{trial}".encode(), digest_size=8).digest()
    return int.from_bytes(digest, "big")


def run_trial(
    base_seed: int,
    load: int,
    trial: int,
    *,
    policies: tuple[PolicyId, ...],
    geometry: DriveGeometry = DEFAULT_GEOMETRY,
    logger: Logger | None = None,
) -> dict[PolicyId, SimulationResult]:
    """Generate one batch and replay it under every policy.

    Runs are logged with their ``load`` and ``trial`` so a single
    batch can be traced back through the log.
    """
    rng = random.Random(trial_seed(base_seed, load, trial))
    requests = generate_requests(load, rng=rng, geometry=geometry)
    return simulate_all(
        requests, policies=policies, geometry=geometry, logger=logger, load=load, trial=trial
    )


class _Totals:
    """Running sums for one policy at one load level."""

    def __init__(self) -> None:
        self.access = 0.0
        self.request_time = 0.0
        self.requests = 0
        self.seek_distance = 0.0
        self.rotation = 0.0

    def add(self, result: SimulationResult) -> None:
        self.access += result.average_access_time
        self.request_time += result.average_request_time
        self.requests += result.request_count
        self.seek_distance += result.average_seek_distance
        self.rotation += result.average_rotational_delay

    def average(self, policy: PolicyId, load: int, trials: int) -> PolicyAggregate:
        return PolicyAggregate(
            policy=policy,
            load=load,
            trials=trials,
            total_avg_access_time=self.access / trials,
            avg_req_time=self.request_time / trials,
            total_req=self.requests / trials,
            avg_seek_distance=self.seek_distance / trials,
            avg_rotational_delay=self.rotation / trials,
        )


def run_experiment(
    config: ExperimentConfig,
    *,
    geometry: DriveGeometry = DEFAULT_GEOMETRY,
    logger: Logger | None = None,
    on_progress: Callable[[int, int], None] | None = None,
) -> ExperimentReport:
    """Run the full load sweep.

    Args:
        config: Sweep parameters.
        geometry: The simulated drive.
        logger: Optional log for the seed and per-load completion.
        on_progress: Called as ``on_progress(done, total)`` after every
            trial, for progress display.

    Returns:
        The averaged results for every (policy, load) pair.

    """
    seed = config.seed if config.seed is not None else time.time_ns()
    if logger is not None:
        logger.log(LogLevel.INFO, f"seed {seed}", source=_SOURCE)

    total = len(config.loads) * config.trials
    done = 0
    aggregates: list[PolicyAggregate] = []

    with ThreadPoolExecutor(max_workers=config.workers) as pool:
        for load in config.loads:
            totals = {policy: _Totals() for policy in config.policies}
            outcomes = pool.map(
                lambda trial, load=load: run_trial(
                    seed, load, trial, policies=config.policies, geometry=geometry, logger=logger
                ),
                range(config.trials),
            )
            for outcome in outcomes:
                for policy, result in outcome.items():
                    totals[policy].add(result)
                done += 1
                if on_progress is not None:
                    on_progress(done, total)

            aggregates.extend(
                totals[policy].average(policy, load, config.trials) for policy in config.policies
            )
            if logger is not None:
                logger.log(
                    LogLevel.INFO,
                    f"load {load}: {config.trials} trials x {len(config.policies)} policies",
                    source=_SOURCE,
                )

    return ExperimentReport(
        config=config,
        seed=seed,
        geometry=geometry,
        aggregates=tuple(aggregates),
    )
