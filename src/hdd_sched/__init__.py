"""Disk-head scheduling simulator.

Re-exports the public symbols so callers can write::

    from hdd_sched import Request, simulate

The web front end lives in ``hdd_sched.web`` and is not imported here,
so Flask stays optional.
"""

from hdd_sched.engine import simulate, simulate_all
from hdd_sched.experiment import (
    ExperimentConfig,
    ExperimentReport,
    PolicyAggregate,
    run_experiment,
    trial_seed,
)
from hdd_sched.geometry import DEFAULT_GEOMETRY, DriveGeometry, GeometryError, load_geometry
from hdd_sched.logging import LogEntry, Logger, LogLevel
from hdd_sched.policies import (
    DiskPolicy,
    FIFOPolicy,
    LIFOPolicy,
    PolicyId,
    SCANPolicy,
    SSTFPolicy,
    SweepState,
    UnknownPolicyError,
    get_policy,
    next_sweep_state,
)
from hdd_sched.requests import Request, RequestRangeError, generate_requests
from hdd_sched.simulator import HeadSimulator, HeadState, SimulationResult

__all__ = [
    "DEFAULT_GEOMETRY",
    "DiskPolicy",
    "DriveGeometry",
    "ExperimentConfig",
    "ExperimentReport",
    "FIFOPolicy",
    "GeometryError",
    "HeadSimulator",
    "HeadState",
    "LIFOPolicy",
    "LogEntry",
    "LogLevel",
    "Logger",
    "PolicyAggregate",
    "PolicyId",
    "Request",
    "RequestRangeError",
    "SCANPolicy",
    "SSTFPolicy",
    "SimulationResult",
    "SweepState",
    "UnknownPolicyError",
    "generate_requests",
    "get_policy",
    "load_geometry",
    "next_sweep_state",
    "run_experiment",
    "simulate",
    "simulate_all",
    "trial_seed",
]
