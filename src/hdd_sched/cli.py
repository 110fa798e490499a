"""Command-line front end — the ``hdd-sched`` console entry point.

Two subcommands:

    hdd-sched run [--min 50] [--max 150] [--step 10] [--trials 1000]
                  [--seed N] [--workers N] [--policy sstf ...]
                  [--geometry drive.json] [--log [--verbose]]
    hdd-sched simulate --policy scan 150:10 50:300 120:0

``run`` performs the load sweep and prints one table per load level;
``simulate`` replays a single batch given on the command line.

``main`` takes an explicit ``argv`` and returns an exit status so that
it can be tested without a subprocess.  Geometry, range, policy and sweep
errors are all ``ValueError`` subclasses and exit with status 2.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from hdd_sched.engine import simulate
from hdd_sched.experiment import ExperimentConfig, run_experiment
from hdd_sched.geometry import DEFAULT_GEOMETRY, DriveGeometry, load_geometry
from hdd_sched.logging import Logger, LogLevel
from hdd_sched.policies import PolicyId, parse_policy_id
from hdd_sched.report import format_report, format_result
from hdd_sched.requests import parse_request

if TYPE_CHECKING:
    from collections.abc import Sequence

_EXIT_OK = 0
_EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for both subcommands."""
    parser = argparse.ArgumentParser(
        prog="hdd-sched",
        description="Compare disk-head scheduling policies on a simulated drive.",
    )
    parser.add_argument(
        "--geometry",
        type=Path,
        default=None,
        help="JSON file overriding drive geometry fields",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="run the load sweep experiment")
    run.add_argument("--min", dest="min_requests", type=int, default=50)
    run.add_argument("--max", dest="max_requests", type=int, default=150)
    run.add_argument("--step", type=int, default=10)
    run.add_argument("--trials", type=int, default=1000)
    run.add_argument("--seed", type=int, default=None, help="experiment seed (default: clock)")
    run.add_argument("--workers", type=int, default=1, help="worker threads for trials")
    run.add_argument(
        "--policy",
        action="append",
        dest="policies",
        default=None,
        help="policy to include (repeatable; default: all)",
    )
    run.add_argument("--log", action="store_true", help="print the experiment log")
    run.add_argument(
        "--verbose",
        action="store_true",
        help="with --log, also record every individual run",
    )

    single = sub.add_parser("simulate", help="replay one batch of track:sector requests")
    single.add_argument("--policy", default=PolicyId.FIFO.value)
    single.add_argument("requests", nargs="+", metavar="track:sector")
    return parser


def _cmd_run(args: argparse.Namespace, geometry: DriveGeometry) -> str:
    policies = (
        tuple(parse_policy_id(p) for p in args.policies) if args.policies else tuple(PolicyId)
    )
    config = ExperimentConfig(
        min_requests=args.min_requests,
        max_requests=args.max_requests,
        step=args.step,
        trials=args.trials,
        seed=args.seed,
        policies=policies,
        workers=args.workers,
    )
    logger = Logger(min_level=LogLevel.DEBUG if args.verbose else LogLevel.INFO)
    report = run_experiment(config, geometry=geometry, logger=logger)
    output = format_report(report)
    if args.log:
        output += "\n\n" + "\n".join(str(entry) for entry in logger.entries)
    return output


def _cmd_simulate(args: argparse.Namespace, geometry: DriveGeometry) -> str:
    requests = [parse_request(text) for text in args.requests]
    result = simulate(args.policy, requests, geometry=geometry)
    order = " ".join(str(r) for r in result.visit_order)
    return format_result(result) + f"\nOrder:           {order}"


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        geometry = load_geometry(args.geometry) if args.geometry else DEFAULT_GEOMETRY
        if args.command == "run":
            output = _cmd_run(args, geometry)
        else:
            output = _cmd_simulate(args, geometry)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)  # noqa: T201
        return _EXIT_USAGE
    print(output)  # noqa: T201
    return _EXIT_OK


def run() -> None:
    """Console entry point."""
    sys.exit(main())
