"""Report rendering — results as text tables and plain dicts.

The simulator and harness return dataclasses; this module turns them
into something a person (ASCII tables) or a web client (JSON-ready
dicts) can consume.  Rendering returns strings and never prints.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hdd_sched.experiment import ExperimentReport
    from hdd_sched.simulator import SimulationResult

_HEADER = (
    f"{'Policy':<8}{'Requests':>10}{'Access ms':>12}"
    f"{'Req ms':>10}{'Seek trk':>10}{'Rot ms':>9}"
)


def format_result(result: SimulationResult) -> str:
    """Render one simulation run as labelled lines."""
    lines = [
        f"=== {result.policy.upper()} ===",
        f"Requests:        {result.request_count}",
        f"Elapsed:         {result.total_elapsed_ms:.3f} ms",
        f"Avg request:     {result.average_request_time:.4f} ms",
        f"Avg access:      {result.average_access_time:.4f} ms",
        f"Avg seek:        {result.average_seek_distance:.2f} tracks"
        f" ({result.average_seek_time:.4f} ms)",
        f"Avg rotation:    {result.average_rotational_delay:.4f} ms",
        f"Bytes:           {result.total_bytes}",
    ]
    return "\n".join(lines)


def format_report(report: ExperimentReport) -> str:
    """Render a sweep as one table per load level."""
    config = report.config
    lines = [
        "=== Disk Scheduling Experiment ===",
        f"Seed:     {report.seed}",
        f"Trials:   {config.trials} per load",
        f"Drive:    {report.geometry.track_count} tracks x "
        f"{report.geometry.sector_count} sectors @ {report.geometry.rpm} RPM",
    ]
    for load in config.loads:
        lines.append("")
        lines.append(f"-- {load} requests --")
        lines.append(_HEADER)
        lines.extend(
            f"{a.policy.value.upper():<8}{a.total_req:>10.1f}"
            f"{a.total_avg_access_time:>12.4f}{a.avg_req_time:>10.4f}"
            f"{a.avg_seek_distance:>10.2f}{a.avg_rotational_delay:>9.4f}"
            for a in report.for_load(load)
        )
    return "\n".join(lines)


def result_to_dict(result: SimulationResult) -> dict[str, object]:
    """Return a JSON-ready dict of a simulation run."""
    data = asdict(result)
    data["visit_order"] = [[r.track, r.sector] for r in result.visit_order]
    return data


def report_to_dict(report: ExperimentReport) -> dict[str, object]:
    """Return a JSON-ready dict of a finished sweep."""
    return {
        "seed": report.seed,
        "trials": report.config.trials,
        "loads": report.config.loads,
        "geometry": report.geometry.to_dict(),
        "results": [
            {**asdict(a), "policy": a.policy.value} for a in report.aggregates
        ],
    }
