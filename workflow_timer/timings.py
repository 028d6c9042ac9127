"""Collect per-job durations for workflow runs.

Only monitored jobs are kept. A job without a completion timestamp (still
running, or cancelled before it started) is reported as a warning and left
out; it never aborts the collection.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence

from workflow_timer import console
from workflow_timer.config import Config

SHORT_SHA_LENGTH = 7


@dataclass(frozen=True)
class JobTiming:
    name: str
    url: str
    duration: int


@dataclass(frozen=True)
class WorkflowRun:
    run_id: int
    html_url: str
    label: str
    started_at: str
    jobs: tuple[JobTiming, ...]

    def job(self, name: str) -> Optional[JobTiming]:
        for job in self.jobs:
            if job.name == name:
                return job
        return None

    @property
    def total_duration(self) -> int:
        return sum(job.duration for job in self.jobs)


def parse_iso8601(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def job_duration(started_at: str, completed_at: str) -> int:
    elapsed = parse_iso8601(completed_at) - parse_iso8601(started_at)
    return max(0, int(round(elapsed.total_seconds())))


def collect_timings(
    client: Any,
    run_id: int,
    jobs: Iterable[str],
    label: Optional[str] = None,
) -> WorkflowRun:
    monitored = set(jobs)
    run = client.get_run(run_id)
    run_url = str(run.get("html_url") or "")
    console.info(f"getting timings for run {run_id} ({run_url})")

    all_jobs = client.list_jobs(run_id)
    timings: list[JobTiming] = []
    seen: set[str] = set()
    for job in all_jobs:
        name = str(job.get("name") or "")
        if name not in monitored or name in seen:
            continue
        job_url = str(job.get("html_url") or job.get("url") or "")
        completed_at = job.get("completed_at")
        started_at = job.get("started_at")
        if not completed_at or not started_at:
            console.warning(
                f'Unable to get timings for "{name}" on run {run_id} ({run_url}) '
                f"because it hasn't finished yet ({job_url})"
            )
            continue
        seen.add(name)
        timings.append(JobTiming(name=name, url=job_url, duration=job_duration(started_at, completed_at)))

    if not timings:
        available = ", ".join(sorted({str(job.get("name") or "") for job in all_jobs})) or "none"
        console.info(f"no monitored jobs found on run {run_id}; available jobs: {available}")

    return WorkflowRun(
        run_id=run_id,
        html_url=run_url,
        label=label or str(run.get("head_sha") or "")[:SHORT_SHA_LENGTH],
        started_at=str(run.get("run_started_at") or run.get("created_at") or ""),
        jobs=tuple(timings),
    )


def select_baseline(runs: Sequence[dict[str, Any]], trunk_branch: str) -> Optional[dict[str, Any]]:
    """First completed, successful run on the trunk branch.

    `runs` must be ordered newest first, as GitHub returns them. The order is
    trusted as-is.
    """
    for run in runs:
        if (
            run.get("head_branch") == trunk_branch
            and run.get("status") == "completed"
            and run.get("conclusion") == "success"
        ):
            return run
    return None


def find_baseline(
    client: Any,
    trunk_branch: str,
    workflow_id: int,
    jobs: Iterable[str],
) -> Optional[WorkflowRun]:
    runs = client.list_workflow_runs(workflow_id)
    latest = select_baseline(runs, trunk_branch)
    if latest is None:
        console.info(f"no successful run found on {trunk_branch}; reporting the current run only")
        return None

    console.info(
        f"last successful run for the default branch ({trunk_branch}) was {latest.get('id')} "
        f"at {latest.get('updated_at')} ({latest.get('html_url')})"
    )
    return collect_timings(client, int(latest["id"]), jobs, label=trunk_branch)


def collect_history(client: Any, config: Config) -> list[WorkflowRun]:
    """Earlier completed runs of this workflow on the pull request's head branch."""
    if config.history <= 0 or not config.head_branch:
        return []

    history: list[WorkflowRun] = []
    for run in client.list_workflow_runs(config.workflow_id):
        if len(history) >= config.history:
            break
        if run.get("head_branch") != config.head_branch or run.get("status") != "completed":
            continue
        run_id = int(run["id"])
        if run_id >= config.current_run_id:
            continue
        history.append(collect_timings(client, run_id, config.jobs))
    return history
