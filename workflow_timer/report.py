"""Render job timings as the pull-request comment body."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from workflow_timer.timings import WorkflowRun

MARKER = "<!-- workflow-timer -->"
TITLE = "⏱ Workflow Timer ⏱"
FOOTER = "<small>🤖 Beep. Boop. I'm a bot. Timings are refreshed on every run of this workflow.</small>"


@dataclass(frozen=True)
class Tier:
    rank: int
    label: str
    glyph: str


TIERS = (
    Tier(1, "regressed severely", "🚨"),
    Tier(2, "regressed a bit", "🔴"),
    Tier(3, "regressed slightly", "🟠"),
    Tier(4, "improved slightly", "🟢"),
    Tier(5, "improved a lot", "🚀"),
    Tier(6, "improved significantly", "⚡"),
)


@dataclass(frozen=True)
class ReportInputs:
    current: WorkflowRun
    jobs: tuple[str, ...]
    baseline: Optional[WorkflowRun] = None
    history: tuple[WorkflowRun, ...] = field(default_factory=tuple)

    @property
    def runs(self) -> list[WorkflowRun]:
        runs = [self.baseline] if self.baseline else []
        return runs + [self.current, *self.history]


def format_duration(total_seconds: int) -> str:
    total_seconds = abs(int(total_seconds))
    minutes, seconds = divmod(total_seconds, 60)
    if minutes == 1:
        return f"{minutes}min {seconds}s"
    if minutes > 1:
        return f"{minutes}mins {seconds}s"
    return f"{seconds}s"


def percent_change(current: int, baseline: int) -> Optional[float]:
    if baseline <= 0:
        return None
    return (current - baseline) * 100 / baseline


def classify(percent: float) -> Tier:
    # Boundaries fall on the less severe side.
    if percent > 50:
        return TIERS[0]
    if percent > 20:
        return TIERS[1]
    if percent > 0:
        return TIERS[2]
    if percent > -20:
        return TIERS[3]
    if percent > -50:
        return TIERS[4]
    return TIERS[5]


def table_row(run: WorkflowRun, columns: Sequence[str]) -> str:
    row = [f"[{run.label}]({run.html_url})"]
    for column in columns:
        job = run.job(column)
        row.append(f"[{format_duration(job.duration)}]({job.url})" if job else "-")
    return "| " + " | ".join(row) + " |"


def render_table(jobs: Sequence[str], runs: Sequence[WorkflowRun]) -> list[str]:
    header = ["Run", *jobs]
    lines = [
        "| " + " | ".join(header) + " |",
        "| " + " | ".join("---" for _ in header) + " |",
    ]
    lines.extend(table_row(run, jobs) for run in runs)
    return lines


def comparable_totals(current: WorkflowRun, baseline: WorkflowRun) -> Optional[tuple[int, int]]:
    """Total durations of the jobs both runs finished, or None when they share none."""
    shared = [job for job in current.jobs if baseline.job(job.name) is not None]
    if not shared:
        return None
    return (
        sum(job.duration for job in shared),
        sum(baseline.job(job.name).duration for job in shared),
    )


def render_narrative(current: int, baseline: Optional[int], branch: Optional[str]) -> str:
    if branch is None:
        return (
            f"Monitored jobs took {format_duration(current)} in total. "
            "No successful run on the default branch to compare against yet."
        )
    pct = percent_change(current, baseline) if baseline is not None else None
    if baseline is None or pct is None:
        return f"Monitored jobs took {format_duration(current)} in total. No comparable jobs on `{branch}`."

    tier = classify(pct)
    delta = current - baseline
    if delta == 0:
        change = "no change"
    else:
        direction = "slower" if delta > 0 else "faster"
        change = f"{format_duration(delta)} {direction}, {abs(pct):.1f}%"
    return (
        f"{tier.glyph} Monitored jobs {tier.label}: {format_duration(current)} "
        f"against {format_duration(baseline)} on `{branch}` ({change})."
    )


def render_comment(inputs: ReportInputs, mode: str = "table", message: Optional[str] = None) -> str:
    lines = [MARKER, f"## {TITLE}", ""]
    if message:
        lines.extend([message.strip(), ""])

    table = render_table(inputs.jobs, inputs.runs)
    if mode == "narrative":
        baseline = inputs.baseline
        totals = comparable_totals(inputs.current, baseline) if baseline else None
        if baseline is None:
            narrative = render_narrative(inputs.current.total_duration, None, None)
        elif totals is None:
            narrative = render_narrative(inputs.current.total_duration, None, baseline.label)
        else:
            narrative = render_narrative(totals[0], totals[1], baseline.label)
        lines.append(narrative)
        lines.extend(["", "<details>", "<summary>Job timings</summary>", ""])
        lines.extend(table)
        lines.extend(["", "</details>"])
    else:
        lines.extend(table)

    lines.extend(["", FOOTER, ""])
    return "\n".join(lines)
