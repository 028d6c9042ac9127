"""Resolve what run and pull request this invocation is about."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from workflow_timer.errors import ConfigurationError, NotAPullRequestContext

MODES = ("table", "narrative")


@dataclass(frozen=True)
class Config:
    trunk_branch: str
    pull_request: int
    workflow_id: int
    current_run_id: int
    jobs: tuple[str, ...]
    message: Optional[str] = None
    head_branch: Optional[str] = None
    history: int = 0
    mode: str = "table"


@dataclass(frozen=True)
class InvocationContext:
    run_id: int
    event: dict[str, Any] = field(default_factory=dict)
    jobs: tuple[str, ...] = ()
    message: Optional[str] = None
    history: int = 0
    mode: str = "table"

    @property
    def pull_request(self) -> Optional[int]:
        number = (self.event.get("pull_request") or {}).get("number")
        return number if isinstance(number, int) else None

    @property
    def head_branch(self) -> Optional[str]:
        ref = ((self.event.get("pull_request") or {}).get("head") or {}).get("ref")
        return ref if isinstance(ref, str) and ref else None


def parse_jobs(raw: str) -> tuple[str, ...]:
    """Newline-delimited job names, blanks dropped, first occurrence wins."""
    jobs: list[str] = []
    for line in raw.splitlines():
        name = line.strip()
        if name and name not in jobs:
            jobs.append(name)
    return tuple(jobs)


def read_event(path: Optional[str]) -> dict[str, Any]:
    if not path:
        return {}
    try:
        event = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"unable to read event payload {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"invalid JSON in event payload {path}: {exc}") from exc
    return event if isinstance(event, dict) else {}


def locate_run(client: Any, context: InvocationContext) -> Config:
    pull_request = context.pull_request
    if pull_request is None:
        raise NotAPullRequestContext("This workflow only runs on pull requests. Skipping...")
    if not context.jobs:
        raise ConfigurationError("at least one job name must be listed in 'jobs'")
    if context.mode not in MODES:
        raise ConfigurationError(f"invalid mode '{context.mode}'. expected one of: {', '.join(MODES)}")
    if context.history < 0:
        raise ConfigurationError("history must be >= 0")

    trunk_branch = client.get_repository().get("default_branch")
    if not trunk_branch:
        raise ConfigurationError("repository metadata has no default branch")
    workflow_id = client.get_run(context.run_id).get("workflow_id")
    if workflow_id is None:
        raise ConfigurationError(f"run {context.run_id} has no workflow id")

    return Config(
        trunk_branch=str(trunk_branch),
        pull_request=pull_request,
        workflow_id=int(workflow_id),
        current_run_id=context.run_id,
        jobs=context.jobs,
        message=context.message or None,
        head_branch=context.head_branch,
        history=context.history,
        mode=context.mode,
    )
