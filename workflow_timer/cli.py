"""Entry point: time the current run, compare it with the default branch, comment on the PR."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Any, Optional, Sequence

from workflow_timer import console
from workflow_timer.config import MODES, Config, InvocationContext, locate_run, parse_jobs, read_event
from workflow_timer.errors import ConfigurationError, NotAPullRequestContext, WorkflowTimerError
from workflow_timer.github import DEFAULT_API_URL, GitHubClient
from workflow_timer.publish import publish_comment
from workflow_timer.report import ReportInputs, render_comment
from workflow_timer.timings import collect_history, collect_timings, find_baseline


def env(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def as_int(value: Optional[str], name: str) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be an integer, got '{value}'") from exc


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Post per-job workflow timings on a pull request.")
    parser.add_argument("--token", default=env("INPUT_TOKEN") or env("GITHUB_TOKEN"), help="GitHub token.")
    parser.add_argument("--jobs", default=os.environ.get("INPUT_JOBS", ""), help="Newline-delimited job names to monitor.")
    parser.add_argument("--message", default=os.environ.get("INPUT_MESSAGE", ""), help="Text shown above the report.")
    parser.add_argument("--mode", default=env("INPUT_MODE") or "table", help=f"Report layout: {' | '.join(MODES)}.")
    parser.add_argument("--history", default=env("INPUT_HISTORY") or "0", help="Earlier runs of this PR to include.")
    parser.add_argument("--repository", default=env("GITHUB_REPOSITORY"), help="owner/name of the repository.")
    parser.add_argument("--run-id", default=env("GITHUB_RUN_ID"), help="ID of the current workflow run.")
    parser.add_argument("--event-path", default=env("GITHUB_EVENT_PATH"), help="Path to the webhook event payload.")
    parser.add_argument("--api-url", default=env("GITHUB_API_URL") or DEFAULT_API_URL, help="GitHub REST API base URL.")
    parser.add_argument("--output", required=False, help="Also write the rendered markdown to this path.")
    parser.add_argument("--dry-run", action="store_true", help="Print the comment instead of publishing it.")
    return parser.parse_args(argv)


def build_context(args: argparse.Namespace) -> InvocationContext:
    if not args.run_id:
        raise ConfigurationError("GITHUB_RUN_ID (or --run-id) is required")
    return InvocationContext(
        run_id=as_int(args.run_id, "run id"),
        event=read_event(args.event_path),
        jobs=parse_jobs(args.jobs or ""),
        message=(args.message or "").strip() or None,
        history=as_int(args.history, "history"),
        mode=str(args.mode or "table").strip().lower(),
    )


def build_report(client: Any, config: Config) -> str:
    console.info("calculating timings...")
    current = collect_timings(client, config.current_run_id, config.jobs)
    baseline = find_baseline(client, config.trunk_branch, config.workflow_id, config.jobs)
    history = collect_history(client, config)
    inputs = ReportInputs(current=current, jobs=config.jobs, baseline=baseline, history=tuple(history))
    return render_comment(inputs, mode=config.mode, message=config.message)


def run(args: argparse.Namespace) -> None:
    if not args.token:
        raise ConfigurationError("a GitHub token is required (input 'token' or GITHUB_TOKEN)")
    if not args.repository:
        raise ConfigurationError("GITHUB_REPOSITORY (or --repository) is required")

    context = build_context(args)
    client = GitHubClient(args.repository, args.token, api_url=args.api_url)
    config = locate_run(client, context)
    console.info(
        f"loaded configuration: pull request #{config.pull_request}, run {config.current_run_id}, "
        f"workflow {config.workflow_id}, default branch {config.trunk_branch}, jobs {list(config.jobs)}"
    )

    body = build_report(client, config)
    if args.output:
        try:
            Path(args.output).write_text(body, encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"unable to write {args.output}: {exc}") from exc

    if args.dry_run:
        print(body)
        return
    publish_comment(client, config.pull_request, body)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    try:
        run(args)
    except NotAPullRequestContext as exc:
        console.notice(str(exc))
    except WorkflowTimerError as exc:
        console.fail(str(exc))
    except Exception as exc:
        console.fail(f"unexpected {type(exc).__name__}: {exc}")


if __name__ == "__main__":
    main()
