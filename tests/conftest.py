"""
Shared fixtures: an in-memory GitHub that implements the client surface.
"""

import pytest


class FakeGitHub:
    """Records writes and serves canned REST payloads."""

    def __init__(self, default_branch="main"):
        self.repository = {"default_branch": default_branch}
        self.runs = {}
        self.jobs = {}
        self.workflow_runs = {}
        self.comments = {}
        self.created = []
        self.updated = []
        self._next_comment_id = 1000

    def add_run(self, run_id, jobs, head_sha="0123456789abcdef", workflow_id=7, **extra):
        self.runs[run_id] = {
            "id": run_id,
            "head_sha": head_sha,
            "html_url": f"https://github.com/o/r/actions/runs/{run_id}",
            "workflow_id": workflow_id,
            "run_started_at": "2024-05-01T10:00:00Z",
            **extra,
        }
        self.jobs[run_id] = jobs
        return self.runs[run_id]

    def get_repository(self):
        return dict(self.repository)

    def get_run(self, run_id):
        return dict(self.runs[run_id])

    def list_jobs(self, run_id):
        return list(self.jobs.get(run_id, []))

    def list_workflow_runs(self, workflow_id):
        return list(self.workflow_runs.get(workflow_id, []))

    def list_comments(self, issue_number):
        return [dict(comment) for comment in self.comments.get(issue_number, [])]

    def create_comment(self, issue_number, body):
        comment = {"id": self._next_comment_id, "body": body}
        self._next_comment_id += 1
        self.comments.setdefault(issue_number, []).append(comment)
        self.created.append(comment["id"])
        return dict(comment)

    def update_comment(self, comment_id, body):
        for comments in self.comments.values():
            for comment in comments:
                if comment["id"] == comment_id:
                    comment["body"] = body
                    self.updated.append(comment_id)
                    return dict(comment)
        raise KeyError(comment_id)


def make_job(name, started="2024-05-01T10:00:00Z", completed="2024-05-01T10:01:05Z", run_id=1):
    return {
        "name": name,
        "html_url": f"https://github.com/o/r/actions/runs/{run_id}/job/{abs(hash(name)) % 10000}",
        "url": f"https://api.github.com/repos/o/r/actions/jobs/{abs(hash(name)) % 10000}",
        "started_at": started,
        "completed_at": completed,
    }


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def job():
    return make_job
