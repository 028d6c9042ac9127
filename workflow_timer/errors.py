from __future__ import annotations


class WorkflowTimerError(Exception):
    pass


class ConfigurationError(WorkflowTimerError):
    pass


class NotAPullRequestContext(WorkflowTimerError):
    """Raised when the triggering event is not a pull request. Not a failure."""


class GitHubAPIError(WorkflowTimerError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
