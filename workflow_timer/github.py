"""Thin GitHub REST client covering the calls workflow-timer needs.

Responses are returned as the raw JSON objects GitHub sends back. Any
transport failure or non-2xx status becomes a GitHubAPIError; nothing is
retried.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

import requests

from workflow_timer.errors import ConfigurationError, GitHubAPIError

DEFAULT_API_URL = "https://api.github.com"
PER_PAGE = 100
REQUEST_TIMEOUT_SECONDS = 30


class GitHubClient:
    def __init__(
        self,
        repository: str,
        token: str,
        api_url: str = DEFAULT_API_URL,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not token:
            raise ConfigurationError("a GitHub token is required to call the API")
        if repository.count("/") != 1:
            raise ConfigurationError(f"repository must look like 'owner/name', got '{repository}'")
        self.repository = repository
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    def _url(self, path: str) -> str:
        return f"{self.api_url}/repos/{self.repository}{path}"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=REQUEST_TIMEOUT_SECONDS, **kwargs)
        except requests.RequestException as exc:
            raise GitHubAPIError(f"{method} {url} failed: {exc}") from exc
        if not response.ok:
            raise GitHubAPIError(
                f"{method} {url} returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response

    def _decode(self, response: requests.Response, method: str, url: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubAPIError(
                f"{method} {url} returned a body that is not JSON: {exc}",
                status_code=response.status_code,
            ) from exc

    def _json(self, method: str, url: str, **kwargs: Any) -> Any:
        return self._decode(self._request(method, url, **kwargs), method, url)

    def _paginate(self, path: str, key: Optional[str] = None) -> Iterator[dict[str, Any]]:
        url: Optional[str] = self._url(path)
        params: Optional[dict[str, Any]] = {"per_page": PER_PAGE}
        while url:
            response = self._request("GET", url, params=params)
            data = self._decode(response, "GET", url)
            items = data.get(key, []) if key else data
            yield from items
            # The next link already carries the query string.
            url = response.links.get("next", {}).get("url")
            params = None

    def get_repository(self) -> dict[str, Any]:
        return self._json("GET", self._url(""))

    def get_run(self, run_id: int) -> dict[str, Any]:
        return self._json("GET", self._url(f"/actions/runs/{run_id}"))

    def list_jobs(self, run_id: int) -> list[dict[str, Any]]:
        return list(self._paginate(f"/actions/runs/{run_id}/jobs", key="jobs"))

    def list_workflow_runs(self, workflow_id: int) -> list[dict[str, Any]]:
        """Newest runs of a workflow, newest first (first page only)."""
        data = self._json(
            "GET",
            self._url(f"/actions/workflows/{workflow_id}/runs"),
            params={"per_page": PER_PAGE},
        )
        return data.get("workflow_runs", [])

    def list_comments(self, issue_number: int) -> list[dict[str, Any]]:
        return list(self._paginate(f"/issues/{issue_number}/comments"))

    def create_comment(self, issue_number: int, body: str) -> dict[str, Any]:
        return self._json("POST", self._url(f"/issues/{issue_number}/comments"), json={"body": body})

    def update_comment(self, comment_id: int, body: str) -> dict[str, Any]:
        return self._json("PATCH", self._url(f"/issues/comments/{comment_id}"), json={"body": body})
