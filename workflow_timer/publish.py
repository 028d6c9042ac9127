"""Create or update the single workflow-timer comment on a pull request.

Two invocations racing on the same pull request can both see no marker
comment and both create one. The REST API has no conditional update to
prevent that.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from workflow_timer import console
from workflow_timer.report import MARKER, TITLE

# Comments written before the HTML marker existed only carry the title.
LEGACY_MARKER = TITLE


@dataclass(frozen=True)
class PublishResult:
    action: str
    comment_id: Optional[int]


def is_bot_comment(comment: dict[str, Any]) -> bool:
    user = comment.get("user")
    return isinstance(user, dict) and user.get("type") == "Bot"


def find_marker_comment(comments: list[dict[str, Any]], marker: str = MARKER) -> Optional[dict[str, Any]]:
    for comment in comments:
        if marker in str(comment.get("body") or ""):
            return comment
    for comment in comments:
        if is_bot_comment(comment) and LEGACY_MARKER in str(comment.get("body") or ""):
            return comment
    return None


def publish_comment(client: Any, pull_request: int, body: str, marker: str = MARKER) -> PublishResult:
    if marker not in body:
        raise ValueError("comment body must contain the workflow-timer marker")

    existing = find_marker_comment(client.list_comments(pull_request), marker)
    if existing is not None:
        comment_id = int(existing["id"])
        client.update_comment(comment_id, body)
        console.info(f"updated comment {comment_id} on pull request #{pull_request}")
        return PublishResult("updated", comment_id)

    created = client.create_comment(pull_request, body) or {}
    comment_id = created.get("id")
    console.info(f"created comment {comment_id} on pull request #{pull_request}")
    return PublishResult("created", comment_id)
