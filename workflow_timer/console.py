"""Console output for GitHub Actions.

Progress goes to stdout with a `workflow-timer:` prefix. Annotations use the
workflow command syntax so they show up on the run summary page.
"""

from __future__ import annotations

import sys

PREFIX = "workflow-timer"


def escape_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def info(message: str) -> None:
    print(f"{PREFIX}: {message}")


def warning(message: str) -> None:
    print(f"::warning::{escape_data(message)}")


def notice(message: str) -> None:
    print(f"::notice::{escape_data(message)}")


def error(message: str) -> None:
    print(f"::error::{escape_data(message)}")


def fail(message: str, code: int = 1) -> None:
    error(f"{PREFIX}: {message}")
    sys.exit(code)
