"""GitHub Actions runtime: the triggering event and step outputs."""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PullRequestHead(BaseModel):
    sha: str = Field(default="")


class PullRequestInfo(BaseModel):
    """The slice of a `pull_request` event payload the progress comment needs."""

    number: int
    head: PullRequestHead = Field(default_factory=PullRequestHead)


def load_pull_request(event_path: Path | None) -> PullRequestInfo | None:
    """Return the pull request of the triggering event, or None for other events."""

    if event_path is None:
        return None
    if not event_path.exists():
        logger.warning("Event payload not found", extra={"path": str(event_path)})
        return None

    try:
        payload = json.loads(event_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        logger.warning("Event payload is not valid JSON", extra={"path": str(event_path)})
        return None

    if not isinstance(payload, dict) or not isinstance(payload.get("pull_request"), dict):
        return None
    return PullRequestInfo.model_validate(payload["pull_request"])


class StepOutputs:
    """Writes named step outputs to the `$GITHUB_OUTPUT` file.

    Without an output file (local runs) values are only logged.
    """

    def __init__(self, path: Path | None) -> None:
        self._path = path

    def set(self, name: str, value: str) -> None:
        logger.info("Step output", extra={"output": name, "value": value})
        if self._path is None:
            return

        with self._path.open("a", encoding="utf-8") as f:
            if "\n" in value:
                delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
            else:
                f.write(f"{name}={value}\n")
