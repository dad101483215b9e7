"""Error taxonomy for a pipeline execution run.

The CLI maps each of these to a distinct exit code; see `main`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codepipeline_execute.models import ExecutionResult


class ConfigError(ValueError):
    """Missing input or credentials, detected before any network call."""


class TransportError(RuntimeError):
    """A CodePipeline or GitHub call failed.

    Raised with the underlying client exception chained as `__cause__`. Retries are left
    to the underlying client (botocore retry mode, PyGithub/requests defaults).
    """


@dataclass(frozen=True, slots=True)
class UnsuccessfulExecutionError(Exception):
    """The pipeline execution finished in a status other than Succeeded."""

    result: ExecutionResult

    def __str__(self) -> str:
        return f"Pipeline execution status: {self.result.status}"


class PollingCancelled(RuntimeError):
    pass
