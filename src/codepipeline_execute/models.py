"""Value types shared by the catalog, reconciler, report and poller."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from codepipeline_execute.errors import UnsuccessfulExecutionError


class ActionStatus(str, Enum):
    """Action execution status as reported by CodePipeline.

    `NOT_STARTED` is never returned by the service; it is the initial status of every
    catalog entry. Statuses outside this enum are carried as plain strings.
    """

    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    ABANDONED = "Abandoned"


class ExecutionStatus(str, Enum):
    CANCELLED = "Cancelled"
    IN_PROGRESS = "InProgress"
    STOPPED = "Stopped"
    STOPPING = "Stopping"
    SUCCEEDED = "Succeeded"
    SUPERSEDED = "Superseded"
    FAILED = "Failed"


def _status_value(status: str) -> str:
    return status.value if isinstance(status, Enum) else str(status)


@dataclass(frozen=True, slots=True)
class ActionRef:
    stage_name: str
    action_name: str

    def __str__(self) -> str:
        return f"{self.stage_name} / {self.action_name}"


DedupKey = tuple[str | None, str]


@dataclass(frozen=True, slots=True)
class ActionObservation:
    """Latest known state of one action.

    `action_execution_id` is assigned by CodePipeline per attempt and is None for
    catalog entries that have not been observed yet.
    """

    stage_name: str
    action_name: str
    status: str = ActionStatus.NOT_STARTED.value
    external_url: str | None = None
    action_execution_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", _status_value(self.status))

    @property
    def ref(self) -> ActionRef:
        return ActionRef(stage_name=self.stage_name, action_name=self.action_name)

    @property
    def dedup_key(self) -> DedupKey:
        return (self.action_execution_id, self.status)


ObservedSet = tuple[ActionObservation, ...]


@dataclass(frozen=True, slots=True)
class StageDefinition:
    name: str
    actions: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class PipelineDefinition:
    name: str
    stages: tuple[StageDefinition, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class Execution:
    """One run of a pipeline.

    `url` is rendered once from the console URL template when the execution is started.
    """

    execution_id: str
    pipeline_name: str
    url: str
    status: str = ExecutionStatus.IN_PROGRESS.value

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", _status_value(self.status))

    @property
    def in_progress(self) -> bool:
        return self.status == ExecutionStatus.IN_PROGRESS.value


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    execution_id: str
    status: str
    url: str

    @property
    def succeeded(self) -> bool:
        return self.status == ExecutionStatus.SUCCEEDED.value

    def raise_for_status(self) -> None:
        if not self.succeeded:
            raise UnsuccessfulExecutionError(result=self)
