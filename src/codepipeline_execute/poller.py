"""Poll a running pipeline execution until it reaches a terminal status.

Each iteration waits the poll interval, fetches the execution status and the action
listing concurrently, reconciles the listing against the previous poll, prints what
changed and pushes the regenerated report body. Keys and merged state are loop-carried
values of `Poller.run`; nothing is shared between runs.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

from codepipeline_execute.codepipeline.client import CodePipelineClient
from codepipeline_execute.config import PollerConfig
from codepipeline_execute.errors import PollingCancelled
from codepipeline_execute.models import (
    ActionObservation,
    DedupKey,
    Execution,
    ExecutionResult,
    ObservedSet,
)
from codepipeline_execute.reconciler import format_progress_line, reconcile
from codepipeline_execute.report import PullRequestReport

logger = logging.getLogger(__name__)

HEARTBEAT = "..."


class Poller:
    def __init__(
        self,
        *,
        codepipeline: CodePipelineClient,
        config: PollerConfig,
        console: Callable[[str], None] = print,
    ) -> None:
        self._codepipeline = codepipeline
        self._config = config
        self._console = console

    def run(
        self,
        *,
        catalog: ObservedSet,
        execution: Execution,
        report: PullRequestReport | None = None,
        cancel: threading.Event | None = None,
    ) -> ExecutionResult:
        """Poll until the execution leaves InProgress and return its terminal status.

        Args:
            catalog: Actions of the pipeline in stage then declaration order.
            execution: The execution that was just started.
            report: Pull request comment to keep up to date, if any.
            cancel: Set to stop between iterations; the run then raises PollingCancelled.

        Raises:
            TransportError: A CodePipeline or GitHub call failed. Nothing is retried here.
            PollingCancelled: `cancel` was set.
        """

        cancel = cancel or threading.Event()
        interval = self._config.poll_interval_seconds

        self._console(
            f"Polling started. Progress will be updated every {interval:g} seconds."
        )

        previous_keys: frozenset[DedupKey] = frozenset()
        observed = catalog

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="poll") as pool:
            while True:
                if cancel.wait(interval):
                    logger.warning(
                        "Polling cancelled", extra={"execution_id": execution.execution_id}
                    )
                    raise PollingCancelled(
                        f"Polling of execution {execution.execution_id} was cancelled"
                    )

                status_future = pool.submit(
                    self._codepipeline.get_execution_status,
                    pipeline_name=execution.pipeline_name,
                    execution_id=execution.execution_id,
                )
                details_future = pool.submit(
                    self._codepipeline.list_action_executions,
                    pipeline_name=execution.pipeline_name,
                    execution_id=execution.execution_id,
                )
                execution = replace(execution, status=status_future.result())
                details: list[ActionObservation] = details_future.result()

                result = reconcile(previous_keys, observed, details)
                terminal = not execution.in_progress

                if result.changed:
                    for change in result.changed:
                        self._console(format_progress_line(change))
                else:
                    self._console(HEARTBEAT)

                if report is not None:
                    report.publish(result.merged, terminal=terminal)

                logger.debug(
                    "Poll complete",
                    extra={
                        "execution_id": execution.execution_id,
                        "status": execution.status,
                        "changed": len(result.changed),
                    },
                )

                previous_keys = result.next_keys
                observed = result.merged

                if terminal:
                    break

        self._console(f"Polling finished. Pipeline execution status: {execution.status}")
        logger.info(
            "Pipeline execution finished",
            extra={"execution_id": execution.execution_id, "status": execution.status},
        )
        return ExecutionResult(
            execution_id=execution.execution_id,
            status=execution.status,
            url=execution.url,
        )
