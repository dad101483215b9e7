"""Pull request comment that mirrors pipeline progress.

The comment is created once with a fixed heading. Every push replaces the whole body;
nothing is appended, so a failed update never leaves a partial report behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from codepipeline_execute.config import PollerConfig
from codepipeline_execute.github.client import GitHubClient
from codepipeline_execute.models import ObservedSet
from codepipeline_execute.reconciler import EXECUTING_VERB, complete_heading, render_body

logger = logging.getLogger(__name__)

SHORT_SHA_LENGTH = 7


def build_heading(*, pipeline_name: str, execution_url: str, head_sha: str | None = None) -> str:
    heading = f"CodePipeline: **[{pipeline_name}]({execution_url})** {EXECUTING_VERB}"
    if head_sha:
        heading += f" against commit `{head_sha[:SHORT_SHA_LENGTH]}`"
    return heading


@dataclass(frozen=True, slots=True)
class ReportHandle:
    """Identity of a persisted comment: enough to update it in place."""

    repository: str
    issue_number: int
    comment_id: int


class ReportSink:
    """Creates and updates the progress comment on one pull request."""

    def __init__(self, *, github: GitHubClient, issue_number: int) -> None:
        if issue_number <= 0:
            raise ValueError("issue_number must be a positive integer")
        self._github = github
        self._issue_number = issue_number

    def create(self, body: str) -> ReportHandle:
        comment_id = self._github.create_issue_comment(issue_number=self._issue_number, body=body)
        handle = ReportHandle(
            repository=self._github.repository,
            issue_number=self._issue_number,
            comment_id=comment_id,
        )
        logger.info(
            "Progress comment created",
            extra={
                "repo": handle.repository,
                "issue_number": handle.issue_number,
                "comment_id": handle.comment_id,
            },
        )
        return handle

    def update(self, handle: ReportHandle, body: str) -> None:
        self._github.update_issue_comment(comment_id=handle.comment_id, body=body)
        logger.debug(
            "Progress comment updated",
            extra={"issue_number": handle.issue_number, "comment_id": handle.comment_id},
        )


class PullRequestReport:
    """Report state owned by the poller when the run belongs to a pull request."""

    def __init__(
        self,
        *,
        sink: ReportSink,
        handle: ReportHandle,
        heading: str,
        config: PollerConfig,
    ) -> None:
        self._sink = sink
        self._config = config
        self.handle = handle
        self.heading = heading
        self.body = heading
        self.completed = False

    @classmethod
    def open(
        cls,
        *,
        sink: ReportSink,
        heading: str,
        catalog: ObservedSet,
        config: PollerConfig,
    ) -> PullRequestReport:
        """Create the comment listing every catalog action as not started."""

        body = render_body(heading, catalog, config.status_icons)
        handle = sink.create(body)
        report = cls(sink=sink, handle=handle, heading=heading, config=config)
        report.body = body
        return report

    def render(self, observed: ObservedSet, *, terminal: bool = False) -> str:
        # Once rendered as completed, the heading stays completed.
        if terminal:
            self.completed = True
        heading = complete_heading(self.heading) if self.completed else self.heading
        return render_body(heading, observed, self._config.status_icons)

    def publish(self, observed: ObservedSet, *, terminal: bool = False) -> str:
        body = self.render(observed, terminal=terminal)
        self._sink.update(self.handle, body)
        self.body = body
        return body
