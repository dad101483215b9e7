"""Unit tests for the pull request progress comment (mocked GitHub)."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from codepipeline_execute.config import PollerConfig
from codepipeline_execute.models import ActionObservation
from codepipeline_execute.report import (
    PullRequestReport,
    ReportHandle,
    ReportSink,
    build_heading,
)

CATALOG = (ActionObservation(stage_name="StageA", action_name="Deploy"),)


def test_build_heading_with_short_commit() -> None:
    heading = build_heading(
        pipeline_name="my-pipeline",
        execution_url="https://console/x",
        head_sha="0123456789abcdef",
    )

    assert heading == (
        "CodePipeline: **[my-pipeline](https://console/x)** is executing against commit `0123456`"
    )


def test_build_heading_without_commit() -> None:
    heading = build_heading(pipeline_name="p", execution_url="u")

    assert heading == "CodePipeline: **[p](u)** is executing"


def test_sink_create_returns_handle(mock_github: Mock) -> None:
    sink = ReportSink(github=mock_github, issue_number=17)

    handle = sink.create("body")

    assert handle == ReportHandle(repository="octo-org/octo-repo", issue_number=17, comment_id=1001)
    mock_github.create_issue_comment.assert_called_once_with(issue_number=17, body="body")


def test_sink_rejects_invalid_issue_number(mock_github: Mock) -> None:
    with pytest.raises(ValueError):
        ReportSink(github=mock_github, issue_number=0)


def test_open_posts_catalog_as_not_started(
    mock_github: Mock, poller_config: PollerConfig
) -> None:
    sink = ReportSink(github=mock_github, issue_number=17)

    report = PullRequestReport.open(
        sink=sink, heading="Heading is executing", catalog=CATALOG, config=poller_config
    )

    expected = "Heading is executing\n - :pray:&nbsp;&nbsp;StageA / Deploy - NotStarted"
    assert report.body == expected
    mock_github.create_issue_comment.assert_called_once_with(issue_number=17, body=expected)


def test_completed_heading_persists(mock_github: Mock, poller_config: PollerConfig) -> None:
    sink = ReportSink(github=mock_github, issue_number=17)
    report = PullRequestReport.open(
        sink=sink, heading="Heading is executing", catalog=CATALOG, config=poller_config
    )

    running = report.publish(CATALOG)
    finished = report.publish(CATALOG, terminal=True)
    again = report.publish(CATALOG)

    assert running.startswith("Heading is executing")
    assert finished.startswith("Heading was executed")
    assert again == finished
    assert report.heading == "Heading is executing"
    assert mock_github.update_issue_comment.call_count == 3
    mock_github.update_issue_comment.assert_called_with(comment_id=1001, body=finished)


def test_custom_icons_are_used(mock_github: Mock) -> None:
    config = PollerConfig(poll_interval_seconds=0, status_icons={"NotStarted": "(-)"})
    sink = ReportSink(github=mock_github, issue_number=3)

    report = PullRequestReport.open(sink=sink, heading="H", catalog=CATALOG, config=config)

    assert report.body == "H\n - (-)&nbsp;&nbsp;StageA / Deploy - NotStarted"
