"""Test configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest

from codepipeline_execute.codepipeline.client import CodePipelineClient
from codepipeline_execute.config import PollerConfig
from codepipeline_execute.github.client import GitHubClient
from codepipeline_execute.models import (
    Execution,
    PipelineDefinition,
    StageDefinition,
)

ENV_VARS = [
    "INPUT_GITHUB-TOKEN",
    "INPUT_GITHUB_TOKEN",
    "INPUT_PIPELINE-NAME",
    "INPUT_PIPELINE_NAME",
    "GITHUB_REPOSITORY",
    "GITHUB_EVENT_PATH",
    "GITHUB_OUTPUT",
    "GITHUB_API_URL",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "POLL_INTERVAL_SECONDS",
    "LOG_LEVEL",
    "LOG_FORMAT",
]

EXECUTION_URL = (
    "https://console.aws.amazon.com/codesuite/codepipeline/pipelines/my-pipeline"
    "/executions/exec-1/timeline?region=us-east-1"
)


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no action inputs in the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def poller_config() -> PollerConfig:
    """Provide a config that does not wait between polls."""
    return PollerConfig(poll_interval_seconds=0)


@pytest.fixture
def definition() -> PipelineDefinition:
    return PipelineDefinition(
        name="my-pipeline",
        stages=(
            StageDefinition(name="Source", actions=("Checkout",)),
            StageDefinition(name="Deploy", actions=("Staging", "Production")),
        ),
    )


@pytest.fixture
def execution() -> Execution:
    return Execution(execution_id="exec-1", pipeline_name="my-pipeline", url=EXECUTION_URL)


@pytest.fixture
def mock_codepipeline() -> Mock:
    client = Mock(spec=CodePipelineClient)
    client.region = "us-east-1"
    return client


@pytest.fixture
def mock_github() -> Mock:
    client = Mock(spec=GitHubClient)
    client.repository = "octo-org/octo-repo"
    client.create_issue_comment.return_value = 1001
    return client
