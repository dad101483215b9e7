"""Configuration for a pipeline execution run.

Inputs are loaded from:
- environment variables (GitHub Actions exposes `with:` inputs as `INPUT_<NAME>`)
- and a local `.env` file (if present)

`ActionSettings` is read once at startup. `PollerConfig` is the immutable subset the
poller and report rendering need; it is derived from the settings once and passed by
reference from then on.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Literal

from pydantic import AliasChoices, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from codepipeline_execute.errors import ConfigError
from codepipeline_execute.models import ActionStatus

USER_AGENT = "github-actions/aws-codepipeline-execute"

PIPELINE_CONSOLE_URL_TEMPLATE = (
    "https://console.aws.amazon.com/codesuite/codepipeline/pipelines/{pipeline_name}"
    "/executions/{execution_id}/timeline?region={region}"
)

DEFAULT_POLL_INTERVAL_SECONDS = 20.0

DEFAULT_STATUS_ICONS: Mapping[str, str] = MappingProxyType(
    {
        ActionStatus.ABANDONED.value: ":warning:",
        ActionStatus.FAILED.value: ":bangbang:",
        ActionStatus.IN_PROGRESS.value: ":crossed_fingers:",
        ActionStatus.NOT_STARTED.value: ":pray:",
        ActionStatus.SUCCEEDED.value: ":thumbsup:",
    }
)


@dataclass(frozen=True, slots=True)
class PollerConfig:
    """Process-wide settings for polling and report rendering."""

    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    status_icons: Mapping[str, str] = field(default_factory=lambda: DEFAULT_STATUS_ICONS)
    console_url_template: str = PIPELINE_CONSOLE_URL_TEMPLATE

    def __post_init__(self) -> None:
        if self.poll_interval_seconds < 0:
            raise ValueError("poll_interval_seconds must be >= 0")
        if not isinstance(self.status_icons, MappingProxyType):
            object.__setattr__(self, "status_icons", MappingProxyType(dict(self.status_icons)))

    def execution_url(self, *, pipeline_name: str, execution_id: str, region: str) -> str:
        return self.console_url_template.format(
            pipeline_name=pipeline_name,
            execution_id=execution_id,
            region=region,
        )


class ActionSettings(BaseSettings):
    """Settings for one action run.

    Environment variables:
    - INPUT_GITHUB-TOKEN     (required)
    - INPUT_PIPELINE-NAME    (required)
    - GITHUB_REPOSITORY      (set by GitHub Actions)
    - GITHUB_EVENT_PATH      (set by GitHub Actions)
    - GITHUB_OUTPUT          (set by GitHub Actions)
    - GITHUB_API_URL         (optional, useful for GitHub Enterprise)
    - AWS_REGION             (optional, otherwise resolved by boto3)
    - POLL_INTERVAL_SECONDS  (optional)
    - LOG_LEVEL              (optional)
    - LOG_FORMAT             (optional, 'json' or 'text')

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `ActionSettings(_env_file=path_to_env)`.
    """

    # Defaults are empty so `ActionSettings()` type-checks; the validator below enforces them.
    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("INPUT_GITHUB-TOKEN", "INPUT_GITHUB_TOKEN"),
        description="Token used to create and update the pull request comment",
    )
    pipeline_name: str = Field(
        default="",
        validation_alias=AliasChoices("INPUT_PIPELINE-NAME", "INPUT_PIPELINE_NAME"),
        description="Name of the CodePipeline pipeline to execute",
    )

    github_repository: str = Field(
        default="",
        validation_alias="GITHUB_REPOSITORY",
        description="Repository the workflow runs in, 'owner/repo'",
    )
    github_event_path: Path | None = Field(
        default=None,
        validation_alias="GITHUB_EVENT_PATH",
        description="Path to the JSON payload of the triggering event",
    )
    github_output_path: Path | None = Field(
        default=None,
        validation_alias="GITHUB_OUTPUT",
        description="File that step outputs are appended to",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_API_URL",
        description="GitHub API base URL",
    )

    aws_region: str | None = Field(
        default=None,
        validation_alias=AliasChoices("AWS_REGION", "AWS_DEFAULT_REGION"),
        description="AWS region of the pipeline (falls back to boto3 resolution)",
    )

    poll_interval_seconds: float = Field(
        default=DEFAULT_POLL_INTERVAL_SECONDS,
        ge=0.0,
        validation_alias="POLL_INTERVAL_SECONDS",
        description="Seconds to wait between status polls",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        validation_alias="LOG_FORMAT",
        description="Log record format",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @model_validator(mode="after")
    def _require_inputs(self) -> ActionSettings:
        if not self.github_token.strip():
            raise ValueError("Input required and not supplied: github-token")
        if not self.pipeline_name.strip():
            raise ValueError("Input required and not supplied: pipeline-name")
        return self

    def poller_config(self) -> PollerConfig:
        return PollerConfig(poll_interval_seconds=self.poll_interval_seconds)


def load_settings(**overrides: object) -> ActionSettings:
    """Load settings, reporting validation failures as a ConfigError."""

    try:
        return ActionSettings(**overrides)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
