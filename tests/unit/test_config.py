"""Unit tests for action settings and the poller config."""

from __future__ import annotations

from pathlib import Path

import pytest

from codepipeline_execute.config import (
    DEFAULT_STATUS_ICONS,
    ActionSettings,
    PollerConfig,
    load_settings,
)
from codepipeline_execute.errors import ConfigError


def test_settings_load_action_inputs(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INPUT_GITHUB-TOKEN", "test-token")
    monkeypatch.setenv("INPUT_PIPELINE-NAME", "my-pipeline")
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo-org/octo-repo")

    settings = ActionSettings()

    assert settings.github_token == "test-token"
    assert settings.pipeline_name == "my-pipeline"
    assert settings.github_repository == "octo-org/octo-repo"
    assert settings.github_base_url == "https://api.github.com"
    assert settings.poll_interval_seconds == 20.0
    assert settings.log_format == "json"


def test_settings_load_from_dotenv(clean_env: Path) -> None:
    (clean_env / ".env").write_text(
        "\n".join(
            [
                "INPUT_GITHUB_TOKEN=test-token",
                "INPUT_PIPELINE_NAME=my-pipeline",
                "POLL_INTERVAL_SECONDS=5",
                "LOG_LEVEL=DEBUG",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = ActionSettings()

    assert settings.github_token == "test-token"
    assert settings.poll_interval_seconds == 5.0
    assert settings.log_level == "DEBUG"
    assert settings.poller_config().poll_interval_seconds == 5.0


def test_missing_token_is_a_config_error(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INPUT_PIPELINE-NAME", "my-pipeline")

    with pytest.raises(ConfigError, match="github-token"):
        load_settings()


def test_blank_pipeline_name_is_a_config_error(
    clean_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("INPUT_GITHUB-TOKEN", "test-token")
    monkeypatch.setenv("INPUT_PIPELINE-NAME", "   ")

    with pytest.raises(ConfigError, match="pipeline-name"):
        load_settings()


def test_pipeline_name_override(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INPUT_GITHUB-TOKEN", "test-token")

    settings = load_settings(pipeline_name="from-cli")

    assert settings.pipeline_name == "from-cli"


def test_poller_config_is_immutable() -> None:
    config = PollerConfig()

    assert config.poll_interval_seconds == 20.0
    assert config.status_icons["Succeeded"] == ":thumbsup:"
    with pytest.raises(TypeError):
        config.status_icons["Succeeded"] = ":tada:"  # type: ignore[index]
    with pytest.raises(AttributeError):
        config.poll_interval_seconds = 1.0  # type: ignore[misc]


def test_poller_config_copies_custom_icons() -> None:
    icons = {"Succeeded": ":tada:"}
    config = PollerConfig(status_icons=icons)
    icons["Succeeded"] = ":x:"

    assert config.status_icons["Succeeded"] == ":tada:"
    assert DEFAULT_STATUS_ICONS["Succeeded"] == ":thumbsup:"


def test_poller_config_rejects_negative_interval() -> None:
    with pytest.raises(ValueError):
        PollerConfig(poll_interval_seconds=-1)


def test_execution_url() -> None:
    url = PollerConfig().execution_url(
        pipeline_name="my-pipeline", execution_id="exec-1", region="eu-west-1"
    )

    assert url == (
        "https://console.aws.amazon.com/codesuite/codepipeline/pipelines/my-pipeline"
        "/executions/exec-1/timeline?region=eu-west-1"
    )


def test_log_level_is_normalised(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INPUT_GITHUB-TOKEN", "test-token")
    monkeypatch.setenv("INPUT_PIPELINE-NAME", "my-pipeline")
    monkeypatch.setenv("LOG_LEVEL", " warning ")

    assert load_settings().log_level == "WARNING"


def test_unknown_log_level_is_a_config_error(
    clean_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("INPUT_GITHUB-TOKEN", "test-token")
    monkeypatch.setenv("INPUT_PIPELINE-NAME", "my-pipeline")
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    with pytest.raises(ConfigError, match="Unknown log level"):
        load_settings()
