"""AWS CodePipeline client wrapper.

Wraps the boto3 `codepipeline` client so the poller only sees the four calls it needs
and plain value types. Every botocore failure is re-raised as a TransportError; retries
are botocore's own (standard retry mode).
"""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from codepipeline_execute.config import USER_AGENT
from codepipeline_execute.errors import ConfigError, TransportError
from codepipeline_execute.models import ActionObservation, PipelineDefinition, StageDefinition

logger = logging.getLogger(__name__)

NO_CREDENTIALS_MESSAGE = (
    "No credentials. Try adding aws-actions/configure-aws-credentials earlier in your job "
    "to set up AWS credentials."
)

_BOTO_CONFIG = Config(
    user_agent_extra=USER_AGENT,
    retries={"max_attempts": 5, "mode": "standard"},
)


class CodePipelineClient:
    """Small wrapper around the boto3 CodePipeline client."""

    def __init__(
        self,
        *,
        region: str | None = None,
        client: Any | None = None,
        session: boto3.session.Session | None = None,
    ) -> None:
        if client is not None:
            self._client = client
            self.region: str = region or client.meta.region_name
            logger.debug("Using injected CodePipeline client")
            return

        session = session or boto3.session.Session(region_name=region)
        if session.get_credentials() is None:
            raise ConfigError(NO_CREDENTIALS_MESSAGE)
        if not session.region_name:
            raise ConfigError("No AWS region configured. Set AWS_REGION for the job.")

        self.region = session.region_name
        self._client = session.client("codepipeline", config=_BOTO_CONFIG)
        logger.info("CodePipeline client ready", extra={"region": self.region})

    def start_execution(self, *, pipeline_name: str) -> str:
        try:
            resp = self._client.start_pipeline_execution(name=pipeline_name)
        except (BotoCoreError, ClientError) as e:
            raise TransportError(f"Failed to start pipeline {pipeline_name}: {e}") from e

        execution_id = resp["pipelineExecutionId"]
        logger.info(
            "Pipeline execution started",
            extra={"pipeline": pipeline_name, "execution_id": execution_id},
        )
        return str(execution_id)

    def get_definition(self, *, pipeline_name: str) -> PipelineDefinition:
        try:
            resp = self._client.get_pipeline(name=pipeline_name)
        except (BotoCoreError, ClientError) as e:
            raise TransportError(f"Failed to get pipeline {pipeline_name}: {e}") from e

        pipeline: dict[str, Any] = resp.get("pipeline") or {}
        stages = tuple(
            StageDefinition(
                name=stage.get("name", ""),
                actions=tuple(action.get("name", "") for action in stage.get("actions") or []),
            )
            for stage in pipeline.get("stages") or []
        )
        return PipelineDefinition(name=pipeline.get("name", pipeline_name), stages=stages)

    def get_execution_status(self, *, pipeline_name: str, execution_id: str) -> str:
        try:
            resp = self._client.get_pipeline_execution(
                pipelineName=pipeline_name,
                pipelineExecutionId=execution_id,
            )
        except (BotoCoreError, ClientError) as e:
            raise TransportError(f"Failed to get execution {execution_id}: {e}") from e

        return str(resp["pipelineExecution"]["status"])

    def list_action_executions(
        self, *, pipeline_name: str, execution_id: str
    ) -> list[ActionObservation]:
        """List every action execution of one pipeline execution, newest-first."""

        details: list[ActionObservation] = []
        try:
            paginator = self._client.get_paginator("list_action_executions")
            pages = paginator.paginate(
                pipelineName=pipeline_name,
                filter={"pipelineExecutionId": execution_id},
            )
            for page in pages:
                for item in page.get("actionExecutionDetails") or []:
                    details.append(self._parse_action_execution(item))
        except (BotoCoreError, ClientError) as e:
            raise TransportError(f"Failed to list actions of execution {execution_id}: {e}") from e

        return details

    @staticmethod
    def _parse_action_execution(item: dict[str, Any]) -> ActionObservation:
        output = item.get("output") or {}
        result = output.get("executionResult") or {}
        url = result.get("externalExecutionUrl")
        return ActionObservation(
            stage_name=item.get("stageName", ""),
            action_name=item.get("actionName", ""),
            status=item.get("status", ""),
            external_url=url if isinstance(url, str) and url else None,
            action_execution_id=item.get("actionExecutionId"),
        )
