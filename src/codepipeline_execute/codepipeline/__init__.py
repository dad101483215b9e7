"""AWS CodePipeline integration."""

from codepipeline_execute.codepipeline.client import CodePipelineClient

__all__ = ["CodePipelineClient"]
