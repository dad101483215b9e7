"""GitHub integration."""

from codepipeline_execute.github.client import GitHubClient

__all__ = ["GitHubClient"]
