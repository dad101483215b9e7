"""AWS CodePipeline execute.

Starts an AWS CodePipeline execution from a GitHub Actions job and follows it:
- progress printed to the job log as actions change status
- a pull request comment kept up to date with every action's status
- step outputs with the execution id, final status and console URL
"""

__version__ = "0.1.0"

from codepipeline_execute.config import ActionSettings, PollerConfig

__all__ = ["__version__", "ActionSettings", "PollerConfig"]
