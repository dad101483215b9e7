"""CLI entrypoint: start a CodePipeline execution and follow it to completion.

Exit codes:
- 0: the execution succeeded
- 1: a CodePipeline or GitHub call failed
- 2: configuration error (missing input or credentials)
- 4: the execution finished in a status other than Succeeded
- 130: polling was cancelled by SIGINT or SIGTERM
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from concurrent.futures import ThreadPoolExecutor

from codepipeline_execute import __version__
from codepipeline_execute.catalog import build_catalog
from codepipeline_execute.codepipeline.client import CodePipelineClient
from codepipeline_execute.config import ActionSettings, load_settings
from codepipeline_execute.errors import (
    ConfigError,
    PollingCancelled,
    TransportError,
    UnsuccessfulExecutionError,
)
from codepipeline_execute.github.client import GitHubClient
from codepipeline_execute.logging import configure_logging
from codepipeline_execute.models import Execution, ExecutionResult
from codepipeline_execute.poller import Poller
from codepipeline_execute.report import PullRequestReport, ReportSink, build_heading
from codepipeline_execute.runtime import PullRequestInfo, StepOutputs, load_pull_request

logger = logging.getLogger(__name__)

START_BANNER = "***** PIPELINE EXECUTION STARTING *****"
END_BANNER = "***** PIPELINE EXECUTION COMPLETE *****"
CANCEL_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codepipeline-execute",
        description=(
            "Start an AWS CodePipeline execution, report its progress on the pull request "
            "and wait for it to finish"
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"aws-codepipeline-execute {__version__}"
    )
    parser.add_argument(
        "--pipeline-name",
        default=None,
        help="Pipeline to execute (defaults to the 'pipeline-name' action input)",
    )
    return parser


def run_pipeline(
    *,
    settings: ActionSettings,
    codepipeline: CodePipelineClient,
    github: GitHubClient | None = None,
    pull_request: PullRequestInfo | None = None,
    console: Callable[[str], None] = print,
    cancel: threading.Event | None = None,
) -> ExecutionResult:
    """Start the pipeline, open the progress comment if any, and poll to completion."""

    config = settings.poller_config()
    pipeline_name = settings.pipeline_name

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="start") as pool:
        execution_future = pool.submit(codepipeline.start_execution, pipeline_name=pipeline_name)
        definition_future = pool.submit(codepipeline.get_definition, pipeline_name=pipeline_name)
        execution_id = execution_future.result()
        definition = definition_future.result()

    execution = Execution(
        execution_id=execution_id,
        pipeline_name=pipeline_name,
        url=config.execution_url(
            pipeline_name=pipeline_name,
            execution_id=execution_id,
            region=codepipeline.region,
        ),
    )
    catalog = build_catalog(definition)

    console(f"Pipeline execution ID: {execution.execution_id}")
    console(f"Pipeline execution URL: {execution.url}")
    console("Pipeline actions:")
    for entry in catalog:
        console(f"- {entry.ref}")

    report: PullRequestReport | None = None
    if pull_request is not None and github is not None:
        heading = build_heading(
            pipeline_name=pipeline_name,
            execution_url=execution.url,
            head_sha=pull_request.head.sha or None,
        )
        sink = ReportSink(github=github, issue_number=pull_request.number)
        report = PullRequestReport.open(sink=sink, heading=heading, catalog=catalog, config=config)

    poller = Poller(codepipeline=codepipeline, config=config, console=console)
    return poller.run(catalog=catalog, execution=execution, report=report, cancel=cancel)


@contextmanager
def cancel_on_signals() -> Iterator[threading.Event]:
    """Set the yielded event on SIGINT or SIGTERM; previous handlers are restored on exit."""

    cancel = threading.Event()
    previous = {sig: signal.getsignal(sig) for sig in CANCEL_SIGNALS}
    for sig in CANCEL_SIGNALS:
        signal.signal(sig, lambda *_: cancel.set())
    try:
        yield cancel
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def write_outputs(outputs: StepOutputs, result: ExecutionResult) -> None:
    outputs.set("pipeline-execution-id", result.execution_id)
    outputs.set("pipeline-execution-status", result.status)
    outputs.set("pipeline-execution-url", result.url)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    print(START_BANNER)
    try:
        return _main(args)
    finally:
        print(END_BANNER)


def _main(args: argparse.Namespace) -> int:
    overrides = {"pipeline_name": args.pipeline_name} if args.pipeline_name else {}
    try:
        settings = load_settings(**overrides)
    except ConfigError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error:", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, settings.log_format)

    github: GitHubClient | None = None
    try:
        codepipeline = CodePipelineClient(region=settings.aws_region)

        pull_request = load_pull_request(settings.github_event_path)
        if pull_request is not None:
            if not settings.github_repository:
                raise ConfigError("GITHUB_REPOSITORY is required to comment on a pull request")
            github = GitHubClient(
                token=settings.github_token,
                repository=settings.github_repository,
                base_url=settings.github_base_url,
            )

        with cancel_on_signals() as cancel:
            result = run_pipeline(
                settings=settings,
                codepipeline=codepipeline,
                github=github,
                pull_request=pull_request,
                cancel=cancel,
            )
        write_outputs(StepOutputs(settings.github_output_path), result)
        result.raise_for_status()
        return 0

    except ConfigError as e:
        logger.error(str(e))
        print(str(e), file=sys.stderr)
        return 2

    except UnsuccessfulExecutionError as e:
        logger.warning(
            str(e),
            extra={"execution_id": e.result.execution_id, "status": e.result.status},
        )
        print(str(e), file=sys.stderr)
        return 4

    except PollingCancelled as e:
        logger.warning(str(e))
        return 130

    except TransportError:
        logger.exception("CodePipeline or GitHub call failed")
        return 1

    except Exception:
        logger.exception("Pipeline execution failed")
        return 1

    finally:
        if github is not None:
            github.close()


if __name__ == "__main__":
    raise SystemExit(main())
