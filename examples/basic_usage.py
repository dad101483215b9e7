#!/usr/bin/env python3
"""Follow an execution that was started elsewhere (programmatic example).

This demonstrates using the components directly, without starting a new execution:

* build the action catalog from the pipeline definition
* poll an existing execution until it finishes, printing progress
* stop cleanly between polls on Ctrl-C

AWS credentials and region are resolved by boto3 as usual.
"""

from __future__ import annotations

import argparse
import signal
import threading
from typing import Sequence

from codepipeline_execute.catalog import build_catalog
from codepipeline_execute.codepipeline.client import CodePipelineClient
from codepipeline_execute.config import PollerConfig
from codepipeline_execute.errors import PollingCancelled
from codepipeline_execute.logging import configure_logging
from codepipeline_execute.models import Execution
from codepipeline_execute.poller import Poller


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Follow a CodePipeline execution.")
    parser.add_argument("--pipeline-name", required=True, help="Pipeline name")
    parser.add_argument("--execution-id", required=True, help="Pipeline execution id")
    parser.add_argument("--poll-seconds", type=float, default=20.0, help="Seconds between polls")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging("INFO", "text")

    codepipeline = CodePipelineClient()
    config = PollerConfig(poll_interval_seconds=args.poll_seconds)

    catalog = build_catalog(codepipeline.get_definition(pipeline_name=args.pipeline_name))
    execution = Execution(
        execution_id=args.execution_id,
        pipeline_name=args.pipeline_name,
        url=config.execution_url(
            pipeline_name=args.pipeline_name,
            execution_id=args.execution_id,
            region=codepipeline.region,
        ),
    )
    print(f"Following {execution.url}")

    cancel = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: cancel.set())

    try:
        result = Poller(codepipeline=codepipeline, config=config).run(
            catalog=catalog, execution=execution, cancel=cancel
        )
    except PollingCancelled as exc:
        print(str(exc))
        return 130

    print(f"Final status: {result.status}")
    return 0 if result.succeeded else 4


if __name__ == "__main__":
    raise SystemExit(main())
