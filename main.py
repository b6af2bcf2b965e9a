"""Batch article analysis job."""

import asyncio
import json
import logging
import os
import signal

from news_analysis.common import CustomEncoder, RootConfig
from news_analysis.connectors import ConnectorFactory
from news_analysis.inference import InferenceClient
from news_analysis.model import BatchReport, BatchRequest
from news_analysis.processor import BatchProcessor, ProcessorConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = os.path.join(os.path.dirname(__file__), "config", "analysis.yaml")


async def run_batch(
    config: RootConfig, request: BatchRequest, cancel: asyncio.Event | None = None
) -> BatchReport:
    """Run one batch against the configured store and endpoint."""
    connector = ConnectorFactory.from_config(config.connector)
    processor_config = ProcessorConfig.model_validate(config.processor)

    async with connector, InferenceClient.from_config(config.inference) as provider:
        processor = BatchProcessor(processor_config, connector=connector, provider=provider)
        return await processor.run(request, cancel=cancel)


async def check_connection(config: RootConfig) -> bool:
    """Probe the inference endpoint."""
    async with InferenceClient.from_config(config.inference) as provider:
        status = await provider.check_connection()

    if status.ok:
        logger.info(f"Inference endpoint reachable ({status.status_code})")
    else:
        logger.error(f"Inference endpoint check failed ({status.status_code}): {status.message}")
    return status.ok


async def main(config: RootConfig, request: BatchRequest) -> int:
    """Run the main process."""
    logger.info("Starting process")

    # stop issuing new work on SIGINT/SIGTERM, let in-flight articles finish
    cancel = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, cancel.set)

    report = await run_batch(config, request, cancel=cancel)
    print(json.dumps(report.to_response(), cls=CustomEncoder, ensure_ascii=False, indent=2))

    logger.info(report.message or f"Processed {report.processed}/{report.total} articles")
    return report.processed


if __name__ == "__main__":
    import argparse
    import time

    # Configure logging
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    parser = argparse.ArgumentParser(description="Run batch article analysis")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG, help="Config file")
    parser.add_argument("--project-id", type=str, help="Project to analyze")
    parser.add_argument("--user-id", type=str, help="Owner of the project")
    parser.add_argument(
        "--article-id",
        action="append",
        dest="article_ids",
        help="Article to (re-)analyze, may be repeated",
    )
    parser.add_argument(
        "--check", action="store_true", help="Only check the inference endpoint"
    )
    args = parser.parse_args()

    logger.info(f"Loading config from {args.config}")
    config = RootConfig.from_yaml(args.config)

    if args.check:
        raise SystemExit(0 if asyncio.run(check_connection(config)) else 1)

    if not args.project_id or not args.user_id:
        parser.error("--project-id and --user-id are required")

    request = BatchRequest(
        project_id=args.project_id, user_id=args.user_id, article_ids=args.article_ids
    )

    # Run job and measure time
    start = time.time()
    asyncio.run(main(config, request))
    end = time.time()

    logger.info(f"Workflow completed in {end - start:.2f} seconds")
