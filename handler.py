import asyncio
import json
import logging
import os
import time
from typing import Any

from pydantic import ValidationError

from main import DEFAULT_CONFIG, run_batch
from news_analysis.common import ConfigError, CustomEncoder, FetchError, RootConfig
from news_analysis.model import BatchRequest

# Setup logger
logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def _response(status: int, body: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body, cls=CustomEncoder, ensure_ascii=False),
    }


def parse_event(event: dict[str, Any]) -> dict[str, Any]:
    """Extract the request payload from a raw or API-gateway style event."""
    body = event.get("body", event)
    if isinstance(body, str):
        body = json.loads(body or "{}")
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


def load_config() -> RootConfig:
    """Load the job configuration named by `ANALYSIS_CONFIG`."""
    config_path = os.environ.get("ANALYSIS_CONFIG", DEFAULT_CONFIG)
    logger.info(f"Loading configuration from {config_path}")
    return RootConfig.from_yaml(config_path)


async def process_request(
    event: dict[str, Any], config: RootConfig | None = None
) -> dict[str, Any]:
    """Process the incoming request."""
    try:
        request = BatchRequest.model_validate(parse_event(event))
    except (ValueError, ValidationError) as e:
        logger.error(f"Invalid request: {e}")
        return _response(400, {"error": "project_id and user_id are required", "details": str(e)})

    try:
        config = config or load_config()

        logger.info("Starting batch analysis...")
        start = time.time()
        report = await run_batch(config, request)
        end = time.time()

        logger.info(f"Batch completed in {end - start:.2f} seconds: {report.message}")
        return _response(200, report.to_response())
    except FetchError as e:
        logger.error(f"Error fetching articles: {e}")
        return _response(500, {"error": "Failed to fetch articles", "details": str(e)})
    except (ConfigError, ValidationError) as e:
        logger.error(f"Config validation error: {e}")
        return _response(500, {"error": "Invalid configuration", "details": str(e)})
    except Exception as e:
        logger.error(f"Error processing request: {e}", exc_info=True)
        return _response(500, {"error": "Internal server error", "details": str(e)})


def lambda_handler(event: dict[str, Any], context: Any | None = None) -> dict[str, Any]:
    """AWS Lambda entry point."""
    logger.info("Starting Lambda handler...")
    try:
        return asyncio.run(process_request(event))
    except Exception as e:
        logger.error(f"Unhandled exception: {e}")
        return _response(500, {"error": "Unhandled server error"})
