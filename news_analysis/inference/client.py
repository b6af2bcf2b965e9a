"""HTTP client for the external sentiment inference endpoint."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from news_analysis.common.component import ComponentFactory
from news_analysis.common.errors import InferenceError
from news_analysis.inference.config import InferenceConfig
from news_analysis.inference.limiter import RateLimiter
from news_analysis.inference.providers import get_adapter, parse_raw_scores
from news_analysis.inference.types import ConnectionStatus, RawScore, SentimentProbabilities

logger = logging.getLogger(__name__)


class InferenceClient(ComponentFactory[InferenceConfig]):
    """Sends texts to the inference endpoint, one attempt per text."""

    _config_type = InferenceConfig

    def __init__(
        self, config: InferenceConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        """Initialize client."""
        super().__init__(config)

        self.adapter = get_adapter(self.config.label_scheme)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._semaphore: asyncio.Semaphore = asyncio.Semaphore(self.config.workers)
        self._limiter: RateLimiter | None = (
            RateLimiter(self.config.requests_per_minute)
            if self.config.requests_per_minute
            else None
        )

        logger.debug(f"Inference client initialized for endpoint: {self.config.endpoint}")

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={
                "Authorization": f"Bearer {self.config.token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(self.config.timeout),
            transport=self._transport,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy load client."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        if self._limiter:
            await self._limiter.acquire()

        async with self._semaphore:
            return await self.client.post(self.config.endpoint, json=payload)

    async def raw_scores(self, text: str) -> tuple[list[RawScore], Any]:
        """Score a text and return the parsed scores with the raw body."""
        payload = {"inputs": text, "parameters": self.config.parameters}

        try:
            response = await self._post(payload)
        except httpx.TimeoutException as e:
            raise InferenceError(
                f"Inference request timed out after {self.config.timeout}s", detail=str(e)
            ) from e
        except httpx.HTTPError as e:
            raise InferenceError("Inference request failed", detail=str(e)) from e

        if not response.is_success:
            logger.error(f"Inference endpoint error: {response.status_code} {response.text}")
            raise InferenceError(
                f"Inference endpoint returned {response.status_code}",
                status_code=response.status_code,
                detail=response.text,
            )

        try:
            body = response.json()
            scores = parse_raw_scores(body)
        except ValueError as e:
            raise InferenceError(
                "Malformed inference response",
                status_code=response.status_code,
                detail=response.text,
            ) from e

        logger.debug(f"Inference result: {body}")
        return scores, body

    async def infer(self, text: str) -> SentimentProbabilities:
        scores, _ = await self.raw_scores(text)
        return self.adapter.adapt(scores)

    async def check_connection(self) -> ConnectionStatus:
        """Probe the endpoint with a minimal request."""
        try:
            response = await self.client.post(
                self.config.endpoint, json={"inputs": "test", "options": {"wait_for_model": False}}
            )
        except httpx.HTTPError as e:
            logger.error(f"Error connecting to inference endpoint: {e}")
            return ConnectionStatus(
                ok=False, message="Could not connect to the endpoint; check the URL."
            )

        if not response.is_success:
            message = response.reason_phrase or "Connection failed"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                message = str(body.get("error") or body.get("message") or message)
            return ConnectionStatus(ok=False, status_code=response.status_code, message=message)

        return ConnectionStatus(ok=True, status_code=response.status_code)

    async def close(self):
        """Close client."""
        if self._client:
            try:
                await self._client.aclose()
            except Exception as e:
                logger.error(f"Error closing client: {e}")
            finally:
                self._client = None

    async def __aenter__(self) -> InferenceClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit, cleanup resources."""
        await self.close()
