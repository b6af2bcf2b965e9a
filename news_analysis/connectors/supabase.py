"""Supabase (PostgREST) connector."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any

import httpx
import tenacity
from pydantic import Field, model_validator

from news_analysis.common.config import BaseConfig
from news_analysis.common.errors import FetchError, PersistenceError
from news_analysis.connectors.component import ConnectorComponent
from news_analysis.model.input import Article
from news_analysis.model.output import AnalysisRecord

logger = logging.getLogger(__name__)


class SupabaseConnectorConfig(BaseConfig):
    """Supabase REST connector configuration."""

    url: str = Field(
        default=...,
        description="Project URL",
    )
    service_key: str = Field(
        default=...,
        description="Service role key",
    )

    @model_validator(mode="before")
    @classmethod
    def validate_credentials(cls, values: dict) -> dict:
        url = values.get("url") or os.getenv("SUPABASE_URL")
        service_key = values.get("service_key") or os.getenv("SUPABASE_SERVICE_ROLE_KEY")

        if not url:
            raise ValueError("SUPABASE_URL must be set")
        if not service_key:
            raise ValueError("SUPABASE_SERVICE_ROLE_KEY must be set")

        values["url"] = url.rstrip("/")
        values["service_key"] = service_key
        return values

    articles_table: str = Field(
        default="scraped_news",
        description="Table holding scraped articles",
    )
    analyses_table: str = Field(
        default="text_analyses",
        description="Table receiving analysis records",
    )
    conflict_key: str = Field(
        default="article_id",
        description="Unique column used to upsert analyses",
    )
    timeout: float = Field(
        default=15.0,
        description="Request timeout in seconds",
        gt=0,
    )
    read_attempts: int = Field(
        default=3,
        description="Attempts for listing articles on transport errors",
        ge=1,
        le=10,
    )
    retry_wait: float = Field(
        default=1.0,
        description="Base backoff in seconds between listing attempts",
        ge=0,
    )


class SupabaseConnector(ConnectorComponent[SupabaseConnectorConfig]):
    """Reads articles and writes analyses through the PostgREST API."""

    _config_type = SupabaseConnectorConfig

    def __init__(
        self,
        config: SupabaseConnectorConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(config)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.config.url}/rest/v1",
                headers={
                    "apikey": self.config.service_key,
                    "Authorization": f"Bearer {self.config.service_key}",
                    "Content-Type": "application/json",
                },
                timeout=httpx.Timeout(self.config.timeout),
                transport=self._transport,
            )
        return self._client

    async def connect(self) -> None:
        logger.info(f"Connected to Supabase project: {self.config.url}")

    async def disconnect(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info(f"Disconnected from Supabase project: {self.config.url}")

    async def _get_articles(self, params: dict[str, str]) -> list[dict[str, Any]]:
        retrying = tenacity.AsyncRetrying(
            retry=tenacity.retry_if_exception_type(httpx.TransportError),
            wait=tenacity.wait_exponential(
                multiplier=self.config.retry_wait, min=self.config.retry_wait, max=8
            ),
            stop=tenacity.stop_after_attempt(self.config.read_attempts),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await self.client.get(f"/{self.config.articles_table}", params=params)
                response.raise_for_status()
                return response.json()
        return []

    async def read_articles(
        self,
        project_id: str,
        user_id: str,
        article_ids: list[str] | None = None,
        limit: int = 20,
    ) -> list[Article]:
        params = {
            "select": "*",
            "project_id": f"eq.{project_id}",
            "user_id": f"eq.{user_id}",
            "order": "id.asc",
            "limit": str(limit),
        }
        if article_ids:
            params["id"] = f"in.({','.join(article_ids)})"
        else:
            params["is_analyzed"] = "eq.false"

        try:
            rows = await self._get_articles(params)
        except httpx.HTTPStatusError as e:
            raise FetchError(f"Failed to fetch articles: {e.response.text}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch articles: {e}") from e
        except ValueError as e:
            raise FetchError(f"Malformed article listing: {e}") from e

        try:
            return [Article.model_validate(row) for row in rows]
        except ValueError as e:
            raise FetchError(f"Unexpected article row: {e}") from e

    async def upsert_analysis(self, record: AnalysisRecord) -> None:
        body = record.model_dump(mode="json")
        try:
            response = await self.client.post(
                f"/{self.config.analyses_table}",
                params={"on_conflict": self.config.conflict_key},
                headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
                json=body,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PersistenceError(f"Error writing analysis: {e.response.text}") from e
        except httpx.HTTPError as e:
            raise PersistenceError(f"Error writing analysis: {e}") from e

    async def update_article(self, article_id: str, fields: dict[str, Any]) -> None:
        body = {**fields, "updated_at": datetime.now(timezone.utc).isoformat()}
        try:
            response = await self.client.patch(
                f"/{self.config.articles_table}",
                params={"id": f"eq.{article_id}"},
                headers={"Prefer": "return=minimal"},
                json=body,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PersistenceError(f"Error updating article: {e.response.text}") from e
        except httpx.HTTPError as e:
            raise PersistenceError(f"Error updating article: {e}") from e
