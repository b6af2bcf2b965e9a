"""Base connector component for article persistence."""

from __future__ import annotations

import logging
from typing import Any

from news_analysis.common.component import ComponentFactory
from news_analysis.common.config import TConf
from news_analysis.model.input import Article
from news_analysis.model.output import AnalysisRecord

logger = logging.getLogger(__name__)


class ConnectorComponent(ComponentFactory[TConf]):
    """Base class for persistence connectors.

    Reads raise `FetchError`, writes raise `PersistenceError`.
    """

    async def connect(self) -> None:
        """Establish connection."""

    async def disconnect(self) -> None:
        """Close connection resources."""

    async def read_articles(
        self,
        project_id: str,
        user_id: str,
        article_ids: list[str] | None = None,
        limit: int = 20,
    ) -> list[Article]:
        """List the given articles, or the unanalyzed ones of the project."""
        raise NotImplementedError

    async def upsert_analysis(self, record: AnalysisRecord) -> None:
        """Create or overwrite the analysis keyed by `record.article_id`."""
        raise NotImplementedError

    async def update_article(self, article_id: str, fields: dict[str, Any]) -> None:
        """Write denormalized analysis fields onto an article."""
        raise NotImplementedError

    async def __aenter__(self):
        """Enter context."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit context."""
        await self.disconnect()
