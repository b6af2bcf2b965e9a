"""In-process connector."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import Field

from news_analysis.common.config import BaseConfig
from news_analysis.connectors.component import ConnectorComponent
from news_analysis.model.input import Article
from news_analysis.model.output import AnalysisRecord

logger = logging.getLogger(__name__)


class MemoryConnectorConfig(BaseConfig):
    """Seed data for the in-memory store."""

    articles: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Articles loaded on connect",
    )


class MemoryConnector(ConnectorComponent[MemoryConnectorConfig]):
    """Dict-backed store, keyed by article id."""

    _config_type = MemoryConnectorConfig

    def __init__(self, config: MemoryConnectorConfig | None = None) -> None:
        super().__init__(config or MemoryConnectorConfig())
        self.articles: dict[str, Article] = {}
        self.analyses: dict[str, AnalysisRecord] = {}
        self.add_articles(Article.model_validate(a) for a in self.config.articles)

    def add_articles(self, articles) -> None:
        for article in articles:
            self.articles[article.id] = article

    async def read_articles(
        self,
        project_id: str,
        user_id: str,
        article_ids: list[str] | None = None,
        limit: int = 20,
    ) -> list[Article]:
        matches = sorted(
            (
                a
                for a in self.articles.values()
                if a.project_id == project_id and a.user_id == user_id
            ),
            key=lambda a: a.id,
        )
        if article_ids:
            wanted = set(article_ids)
            matches = [a for a in matches if a.id in wanted]
        else:
            matches = [a for a in matches if not a.is_analyzed]

        logger.debug(f"Memory store matched {len(matches)} articles")
        return [a.model_copy() for a in matches[:limit]]

    async def upsert_analysis(self, record: AnalysisRecord) -> None:
        self.analyses[record.article_id] = record.model_copy(deep=True)

    async def update_article(self, article_id: str, fields: dict[str, Any]) -> None:
        article = self.articles.get(article_id)
        if article is None:
            logger.warning(f"Article {article_id} not found, nothing updated")
            return
        self.articles[article_id] = article.model_copy(update=fields)
