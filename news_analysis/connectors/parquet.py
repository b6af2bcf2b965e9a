"""Local Parquet connector."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq
from pydantic import BaseModel, Field

from news_analysis.common.config import BaseConfig
from news_analysis.common.errors import FetchError, PersistenceError
from news_analysis.common.utils import ArrowConverter
from news_analysis.connectors.component import ConnectorComponent
from news_analysis.model.input import Article
from news_analysis.model.output import AnalysisRecord

logger = logging.getLogger(__name__)


class ParquetConnectorConfig(BaseConfig):
    """Parquet directory configuration."""

    location: str = Field(
        ...,
        description="Directory holding the Parquet tables",
        min_length=1,
    )
    articles_file: str = Field(
        default="articles.parquet",
        description="Articles table file name",
    )
    analyses_file: str = Field(
        default="analyses.parquet",
        description="Analyses table file name",
    )


class ParquetConnector(ConnectorComponent[ParquetConnectorConfig]):
    """Stores articles and analyses as Parquet tables keyed by id.

    Every write rewrites the whole file; one lock serializes writers.
    """

    _config_type = ParquetConnectorConfig

    def __init__(self, config: ParquetConnectorConfig) -> None:
        super().__init__(config)
        self.root = Path(self.config.location)
        self._lock = asyncio.Lock()

    @property
    def articles_path(self) -> Path:
        return self.root / self.config.articles_file

    @property
    def analyses_path(self) -> Path:
        return self.root / self.config.analyses_file

    async def connect(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"Using Parquet store at: {self.root}")

    @staticmethod
    def _read(path: Path, model: type[BaseModel]) -> list[BaseModel]:
        if not path.exists():
            return []
        return [ArrowConverter.from_row(model, row) for row in pq.read_table(path).to_pylist()]

    @staticmethod
    def _write(path: Path, model: type[BaseModel], records: Iterable[BaseModel]) -> None:
        schema = ArrowConverter.to_arrow_schema(model)
        rows = [ArrowConverter.to_row(r) for r in records]
        pq.write_table(pa.Table.from_pylist(rows, schema=schema), path)

    async def write_articles(self, articles: Iterable[Article]) -> None:
        """Insert or replace articles by id."""
        async with self._lock:
            try:
                current = await asyncio.to_thread(self._read, self.articles_path, Article)
                existing = {a.id: a for a in current}
                existing.update((a.id, a) for a in articles)
                await asyncio.to_thread(self._write, self.articles_path, Article, existing.values())
            except (OSError, pa.ArrowException, ValueError) as e:
                raise PersistenceError(f"Error writing {self.articles_path}: {e}") from e

    async def read_articles(
        self,
        project_id: str,
        user_id: str,
        article_ids: list[str] | None = None,
        limit: int = 20,
    ) -> list[Article]:
        try:
            articles = await asyncio.to_thread(self._read, self.articles_path, Article)
        except (OSError, pa.ArrowException, ValueError) as e:
            raise FetchError(f"Error reading {self.articles_path}: {e}") from e

        matches = sorted(
            (a for a in articles if a.project_id == project_id and a.user_id == user_id),
            key=lambda a: a.id,
        )
        if article_ids:
            wanted = set(article_ids)
            matches = [a for a in matches if a.id in wanted]
        else:
            matches = [a for a in matches if not a.is_analyzed]
        return matches[:limit]

    async def upsert_analysis(self, record: AnalysisRecord) -> None:
        async with self._lock:
            try:
                current = await asyncio.to_thread(self._read, self.analyses_path, AnalysisRecord)
                existing = {r.article_id: r for r in current}
                existing[record.article_id] = record
                await asyncio.to_thread(
                    self._write, self.analyses_path, AnalysisRecord, existing.values()
                )
            except (OSError, pa.ArrowException, ValueError) as e:
                raise PersistenceError(f"Error writing analysis {record.article_id}: {e}") from e

    async def read_analyses(self) -> list[AnalysisRecord]:
        return await asyncio.to_thread(self._read, self.analyses_path, AnalysisRecord)

    async def update_article(self, article_id: str, fields: dict[str, Any]) -> None:
        async with self._lock:
            try:
                articles = await asyncio.to_thread(self._read, self.articles_path, Article)
                updated = [
                    a.model_copy(update=fields) if a.id == article_id else a for a in articles
                ]
                await asyncio.to_thread(self._write, self.articles_path, Article, updated)
            except (OSError, pa.ArrowException, ValueError) as e:
                raise PersistenceError(f"Error updating article {article_id}: {e}") from e
