"""Batch analysis of scraped articles."""

from __future__ import annotations

import asyncio
import logging

from news_analysis.common.component import ComponentFactory
from news_analysis.common.errors import (
    AnalysisError,
    ContentError,
    ErrorKind,
    InferenceError,
    PersistenceError,
)
from news_analysis.connectors.component import ConnectorComponent
from news_analysis.content.selector import ContentSelector
from news_analysis.dialect.detector import DialectDetector
from news_analysis.dialect.lexicon import LexiconTables
from news_analysis.inference.sentiment import SentimentNormalizer
from news_analysis.inference.types import InferenceProvider, SentimentProbabilities
from news_analysis.model.content import ContentCandidate, ContentSource
from news_analysis.model.input import Article, BatchRequest
from news_analysis.model.output import AnalysisRecord, BatchReport, ItemResult, TextAnalysis
from news_analysis.processor.config import ProcessorConfig

logger = logging.getLogger(__name__)


class BatchProcessor(ComponentFactory[ProcessorConfig]):
    """Analyzes a page of articles, isolating failures per article.

    Each article runs selection, inference, normalization, dialect scoring
    and persistence. A failure at any stage becomes a failed `ItemResult`
    for that article only; the batch itself fails only when the articles
    cannot be listed.
    """

    _config_type = ProcessorConfig

    def __init__(
        self,
        config: ProcessorConfig,
        connector: ConnectorComponent,
        provider: InferenceProvider,
        selector: ContentSelector | None = None,
        detector: DialectDetector | None = None,
        normalizer: SentimentNormalizer | None = None,
    ) -> None:
        super().__init__(config)
        self.connector = connector
        self.provider = provider
        self.selector = selector or ContentSelector()
        self.detector = detector or DialectDetector(
            lexicon=(
                LexiconTables.from_yaml(self.config.lexicon_path)
                if self.config.lexicon_path
                else None
            ),
            threshold=self.config.dialect_threshold,
        )
        self.normalizer = normalizer or SentimentNormalizer(self.config.neutral_margin)

        logger.info(
            f"Initialized processor with page size {self.config.page_size}, "
            f"{self.config.workers} workers"
        )

    async def run(
        self, request: BatchRequest, cancel: asyncio.Event | None = None
    ) -> BatchReport:
        """Analyze the requested articles and report per-article outcomes.

        Raises `FetchError` when the articles cannot be listed. Once `cancel`
        is set, articles not yet started are skipped and left out of the
        counts.
        """
        logger.info(
            f"Starting batch analysis for project {request.project_id}, user {request.user_id}"
        )
        articles = await self.connector.read_articles(
            project_id=request.project_id,
            user_id=request.user_id,
            article_ids=request.article_ids,
            limit=self.config.page_size,
        )

        if not articles:
            logger.info("No articles to analyze")
            return BatchReport(message="No articles to analyze")

        logger.info(f"Found {len(articles)} articles to analyze")
        semaphore = asyncio.Semaphore(self.config.workers)

        async def guarded(article: Article) -> ItemResult | None:
            async with semaphore:
                if cancel is not None and cancel.is_set():
                    return None
                return await self.process_article(article, request)

        outcomes = await asyncio.gather(*(guarded(a) for a in articles))
        results = sorted((r for r in outcomes if r is not None), key=lambda r: r.article_id)

        report = BatchReport.from_results(
            total=len(articles), results=results, cancelled=len(results) < len(articles)
        )
        logger.info(
            f"Batch analysis completed: {report.processed} successful, {report.errors} errors"
            + (f", {len(articles) - len(results)} skipped" if report.cancelled else "")
        )
        return report

    async def process_article(self, article: Article, request: BatchRequest) -> ItemResult:
        """Run one article through the pipeline; never raises."""
        logger.info(f"Analyzing article {article.id}: {article.title[:50]}...")

        candidate = self.selector.select(article)
        if not self._usable(candidate):
            logger.info(
                f"Skipping article {article.id} - no usable content ({candidate.quality_score})"
            )
            return ItemResult.failed(
                article.id,
                ErrorKind.CONTENT,
                quality_score=candidate.quality_score,
                content_source=candidate.source,
            )

        logger.info(
            f"Using {candidate.source.value} for analysis with quality {candidate.quality_score}%"
        )

        try:
            record = await self._analyze(article, candidate, request)
            await self._persist(record)
        except InferenceError as e:
            logger.error(f"Inference failed for article {article.id}: {e} {e.detail}")
            return ItemResult.failed(article.id, e.kind, details=e.detail or str(e))
        except AnalysisError as e:
            logger.error(f"Error analyzing article {article.id}: {e}")
            return ItemResult.failed(article.id, e.kind, details=str(e))
        except Exception as e:
            logger.error(f"Error processing article {article.id}: {e}", exc_info=True)
            return ItemResult.failed(article.id, ErrorKind.INTERNAL, details=str(e))

        logger.info(f"Successfully analyzed article {article.id} using {candidate.source.value}")
        return ItemResult.ok(record)

    def _usable(self, candidate: ContentCandidate) -> bool:
        return (
            candidate.source is not ContentSource.NONE
            and candidate.quality_score >= self.config.min_quality
        )

    async def _infer(self, text: str) -> SentimentProbabilities:
        try:
            return await self.provider.infer(text)
        except InferenceError:
            raise
        except Exception as e:
            raise InferenceError("Inference failed", detail=str(e)) from e

    async def _analyze(
        self, article: Article, candidate: ContentCandidate, request: BatchRequest
    ) -> AnalysisRecord:
        probabilities = await self._infer(candidate.text)
        sentiment = self.normalizer.from_probabilities(probabilities)
        dialect = self.detector.detect(candidate.text)
        emotion = self.normalizer.emotion_for(sentiment.label, bool(dialect.emotional_markers))

        return AnalysisRecord(
            article_id=article.id,
            project_id=article.project_id or request.project_id,
            user_id=article.user_id or request.user_id,
            input_text=candidate.text,
            sentiment=sentiment.label,
            sentiment_score=sentiment.confidence,
            positive_prob=sentiment.positive_prob,
            negative_prob=sentiment.negative_prob,
            emotion=emotion,
            language=article.language,
            dialect=dialect.dialect_label,
            dialect_confidence=dialect.confidence,
            dialect_indicators=dialect.indicators,
            emotional_markers=dialect.emotional_markers,
            content_source=candidate.source,
            quality_score=candidate.quality_score,
            model_response={
                "probabilities": probabilities.model_dump(),
                "content_source": candidate.source.value,
                "quality_score": candidate.quality_score,
                "analysis_type": self.config.analysis_type,
            },
            analysis_type=self.config.analysis_type,
        )

    async def _persist(self, record: AnalysisRecord) -> None:
        # the inference call is already spent; a failed write is not rolled back
        try:
            await self.connector.upsert_analysis(record)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Error writing analysis: {e}") from e

        try:
            await self.connector.update_article(record.article_id, record.article_fields())
        except Exception as e:
            logger.error(f"Error updating article {record.article_id}: {e}")

    async def analyze_text(
        self,
        text: str | None = None,
        title: str | None = None,
        description: str | None = None,
    ) -> TextAnalysis:
        """Analyze a single text without persisting anything.

        Raises `ContentError` when no usable text is given and
        `InferenceError` when the endpoint fails.
        """
        article = Article(id="direct", title=title or "", description=description, body=text)
        candidate = self.selector.select(article)
        if not self._usable(candidate):
            raise ContentError("No usable text to analyze")

        probabilities = await self._infer(candidate.text)
        sentiment = self.normalizer.from_probabilities(probabilities)
        dialect = self.detector.detect(candidate.text)

        return TextAnalysis(
            sentiment=sentiment,
            emotion=self.normalizer.emotion_for(sentiment.label, bool(dialect.emotional_markers)),
            dialect=dialect,
            content_source=candidate.source,
            quality_score=candidate.quality_score,
            analyzed_text=candidate.text,
        )
