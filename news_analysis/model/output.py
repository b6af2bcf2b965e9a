"""Output models for article analysis."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from news_analysis.common.errors import ErrorKind
from news_analysis.model.content import ContentSource


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class SentimentResult(BaseModel):
    """Normalized sentiment verdict."""

    label: SentimentLabel = Field(..., description="Final sentiment label")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Label confidence")
    positive_prob: float = Field(..., ge=0.0, le=1.0)
    negative_prob: float = Field(..., ge=0.0, le=1.0)


class DialectResult(BaseModel):
    """Lexicon-based dialect verdict."""

    is_match: bool = Field(..., description="Text reads as the target dialect")
    confidence: int = Field(..., ge=0, le=100, description="Confidence percentage")
    indicators: list[str] = Field(default_factory=list, description="Matched indicator terms")
    emotional_markers: list[str] = Field(default_factory=list, description="Matched markers")

    @property
    def dialect_label(self) -> str:
        return "jordanian" if self.is_match else "other"


class AnalysisRecord(BaseModel):
    """Persisted analysis of one article, keyed by article id."""

    model_config = ConfigDict(protected_namespaces=())

    article_id: str
    project_id: str | None = None
    user_id: str | None = None
    input_text: str
    sentiment: SentimentLabel
    sentiment_score: float
    positive_prob: float
    negative_prob: float
    emotion: str
    language: str = "ar"
    dialect: str
    dialect_confidence: int
    dialect_indicators: list[str] = Field(default_factory=list)
    emotional_markers: list[str] = Field(default_factory=list)
    content_source: ContentSource
    quality_score: int
    model_response: dict[str, Any] | None = None
    analysis_type: str = "batch_auto"
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def article_fields(self) -> dict[str, Any]:
        """Denormalized fields written back onto the article."""
        return {
            "is_analyzed": True,
            "sentiment": self.sentiment.value,
            "emotion": self.emotion,
            "dialect": self.dialect,
            "dialect_confidence": self.dialect_confidence,
            "dialect_indicators": list(self.dialect_indicators),
            "emotional_markers": list(self.emotional_markers),
        }


class ItemResult(BaseModel):
    """Outcome of one article: either a success summary or a failure."""

    article_id: str
    success: bool
    sentiment: SentimentLabel | None = None
    emotion: str | None = None
    confidence: float | None = None
    quality_score: int | None = None
    content_source: ContentSource | None = None
    dialect: str | None = None
    error_kind: ErrorKind | None = None
    error: str | None = None
    details: str | None = None

    @classmethod
    def ok(cls, record: AnalysisRecord) -> ItemResult:
        return cls(
            article_id=record.article_id,
            success=True,
            sentiment=record.sentiment,
            emotion=record.emotion,
            confidence=record.sentiment_score,
            quality_score=record.quality_score,
            content_source=record.content_source,
            dialect=record.dialect,
        )

    @classmethod
    def failed(
        cls,
        article_id: str,
        kind: ErrorKind,
        details: str | None = None,
        **extra: Any,
    ) -> ItemResult:
        return cls(
            article_id=article_id,
            success=False,
            error_kind=kind,
            error=kind.message,
            details=details,
            **extra,
        )


class BatchReport(BaseModel):
    """Aggregate outcome of one batch invocation."""

    success: bool = True
    processed: int = 0
    errors: int = 0
    total: int = 0
    results: list[ItemResult] = Field(default_factory=list)
    message: str = ""
    cancelled: bool = False

    @classmethod
    def from_results(
        cls, total: int, results: list[ItemResult], cancelled: bool = False
    ) -> BatchReport:
        processed = sum(1 for r in results if r.success)
        return cls(
            processed=processed,
            errors=len(results) - processed,
            total=total,
            results=results,
            message=f"تم تحليل {processed} مقال بنجاح من أصل {total}",
            cancelled=cancelled,
        )

    def to_response(self) -> dict[str, Any]:
        """Response body of the invocation contract."""
        body = self.model_dump(mode="json", exclude={"results", "cancelled"})
        body["results"] = [r.model_dump(mode="json", exclude_none=True) for r in self.results]
        if self.cancelled:
            body["cancelled"] = True
        return body


class TextAnalysis(BaseModel):
    """Result of analyzing a single text without persistence."""

    sentiment: SentimentResult
    emotion: str
    dialect: DialectResult
    content_source: ContentSource
    quality_score: int
    analyzed_text: str
