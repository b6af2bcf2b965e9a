"""Model package for article analysis."""

from .content import ContentCandidate, ContentSource, QualityAssessment, QualityBucket
from .input import Article, BatchRequest
from .output import (
    AnalysisRecord,
    BatchReport,
    DialectResult,
    ItemResult,
    SentimentLabel,
    SentimentResult,
    TextAnalysis,
)

__all__ = [
    "Article",
    "BatchRequest",
    "ContentCandidate",
    "ContentSource",
    "QualityAssessment",
    "QualityBucket",
    "AnalysisRecord",
    "BatchReport",
    "DialectResult",
    "ItemResult",
    "SentimentLabel",
    "SentimentResult",
    "TextAnalysis",
]
