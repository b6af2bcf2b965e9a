"""Content selection models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ContentSource(str, Enum):
    """Fallback tier that produced the analyzed text."""

    BODY = "body"
    TITLE_DESCRIPTION = "title_description"
    TITLE_ONLY = "title_only"
    NONE = "none"


class QualityBucket(str, Enum):
    NONE = "none"
    SHORT = "short"
    FAIR = "fair"
    GOOD = "good"


class QualityAssessment(BaseModel):
    """Analysis-worthiness of a text blob."""

    valid: bool
    reason: str = Field(default="", description="Rejection kind, empty when valid")
    score: int = Field(default=0, ge=0, le=100)
    bucket: QualityBucket = QualityBucket.NONE


class ContentCandidate(BaseModel):
    """Text chosen for analysis, with its tier and quality."""

    text: str = ""
    source: ContentSource = ContentSource.NONE
    quality_score: int = Field(default=0, ge=0, le=100)

    @classmethod
    def empty(cls) -> ContentCandidate:
        return cls()
