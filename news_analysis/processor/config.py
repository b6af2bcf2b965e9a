"""Batch processor configuration."""

from __future__ import annotations

from pydantic import Field

from news_analysis.common.config import BaseConfig


class ProcessorConfig(BaseConfig):
    """Batch processor configuration."""

    page_size: int = Field(
        default=20,
        description="Maximum articles fetched per invocation",
        ge=1,
        le=500,
    )
    workers: int = Field(
        default=4,
        description="Articles processed concurrently",
        ge=1,
        le=32,
    )
    min_quality: int = Field(
        default=10,
        description="Absolute quality floor for the selected content",
        ge=0,
        le=100,
    )
    dialect_threshold: float = Field(
        default=20,
        description="Dialect confidence must be strictly above this to match",
        ge=0,
        le=100,
    )
    neutral_margin: float = Field(
        default=0.10,
        description="Probability gap below which sentiment is neutral",
        ge=0.0,
        le=1.0,
    )
    lexicon_path: str | None = Field(
        default=None,
        description="Dialect lexicon YAML, packaged lexicon when null",
    )
    analysis_type: str = Field(
        default="batch_auto",
        description="Tag stored with every analysis record",
    )
