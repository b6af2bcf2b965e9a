"""Input models for article analysis."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Article(BaseModel):
    """Scraped news article as stored by the ingesting scraper."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Article identifier")
    project_id: str | None = Field(default=None, description="Owning project")
    user_id: str | None = Field(default=None, description="Owning user")
    title: str = Field(default="", description="Headline")
    description: str | None = Field(default=None, description="Summary or standfirst")
    body: str | None = Field(
        default=None,
        alias="content",
        description="Full article text, may hold paywall placeholders",
    )
    language: str = Field(default="ar", description="Article language")
    is_analyzed: bool = Field(default=False, description="Analysis already persisted")

    # denormalized analysis fields
    sentiment: str | None = None
    emotion: str | None = None
    dialect: str | None = None
    dialect_confidence: float | None = None
    dialect_indicators: list[str] | None = None
    emotional_markers: list[str] | None = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v):
        return str(v)

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v):
        return v or ""

    @field_validator("language", mode="before")
    @classmethod
    def validate_language(cls, v):
        return v or "ar"


class BatchRequest(BaseModel):
    """Batch invocation payload."""

    model_config = ConfigDict(extra="ignore")

    project_id: str = Field(..., min_length=1, description="Project to analyze")
    user_id: str = Field(..., min_length=1, description="Owner of the project")
    article_ids: list[str] | None = Field(
        default=None,
        description="Explicit articles to (re-)analyze; unanalyzed ones when omitted",
    )

    @field_validator("article_ids", mode="before")
    @classmethod
    def validate_article_ids(cls, v):
        if not v:
            return None
        return [str(i) for i in v]
