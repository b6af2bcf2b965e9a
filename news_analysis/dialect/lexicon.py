"""Weighted term tables for dialect and emotion detection."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from news_analysis.common.errors import ConfigError

DEFAULT_LEXICON = "jordanian.yaml"


class LexiconEntry(BaseModel):
    term: str = Field(..., min_length=1)
    weight: float = Field(default=1.0, ge=0.0)


class LexiconTables(BaseModel):
    """Indicator terms and emotional markers of one dialect, with weights."""

    name: str
    version: int = 1
    indicators: list[LexiconEntry] = Field(default_factory=list)
    emotional_markers: list[LexiconEntry] = Field(default_factory=list)

    @classmethod
    def from_yaml(cls, path: str | Path) -> LexiconTables:
        try:
            with open(path, encoding="utf-8") as f:
                return cls.model_validate(yaml.safe_load(f))
        except (OSError, yaml.YAMLError, ValueError) as e:
            raise ConfigError(f"Invalid lexicon file {path}: {e}") from e

    @classmethod
    def default(cls) -> LexiconTables:
        """Packaged production lexicon."""
        source = resources.files("news_analysis.dialect").joinpath("data", DEFAULT_LEXICON)
        with resources.as_file(source) as path:
            return cls.from_yaml(path)
