"""Fallback-cascade selection of the text to analyze."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from news_analysis.content.quality import ContentQualityScorer
from news_analysis.model.content import ContentCandidate, ContentSource
from news_analysis.model.input import Article

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentStrategy:
    """One tier of the cascade: where the text comes from and how it is scored."""

    source: ContentSource
    extract: Callable[[Article], str | None]
    is_primary: bool = False


def _body(article: Article) -> str | None:
    return article.body


def _title_description(article: Article) -> str | None:
    # only a real combination; a lone title is the next tier
    if not (article.title and article.title.strip()):
        return None
    if not (article.description and article.description.strip()):
        return None
    return f"{article.title}. {article.description}"


def _title(article: Article) -> str | None:
    return article.title


DEFAULT_STRATEGIES: tuple[ContentStrategy, ...] = (
    ContentStrategy(ContentSource.BODY, _body, is_primary=True),
    ContentStrategy(ContentSource.TITLE_DESCRIPTION, _title_description),
    ContentStrategy(ContentSource.TITLE_ONLY, _title),
)


class ContentSelector:
    """Returns the first candidate that clears the quality threshold."""

    def __init__(
        self,
        scorer: ContentQualityScorer | None = None,
        strategies: Sequence[ContentStrategy] = DEFAULT_STRATEGIES,
    ) -> None:
        self.scorer = scorer or ContentQualityScorer()
        self.strategies = tuple(strategies)

    def select(self, article: Article) -> ContentCandidate:
        for strategy in self.strategies:
            text = strategy.extract(article)
            if not text or not text.strip():
                continue

            assessment = self.scorer.score(text, is_primary=strategy.is_primary)
            if assessment.valid:
                return ContentCandidate(
                    text=text, source=strategy.source, quality_score=assessment.score
                )

            logger.debug(
                f"Article {article.id}: {strategy.source.value} rejected ({assessment.reason})"
            )

        return ContentCandidate.empty()
