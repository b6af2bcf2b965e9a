"""Pytest configuration."""

from __future__ import annotations

import pytest

from news_analysis.common.errors import InferenceError
from news_analysis.connectors.memory import MemoryConnector
from news_analysis.dialect.lexicon import LexiconEntry, LexiconTables
from news_analysis.inference.types import SentimentProbabilities
from news_analysis.model import Article, BatchRequest
from news_analysis.processor import BatchProcessor, ProcessorConfig

PROJECT_ID = "project-1"
USER_ID = "user-1"

# 26 words, two sentences, several function words
ARABIC_BODY = (
    "أعلنت الحكومة اليوم عن خطة جديدة لدعم الاقتصاد في المملكة. "
    "وقال الوزير إن هذه الخطة تهدف إلى تحسين مستوى المعيشة "
    "من خلال مشاريع على مستوى المحافظات."
)
ARABIC_TITLE = "ارتفاع أسعار الوقود"
ARABIC_DESCRIPTION = "الحكومة تعلن عن زيادة جديدة على أسعار البنزين في الأردن"
PAYWALL = "ONLY AVAILABLE IN PAID PLANS"


class StubProvider:
    """Inference provider returning fixed probabilities.

    Texts containing any of `fail_on` raise a 503 `InferenceError`.
    """

    def __init__(
        self,
        positive_prob: float = 0.8,
        negative_prob: float = 0.2,
        fail_on: tuple[str, ...] = (),
    ) -> None:
        self.probabilities = SentimentProbabilities(
            positive_prob=positive_prob, negative_prob=negative_prob
        )
        self.fail_on = fail_on
        self.calls: list[str] = []

    async def infer(self, text: str) -> SentimentProbabilities:
        self.calls.append(text)
        if any(marker in text for marker in self.fail_on):
            raise InferenceError(
                "Inference endpoint returned 503", status_code=503, detail="Service Unavailable"
            )
        return self.probabilities


def make_article(article_id: str, **fields) -> Article:
    data = {
        "id": article_id,
        "project_id": PROJECT_ID,
        "user_id": USER_ID,
        "title": ARABIC_TITLE,
        "body": ARABIC_BODY,
    }
    data.update(fields)
    return Article(**data)


@pytest.fixture
def request_model() -> BatchRequest:
    return BatchRequest(project_id=PROJECT_ID, user_id=USER_ID)


@pytest.fixture
def connector() -> MemoryConnector:
    return MemoryConnector()


@pytest.fixture
def provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def processor(connector, provider) -> BatchProcessor:
    return BatchProcessor(ProcessorConfig(), connector=connector, provider=provider)


@pytest.fixture
def tiny_lexicon() -> LexiconTables:
    """Two indicators and one marker, all weight 1."""
    return LexiconTables(
        name="test",
        indicators=[LexiconEntry(term="شو"), LexiconEntry(term="هسا")],
        emotional_markers=[LexiconEntry(term="يا رب")],
    )
