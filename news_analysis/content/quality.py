"""Analysis-worthiness scoring for Arabic text."""

from __future__ import annotations

import re
from typing import ClassVar, NamedTuple

from news_analysis.model.content import QualityAssessment, QualityBucket

ARABIC_CHAR = re.compile(r"[\u0600-\u06FF]")
SENTENCE_SPLIT = re.compile(r"[.!؟]")

PLACEHOLDER_PATTERNS = [
    re.compile(r"ONLY AVAILABLE IN PAID PLANS", re.IGNORECASE),
    re.compile(r"upgrade to premium", re.IGNORECASE),
    re.compile(r"subscribe to read", re.IGNORECASE),
    re.compile(r"premium content", re.IGNORECASE),
    re.compile(r"paywall", re.IGNORECASE),
]

FUNCTION_WORDS = ["في", "من", "على", "إلى", "عن", "مع", "هذا", "هذه", "التي", "الذي"]


class WordThresholds(NamedTuple):
    minimum: int
    good: int
    excellent: int


class ContentQualityScorer:
    """Scores a text blob 0-100 for analysis-worthiness."""

    PRIMARY_WORDS: ClassVar[WordThresholds] = WordThresholds(20, 100, 200)
    FALLBACK_WORDS: ClassVar[WordThresholds] = WordThresholds(10, 30, 50)
    PRIMARY_THRESHOLD: ClassVar[int] = 20
    FALLBACK_THRESHOLD: ClassVar[int] = 15
    FUNCTION_WORD_CAP: ClassVar[int] = 15

    def __init__(
        self,
        placeholder_patterns: list[re.Pattern] | None = None,
        function_words: list[str] | None = None,
    ) -> None:
        self.placeholder_patterns = placeholder_patterns or PLACEHOLDER_PATTERNS
        self.function_words = function_words or FUNCTION_WORDS

    def is_placeholder(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self.placeholder_patterns)

    def score(self, text: str | None, is_primary: bool = True) -> QualityAssessment:
        """Score `text` as primary (body) or fallback (title/description) content."""
        if not text or len(text.strip()) < 3:
            return QualityAssessment(valid=False, reason="empty")

        # placeholder checks apply to primary content only
        if is_primary and self.is_placeholder(text):
            return QualityAssessment(valid=False, reason="blocked_main_content")

        if not ARABIC_CHAR.search(text):
            return QualityAssessment(valid=False, reason="non_arabic")

        thresholds = self.PRIMARY_WORDS if is_primary else self.FALLBACK_WORDS
        word_count = len(text.split())

        score = (
            self._word_points(word_count, thresholds)
            + self._sentence_points(text)
            + self._density_points(text)
            + self._function_word_points(text)
        )
        score = min(score, 100)

        threshold = self.PRIMARY_THRESHOLD if is_primary else self.FALLBACK_THRESHOLD
        valid = score >= threshold
        return QualityAssessment(
            valid=valid,
            reason="" if valid else "low_quality",
            score=score,
            bucket=self._bucket(word_count, thresholds),
        )

    @staticmethod
    def _word_points(word_count: int, thresholds: WordThresholds) -> int:
        if word_count > thresholds.excellent:
            return 40
        if word_count > thresholds.good:
            return 30
        if word_count > thresholds.minimum:
            return 20
        if word_count > 5:
            return 10
        return 5

    @staticmethod
    def _sentence_points(text: str) -> int:
        sentences = [s for s in SENTENCE_SPLIT.split(text) if s.strip()]
        if len(sentences) > 3:
            return 20
        if len(sentences) > 1:
            return 15
        return 5

    @staticmethod
    def _density_points(text: str) -> int:
        density = len(ARABIC_CHAR.findall(text)) / len(text)
        if density > 0.7:
            return 25
        if density > 0.5:
            return 15
        if density > 0.3:
            return 10
        return 0

    def _function_word_points(self, text: str) -> int:
        lowered = text.lower()
        present = sum(1 for word in self.function_words if word in lowered)
        return min(present * 2, self.FUNCTION_WORD_CAP)

    @staticmethod
    def _bucket(word_count: int, thresholds: WordThresholds) -> QualityBucket:
        if word_count > thresholds.good:
            return QualityBucket.GOOD
        if word_count > thresholds.minimum:
            return QualityBucket.FAIR
        return QualityBucket.SHORT
