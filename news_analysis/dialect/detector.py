"""Lexicon-weighted dialect detection."""

from __future__ import annotations

import math

from news_analysis.dialect.lexicon import LexiconEntry, LexiconTables
from news_analysis.model.output import DialectResult

DIALECT_THRESHOLD = 20
MAX_INDICATORS = 12
MARKER_BONUS = 10


class DialectDetector:
    """Scores text against a dialect lexicon.

    Every indicator and marker is matched as a case-insensitive substring.
    The confidence is the larger of a density score (matched weight per
    15% of the word count) and an absolute score (three indicator matches
    saturate it), plus a fixed bonus per emotional marker, clamped to
    0-100. The text is a match when the rounded confidence is strictly
    above `threshold`.
    """

    def __init__(
        self,
        lexicon: LexiconTables | None = None,
        threshold: float = DIALECT_THRESHOLD,
        max_indicators: int = MAX_INDICATORS,
    ) -> None:
        self.lexicon = lexicon or LexiconTables.default()
        self.threshold = threshold
        self.max_indicators = max_indicators

    @staticmethod
    def _scan(text: str, entries: list[LexiconEntry]) -> tuple[list[str], float]:
        found: list[str] = []
        points = 0.0
        for entry in entries:
            if entry.term.lower() in text and entry.term not in found:
                found.append(entry.term)
                points += entry.weight
        return found, points

    def detect(self, text: str) -> DialectResult:
        lowered = text.lower()
        word_count = len(text.split())

        indicators, indicator_points = self._scan(lowered, self.lexicon.indicators)
        markers, marker_points = self._scan(lowered, self.lexicon.emotional_markers)

        density_score = (indicator_points + marker_points) / max(word_count * 0.15, 1) * 100
        absolute_score = min(len(indicators) / 3 * 100, 100)
        confidence = max(density_score, absolute_score) + MARKER_BONUS * len(markers)
        # half-up rounding
        confidence = math.floor(min(max(confidence, 0), 100) + 0.5)

        return DialectResult(
            is_match=confidence > self.threshold,
            confidence=confidence,
            indicators=indicators[: self.max_indicators],
            emotional_markers=markers,
        )
