"""Probability normalization and sentiment labelling."""

from __future__ import annotations

from news_analysis.inference.types import SentimentProbabilities
from news_analysis.model.output import SentimentLabel, SentimentResult

NEUTRAL_MARGIN = 0.10

EMOTIONS = {
    (SentimentLabel.POSITIVE, True): "سعادة",
    (SentimentLabel.POSITIVE, False): "تفاؤل",
    (SentimentLabel.NEGATIVE, True): "غضب",
    (SentimentLabel.NEGATIVE, False): "استياء",
}
NEUTRAL_EMOTION = "محايد"


class SentimentNormalizer:
    """Turns a positive/negative pair into a label with a confidence.

    Pairs closer than `neutral_margin` are reported as neutral with 0.5
    confidence.
    """

    def __init__(self, neutral_margin: float = NEUTRAL_MARGIN) -> None:
        self.neutral_margin = neutral_margin

    def normalize(self, positive_prob: float, negative_prob: float) -> SentimentResult:
        total = positive_prob + negative_prob
        if total > 0:
            positive_prob, negative_prob = positive_prob / total, negative_prob / total
        else:
            positive_prob = negative_prob = 0.5

        if abs(positive_prob - negative_prob) < self.neutral_margin:
            label, confidence = SentimentLabel.NEUTRAL, 0.5
        elif positive_prob > negative_prob:
            label, confidence = SentimentLabel.POSITIVE, positive_prob
        else:
            label, confidence = SentimentLabel.NEGATIVE, negative_prob

        return SentimentResult(
            label=label,
            confidence=confidence,
            positive_prob=positive_prob,
            negative_prob=negative_prob,
        )

    def from_probabilities(self, probabilities: SentimentProbabilities) -> SentimentResult:
        return self.normalize(probabilities.positive_prob, probabilities.negative_prob)

    @staticmethod
    def emotion_for(label: SentimentLabel, has_markers: bool) -> str:
        return EMOTIONS.get((label, has_markers), NEUTRAL_EMOTION)
