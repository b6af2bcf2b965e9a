"""Adapters from provider-specific label schemes to canonical probabilities."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError

from news_analysis.inference.types import RawScore, SentimentProbabilities


def parse_raw_scores(payload: Any) -> list[RawScore]:
    """Flatten a `[{label, score}]` or `[[{label, score}]]` response body."""
    if isinstance(payload, dict) and "scores" in payload:
        payload = payload["scores"]
    if not isinstance(payload, list):
        raise ValueError(f"Unexpected response format: {payload!r}")
    if payload and isinstance(payload[0], list):
        payload = payload[0]

    try:
        return [RawScore.model_validate(item) for item in payload]
    except ValidationError as e:
        raise ValueError(f"Malformed score entry in response: {payload!r}") from e


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class BaseScoreAdapter(ABC):
    """Resolves positive/negative scores from labelled entries.

    A single entry implies its complement. With several entries the labelled
    ones win; unrecognized labels fall back to `[negative, positive]` order.
    """

    @abstractmethod
    def classify(self, label: str) -> str | None:
        """Return "positive", "negative" or None for an unknown label."""

    def adapt(self, scores: list[RawScore]) -> SentimentProbabilities:
        if not scores:
            return SentimentProbabilities(positive_prob=0.5, negative_prob=0.5)

        if len(scores) == 1:
            (score,) = scores
            value = _clamp(score.score)
            if self.classify(score.label) == "negative":
                return SentimentProbabilities(positive_prob=1 - value, negative_prob=value)
            return SentimentProbabilities(positive_prob=value, negative_prob=1 - value)

        by_side: dict[str, float] = {}
        for score in scores:
            side = self.classify(score.label)
            if side and side not in by_side:
                by_side[side] = _clamp(score.score)

        if "positive" in by_side and "negative" in by_side:
            return SentimentProbabilities(
                positive_prob=by_side["positive"], negative_prob=by_side["negative"]
            )

        return SentimentProbabilities(
            positive_prob=_clamp(scores[1].score), negative_prob=_clamp(scores[0].score)
        )


class LabelIndexAdapter(BaseScoreAdapter):
    """`LABEL_0` is negative, `LABEL_1` is positive."""

    def classify(self, label: str) -> str | None:
        return {"LABEL_0": "negative", "LABEL_1": "positive"}.get(label.upper())


class NamedLabelAdapter(BaseScoreAdapter):
    """`positive`/`negative` style labels, plus the index and digit forms."""

    def classify(self, label: str) -> str | None:
        lowered = label.lower()
        if "neg" in lowered or lowered in ("label_0", "0"):
            return "negative"
        if "pos" in lowered or lowered in ("label_1", "1"):
            return "positive"
        return None


ADAPTERS: dict[str, type[BaseScoreAdapter]] = {
    "index": LabelIndexAdapter,
    "named": NamedLabelAdapter,
}


def get_adapter(scheme: str) -> BaseScoreAdapter:
    if scheme not in ADAPTERS:
        raise ValueError(f"Unknown label scheme: {scheme}")
    return ADAPTERS[scheme]()
