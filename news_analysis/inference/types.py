"""Inference types."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field


class RawScore(BaseModel):
    """One `{label, score}` pair as returned by the provider."""

    label: str
    score: float


class SentimentProbabilities(BaseModel):
    """Canonical provider output."""

    positive_prob: float = Field(..., ge=0.0, le=1.0)
    negative_prob: float = Field(..., ge=0.0, le=1.0)


class ConnectionStatus(BaseModel):
    ok: bool
    status_code: int | None = None
    message: str = ""


@runtime_checkable
class InferenceProvider(Protocol):
    """Anything that turns a text into positive/negative probabilities."""

    async def infer(self, text: str) -> SentimentProbabilities:
        """Score a single text."""
        ...

