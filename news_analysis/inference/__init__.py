"""Inference package for article analysis."""

from .client import InferenceClient
from .config import InferenceConfig
from .providers import LabelIndexAdapter, NamedLabelAdapter, parse_raw_scores
from .sentiment import NEUTRAL_MARGIN, SentimentNormalizer
from .types import ConnectionStatus, InferenceProvider, RawScore, SentimentProbabilities

__all__ = [
    "InferenceClient",
    "InferenceConfig",
    "LabelIndexAdapter",
    "NamedLabelAdapter",
    "parse_raw_scores",
    "NEUTRAL_MARGIN",
    "SentimentNormalizer",
    "ConnectionStatus",
    "InferenceProvider",
    "RawScore",
    "SentimentProbabilities",
]
