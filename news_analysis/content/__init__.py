from .quality import ContentQualityScorer
from .selector import DEFAULT_STRATEGIES, ContentSelector, ContentStrategy

__all__ = ["ContentQualityScorer", "ContentSelector", "ContentStrategy", "DEFAULT_STRATEGIES"]
