from .detector import DIALECT_THRESHOLD, DialectDetector
from .lexicon import LexiconEntry, LexiconTables

__all__ = ["DIALECT_THRESHOLD", "DialectDetector", "LexiconEntry", "LexiconTables"]
