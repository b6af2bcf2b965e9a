from .config import BaseConfig, LoggingConfig, RootConfig
from .errors import (
    AnalysisError,
    ConfigError,
    ContentError,
    ErrorKind,
    FetchError,
    InferenceError,
    PersistenceError,
)
from .utils import CustomEncoder

__all__ = [
    "BaseConfig",
    "LoggingConfig",
    "RootConfig",
    "AnalysisError",
    "ConfigError",
    "ContentError",
    "ErrorKind",
    "FetchError",
    "InferenceError",
    "PersistenceError",
    "CustomEncoder",
]
