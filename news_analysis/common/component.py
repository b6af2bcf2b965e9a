from __future__ import annotations

from typing import Any, Generic

from pydantic import ValidationError

from news_analysis.common.config import TConf
from news_analysis.common.errors import ConfigError


class ComponentFactory(Generic[TConf]):
    """Base class for configurable components."""

    # This is a class variable that will be set by subclasses
    _config_type: type[TConf]
    _instance_config: TConf

    def __init__(self, config: TConf) -> None:
        """Initialize with configuration."""
        self._instance_config = config

    @classmethod
    def from_config(cls, config: dict[str, Any] | TConf) -> ComponentFactory:
        """Create a component from a configuration dictionary."""
        if isinstance(config, cls._config_type):
            return cls(config)
        try:
            return cls(cls._config_type(**config))
        except ValidationError as e:
            raise ConfigError(f"Invalid {cls._config_type.__name__}: {e}") from e

    @property
    def config(self) -> TConf:
        """Access the configuration."""
        return self._instance_config
