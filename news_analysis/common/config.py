"""Configuration tree and logging setup."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ConfigDict, Field

from news_analysis.common.errors import ConfigError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class BaseConfig(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        from_attributes=True,
    )


class LoggingConfig(BaseConfig):
    """Root logger settings."""

    level: str = Field(default="INFO", description="Root log level")
    format: str = Field(default=LOG_FORMAT, description="Record format")
    filename: str | None = Field(default=None, description="Optional rotating log file")
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)
    backup_count: int = Field(default=5, ge=0)
    quiet: list[str] = Field(
        default_factory=lambda: ["httpx", "httpcore"],
        description="Loggers raised to WARNING; httpx logs every request at INFO",
    )

    def apply(self) -> None:
        logging.basicConfig(level=self.level, format=self.format)

        if self.filename:
            handler = RotatingFileHandler(
                filename=self.filename,
                maxBytes=self.max_bytes,
                backupCount=self.backup_count,
                encoding="utf-8",
            )
            handler.setFormatter(logging.Formatter(self.format))
            logging.getLogger().addHandler(handler)

        for name in self.quiet:
            logging.getLogger(name).setLevel(logging.WARNING)


class RootConfig(BaseConfig):
    """Job configuration: one section per component.

    Component sections stay plain dicts here and are validated by the
    component that consumes them (`from_config`), so a bad inference section
    surfaces as a `ConfigError` from `InferenceClient`, not from the loader.
    """

    connector: dict[str, Any] = Field(
        ...,
        description="Connector provider and parameters",
    )
    inference: dict[str, Any] = Field(
        ...,
        description="Inference configuration",
    )
    processor: dict[str, Any] = Field(
        default_factory=dict,
        description="Batch processor configuration",
    )
    logging: LoggingConfig | None = Field(
        default=None,
        description="Logging configuration, left to the entry point when null",
    )

    def model_post_init(self, __context: Any) -> None:
        if self.logging:
            self.logging.apply()

    @classmethod
    def from_yaml(cls, path: str | Path) -> RootConfig:
        """Load and validate a YAML configuration file."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        return cls.model_validate(data)


TConf = TypeVar("TConf", bound=BaseConfig)
