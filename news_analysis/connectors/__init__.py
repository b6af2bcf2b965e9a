from typing import Any

from pydantic import Field

from news_analysis.common.config import BaseConfig
from news_analysis.common.errors import ConfigError

from .component import ConnectorComponent

_REGISTRY = {
    "memory",
    "parquet",
    "supabase",
}


class ConnectorConfig(BaseConfig):
    """Selects a connector implementation and carries its parameters."""

    provider: str = Field(
        default="supabase",
        description="Connector implementation",
    )
    params: dict[str, Any] = Field(
        default_factory=dict,
        description="Implementation-specific configuration",
    )


class ConnectorFactory:
    @staticmethod
    def get_connector(name: str) -> type[ConnectorComponent]:
        if name not in _REGISTRY:
            raise ConfigError(f"Unknown connector: {name}")

        module_path = f"news_analysis.connectors.{name.lower()}"
        connector_name = f"{name.capitalize()}Connector"
        connector_module = __import__(module_path, fromlist=[connector_name])

        return getattr(connector_module, connector_name)

    @staticmethod
    def from_config(config: dict[str, Any]) -> ConnectorComponent:
        try:
            connector_config = ConnectorConfig(**config)
        except Exception as e:
            raise ConfigError(f"Error parsing connector config: {e}") from e

        connector = ConnectorFactory.get_connector(connector_config.provider)
        return connector.from_config(connector_config.params)


__all__ = ["ConnectorComponent", "ConnectorConfig", "ConnectorFactory"]
