"""Inference configuration."""

from __future__ import annotations

import os
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator

from news_analysis.common.config import BaseConfig


class InferenceConfig(BaseConfig):
    """Inference configuration."""

    # creds
    endpoint: str = Field(
        default=...,
        description="Sentiment inference endpoint URL",
    )
    token: str = Field(
        default=...,
        description="Bearer token for the endpoint",
    )

    @model_validator(mode="before")
    @classmethod
    def validate_credentials(cls, values: dict) -> dict:
        endpoint = values.get("endpoint") or os.getenv("HF_ENDPOINT")
        token = values.get("token") or os.getenv("HF_TOKEN")

        if not endpoint:
            raise ValueError("HF_ENDPOINT must be set")
        if not token:
            raise ValueError("HF_TOKEN must be set")

        values["endpoint"] = endpoint
        values["token"] = token
        return values

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Endpoint must use http or https scheme: {v}")
        return v

    # request
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        description="Extra `parameters` object sent with every request",
    )
    label_scheme: Literal["index", "named"] = Field(
        default="index",
        description="How provider labels map to positive/negative",
    )
    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
        gt=0,
        le=300,
    )

    # load
    workers: int = Field(
        default=4,
        description="Maximum concurrent requests",
        ge=1,
        le=50,
    )
    requests_per_minute: int | None = Field(
        default=120,
        description="Client-side rate limit, unlimited when null",
        ge=1,
    )
