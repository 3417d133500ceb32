"""Web API configuration models."""

from __future__ import annotations

from pydantic import Field

from mineralsys.config.base import BaseConfig


class WebConfig(BaseConfig):
    """Settings for the FastAPI request layer."""

    enabled: bool = Field(True, description="Whether the report API is served.")
    title: str = Field(
        "Mineral Report API",
        description="Title advertised in the OpenAPI schema.",
        min_length=1,
    )


__all__ = ["WebConfig"]
