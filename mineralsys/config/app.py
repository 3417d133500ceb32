"""Application-level configuration models."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator

from mineralsys.config.base import BaseConfig
from mineralsys.config.report import ReportConfig
from mineralsys.config.web import WebConfig

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class AppConfig(BaseConfig):
    """Top-level runtime configuration for the entire application."""

    data_root: Path = Field(Path("./data"), description="Directory holding the minerals/ catalogue")
    logging_level: str = Field("INFO", description="Log level: DEBUG, INFO, WARNING, ERROR")
    report: ReportConfig = Field(default_factory=lambda: ReportConfig(), description="Report pipeline settings")
    web: WebConfig | None = Field(None, description="Web API configuration")

    @field_validator("logging_level")
    @classmethod
    def _normalize_level(cls, level: str) -> str:
        normalized = level.strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"Unknown logging level '{level}'")
        return normalized

    @property
    def minerals_root(self) -> Path:
        return self.data_root / "minerals"


__all__ = ["AppConfig"]
