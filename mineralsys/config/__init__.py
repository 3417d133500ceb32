"""Configuration namespace for mineralsys."""

from __future__ import annotations

from .app import AppConfig
from .base import BaseConfig, load_config
from .report import AnalysisConfig, BuildConfig, ReportConfig
from .web import WebConfig

__all__ = [
    "BaseConfig",
    "AppConfig",
    "load_config",
    "AnalysisConfig",
    "BuildConfig",
    "ReportConfig",
    "WebConfig",
]
