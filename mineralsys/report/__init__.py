"""Report generation pipeline package."""

from __future__ import annotations

from .analysis import DEFAULT_RULES, RecommendationRule, analyze
from .builder import BuildOrchestrator
from .errors import (
    BuildCancelled,
    BuildError,
    BuildTimeout,
    PersistError,
    RenderError,
    ReportError,
    ReportStageError,
)
from .locks import FolderLocks
from .models import Analysis, AnalysisContext, ElementShare, Metrics, RenderedDocuments, ReportArtifacts
from .renderer import DocumentRenderer
from .service import ReportService, ReportSettings

__all__ = [
    "Analysis",
    "AnalysisContext",
    "BuildCancelled",
    "BuildError",
    "BuildOrchestrator",
    "BuildTimeout",
    "DEFAULT_RULES",
    "DocumentRenderer",
    "ElementShare",
    "FolderLocks",
    "Metrics",
    "PersistError",
    "RecommendationRule",
    "RenderError",
    "RenderedDocuments",
    "ReportArtifacts",
    "ReportError",
    "ReportService",
    "ReportSettings",
    "ReportStageError",
    "analyze",
]
