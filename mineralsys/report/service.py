"""Composition root for the report generation pipeline."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from loguru import logger

from mineralsys.catalog.models import MineralRecord
from mineralsys.config.report import BuildConfig, ReportConfig

from .analysis import DEFAULT_MAX_RECOMMENDATIONS, DEFAULT_RULES, RecommendationRule, analyze
from .builder import BuildOrchestrator, write_document
from .errors import BuildCancelled, ReportError, ReportStageError
from .locks import FolderLocks
from .models import AnalysisContext, ReportArtifacts
from .renderer import DocumentRenderer


@dataclass(frozen=True, slots=True)
class ReportSettings:
    """Explicit configuration handed to :class:`ReportService`."""

    markup_filename: str = "report.html"
    build: BuildConfig = field(default_factory=BuildConfig)
    max_recommendations: int = DEFAULT_MAX_RECOMMENDATIONS
    rules: tuple[RecommendationRule, ...] = DEFAULT_RULES

    @classmethod
    def from_config(
        cls,
        config: ReportConfig,
        *,
        rules: Sequence[RecommendationRule] | None = None,
    ) -> "ReportSettings":
        return cls(
            markup_filename=config.markup_filename,
            build=config.build,
            max_recommendations=config.analysis.max_recommendations,
            rules=tuple(rules) if rules is not None else DEFAULT_RULES,
        )


class ReportService:
    """Analyse, render, persist and build one mineral report per call.

    Calls for the same folder are serialised for the whole render, persist and
    build sequence; calls for different folders share no mutable state. Files
    written before a failing stage are left in place for inspection.
    """

    def __init__(
        self,
        settings: ReportSettings | None = None,
        *,
        renderer: DocumentRenderer | None = None,
        builder: BuildOrchestrator | None = None,
        locks: FolderLocks | None = None,
    ) -> None:
        self._settings = settings or ReportSettings()
        self._renderer = renderer or DocumentRenderer()
        self._builder = builder or BuildOrchestrator.from_config(self._settings.build)
        self._locks = locks or FolderLocks()

    @property
    def settings(self) -> ReportSettings:
        return self._settings

    @property
    def builder(self) -> BuildOrchestrator:
        return self._builder

    def markup_path(self, folder: Path) -> Path:
        return Path(folder) / self._settings.markup_filename

    def generate_report(
        self,
        record: MineralRecord,
        folder: Path,
        context: AnalysisContext | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> ReportArtifacts:
        context = context or AnalysisContext()
        folder = Path(folder)
        metrics, summary, recommendations = analyze(
            record,
            context,
            rules=self._settings.rules,
            limit=self._settings.max_recommendations,
        )

        with self._locks.hold(folder):
            try:
                if cancel is not None and cancel.is_set():
                    raise BuildCancelled("")
                logger.debug("Rendering report documents for {}", record.slug)
                documents = self._renderer.render(record, context, metrics, summary, recommendations)
                logger.debug("Persisting markup document for {}", record.slug)
                markup_path = write_document(self.markup_path(folder), documents.markup)
                logger.debug("Building typeset document for {}", record.slug)
                artifact_path = self._builder.build(folder, documents.typeset, cancel=cancel)
            except ReportStageError as exc:
                logger.warning("Report for {} failed at stage {}: {}", record.slug, exc.stage, exc)
                raise ReportError.from_stage(exc) from exc

        logger.info(
            "Report generated for {} | markup={} | artifact={}",
            record.slug,
            markup_path.name,
            artifact_path.name,
        )
        return ReportArtifacts(markup_path=markup_path, artifact_path=artifact_path, summary=summary)


__all__ = ["ReportService", "ReportSettings"]
