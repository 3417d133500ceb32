"""Request-scoped data models for report generation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

DEFAULT_AUDIENCE = "general audience"
DEFAULT_PURPOSE = "general reference"


@dataclass(frozen=True, slots=True)
class AnalysisContext:
    """Who the report is for and why it is being produced."""

    audience: str = ""
    purpose: str = ""
    site_context: str = ""
    language: str = "en"

    def resolved(self) -> "AnalysisContext":
        """Return a copy with blank audience/purpose replaced by the generic defaults."""

        return AnalysisContext(
            audience=self.audience.strip() or DEFAULT_AUDIENCE,
            purpose=self.purpose.strip() or DEFAULT_PURPOSE,
            site_context=self.site_context.strip(),
            language=self.language.strip() or "en",
        )


@dataclass(frozen=True, slots=True)
class ElementShare:
    name: str
    percent: float


@dataclass(frozen=True, slots=True)
class Metrics:
    """Facts derived from a mineral's technical fields."""

    completeness: float
    populated: tuple[str, ...]
    missing: tuple[str, ...]
    has_formula: bool
    has_hardness: bool
    has_density: bool
    has_elements: bool
    hardness_band: str | None = None
    density_band: str | None = None
    dominant_element: str | None = None
    dominant_element_pct: float | None = None
    element_breakdown: tuple[ElementShare, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.populated


class Analysis(NamedTuple):
    metrics: Metrics
    summary: str
    recommendations: tuple[str, ...]


class RenderedDocuments(NamedTuple):
    markup: str
    typeset: str


@dataclass(frozen=True, slots=True)
class ReportArtifacts:
    """Result of one successful report generation."""

    markup_path: Path
    artifact_path: Path
    summary: str

    def to_dict(self) -> dict[str, str]:
        return {
            "markup_path": str(self.markup_path),
            "artifact_path": str(self.artifact_path),
            "summary": self.summary,
        }


__all__ = [
    "DEFAULT_AUDIENCE",
    "DEFAULT_PURPOSE",
    "Analysis",
    "AnalysisContext",
    "ElementShare",
    "Metrics",
    "RenderedDocuments",
    "ReportArtifacts",
]
