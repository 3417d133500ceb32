"""Report generation configuration models."""

from __future__ import annotations

from pydantic import Field, field_validator

from mineralsys.config.base import BaseConfig


def _check_plain_filename(value: str) -> str:
    if not value or "/" in value or "\\" in value or value in {".", ".."}:
        raise ValueError(f"'{value}' must be a plain filename")
    return value


class BuildConfig(BaseConfig):
    """External typesetting toolchain settings."""

    command: list[str] = Field(
        default_factory=lambda: ["latexmk", "-xelatex", "-interaction=nonstopmode", "-halt-on-error"],
        description="Build command; the typesetting source filename is appended as the last argument",
    )
    timeout_seconds: float = Field(60.0, gt=0, description="Maximum wall-clock time for one build")
    source_filename: str = Field("report.tex", description="Typesetting source written inside the mineral folder")
    artifact_filename: str = Field("report.pdf", description="Binary artifact expected after a successful build")
    poll_interval_seconds: float = Field(
        0.2,
        gt=0,
        description="How often a running build checks for caller cancellation",
    )

    @field_validator("command")
    @classmethod
    def _require_executable(cls, command: list[str]) -> list[str]:
        if not command or not command[0].strip():
            raise ValueError("Build command must name an executable.")
        return command

    @field_validator("source_filename", "artifact_filename")
    @classmethod
    def _plain_filename(cls, value: str) -> str:
        return _check_plain_filename(value)


class AnalysisConfig(BaseConfig):
    """Controls for the metrics -> summary -> recommendations chain."""

    max_recommendations: int = Field(5, ge=1, description="Maximum number of recommendations per report")


class ReportConfig(BaseConfig):
    """Complete report pipeline configuration."""

    markup_filename: str = Field("report.html", description="Markup document written inside the mineral folder")
    default_language: str = Field("en", description="Language used when a request does not name one")
    build: BuildConfig = Field(default_factory=lambda: BuildConfig())
    analysis: AnalysisConfig = Field(default_factory=lambda: AnalysisConfig())

    @field_validator("markup_filename")
    @classmethod
    def _plain_markup_filename(cls, value: str) -> str:
        return _check_plain_filename(value)


__all__ = ["AnalysisConfig", "BuildConfig", "ReportConfig"]
