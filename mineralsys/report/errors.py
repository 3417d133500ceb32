"""Failure taxonomy for the report pipeline."""

from __future__ import annotations

from pathlib import Path


class ReportStageError(RuntimeError):
    """Base class for failures raised by a single pipeline stage."""

    stage: str = "report"

    @property
    def diagnostic(self) -> str:
        return str(self)


class RenderError(ReportStageError):
    """A template could not be filled; neither document was produced."""

    stage = "render"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Cannot render field '{field}': {message}")
        self.field = field


class PersistError(ReportStageError):
    """A rendered document could not be written to the mineral folder."""

    stage = "persist"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path
        self.reason = reason


class BuildError(ReportStageError):
    """The typesetting toolchain failed; ``output`` is its combined stdout/stderr."""

    stage = "build"

    def __init__(self, exit_status: int | None, output: str) -> None:
        super().__init__(f"Build failed with exit status {exit_status}")
        self.exit_status = exit_status
        self.output = output

    @property
    def diagnostic(self) -> str:
        return self.output


class BuildTimeout(ReportStageError):
    """The toolchain exceeded its time budget and was terminated."""

    stage = "build-timeout"

    def __init__(self, timeout: float, output: str) -> None:
        super().__init__(f"Build timed out after {timeout:g}s")
        self.timeout = timeout
        self.output = output

    @property
    def diagnostic(self) -> str:
        if self.output.strip():
            return f"{self}\n{self.output}"
        return str(self)


class BuildCancelled(ReportStageError):
    """The caller abandoned the request while the toolchain was running."""

    stage = "build-cancelled"

    def __init__(self, output: str) -> None:
        super().__init__("Build cancelled by caller")
        self.output = output


class ReportError(RuntimeError):
    """Single error surfaced by :class:`ReportService`, tagged with its origin stage."""

    def __init__(self, stage: str, diagnostic: str) -> None:
        super().__init__(f"[{stage}] {diagnostic}")
        self.stage = stage
        self.diagnostic = diagnostic

    @classmethod
    def from_stage(cls, exc: ReportStageError) -> "ReportError":
        return cls(exc.stage, exc.diagnostic)

    def to_dict(self) -> dict[str, str]:
        return {"stage": self.stage, "diagnostic": self.diagnostic}


__all__ = [
    "BuildCancelled",
    "BuildError",
    "BuildTimeout",
    "PersistError",
    "RenderError",
    "ReportError",
    "ReportStageError",
]
