"""Drive the external typesetting toolchain for one mineral folder."""

from __future__ import annotations

import os
import signal
import subprocess
import threading
import time
from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from mineralsys.config.report import BuildConfig

from .errors import BuildCancelled, BuildError, BuildTimeout, PersistError

_POSIX = os.name == "posix"


def write_document(path: Path, content: str) -> Path:
    """Write ``content`` to ``path``, replacing any previous version."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fp:
            fp.write(content)
    except OSError as exc:
        raise PersistError(path, exc.strerror or str(exc)) from exc
    return path


class BuildOrchestrator:
    """Write the typesetting source, run the build command, validate the artifact.

    The command runs with the mineral folder as working directory and the
    source filename appended as its last argument. Combined stdout/stderr is
    captured whatever the outcome and handed back verbatim inside the raised
    error; the orchestrator never interprets it.
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        timeout: float = 60.0,
        source_filename: str = "report.tex",
        artifact_filename: str = "report.pdf",
        poll_interval: float = 0.2,
    ) -> None:
        if not command:
            raise ValueError("Build command must not be empty")
        if timeout <= 0:
            raise ValueError("Build timeout must be positive")
        self._command = list(command)
        self._timeout = timeout
        self._source_filename = source_filename
        self._artifact_filename = artifact_filename
        self._poll_interval = max(poll_interval, 0.01)

    @classmethod
    def from_config(cls, config: BuildConfig) -> "BuildOrchestrator":
        return cls(
            config.command,
            timeout=config.timeout_seconds,
            source_filename=config.source_filename,
            artifact_filename=config.artifact_filename,
            poll_interval=config.poll_interval_seconds,
        )

    @property
    def command(self) -> list[str]:
        return [*self._command, self._source_filename]

    @property
    def timeout(self) -> float:
        return self._timeout

    def source_path(self, folder: Path) -> Path:
        return Path(folder) / self._source_filename

    def artifact_path(self, folder: Path) -> Path:
        return Path(folder) / self._artifact_filename

    def build(self, folder: Path, typeset_doc: str, *, cancel: threading.Event | None = None) -> Path:
        folder = Path(folder)
        write_document(self.source_path(folder), typeset_doc)

        artifact = self.artifact_path(folder)
        try:
            artifact.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistError(artifact, f"cannot remove previous artifact: {exc.strerror or exc}") from exc

        output, exit_status = self._run(folder, cancel)
        if exit_status != 0:
            logger.debug("Build in {} exited with status {}", folder, exit_status)
            raise BuildError(exit_status, output)
        if not artifact.exists():
            note = f"build command completed but {artifact.name} was not generated"
            raise BuildError(exit_status, f"{output.rstrip()}\n{note}" if output.strip() else note)
        return artifact

    # ------------------------------------------------------------------
    def _run(self, folder: Path, cancel: threading.Event | None) -> tuple[str, int]:
        command = self.command
        logger.debug("Running {} in {} (timeout={}s)", " ".join(command), folder, self._timeout)
        try:
            process = subprocess.Popen(
                command,
                cwd=folder,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                start_new_session=_POSIX,
            )
        except OSError as exc:
            raise BuildError(None, f"failed to execute '{command[0]}': {exc}") from exc

        deadline = time.monotonic() + self._timeout
        try:
            while True:
                if cancel is not None and cancel.is_set():
                    logger.warning("Build in {} cancelled by caller; terminating {}", folder, command[0])
                    raise BuildCancelled(_terminate(process))
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.warning("Build in {} exceeded {}s; terminating {}", folder, self._timeout, command[0])
                    raise BuildTimeout(self._timeout, _terminate(process))
                try:
                    output, _ = process.communicate(timeout=min(remaining, self._poll_interval))
                except subprocess.TimeoutExpired:
                    continue
                return output or "", process.returncode
        finally:
            if process.poll() is None:
                _kill(process)
                process.wait()


def _kill(process: subprocess.Popen[str]) -> None:
    if _POSIX:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        process.kill()


def _terminate(process: subprocess.Popen[str]) -> str:
    """Kill ``process`` and return whatever output it produced."""

    _kill(process)
    output, _ = process.communicate()
    return output or ""


__all__ = ["BuildOrchestrator", "write_document"]
