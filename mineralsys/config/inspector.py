"""Utilities for inspecting and validating configuration files."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any, Iterable, Union

from pydantic import ValidationError

from .app import AppConfig
from .base import load_config

_LONG_BUILD_TIMEOUT = 600.0


class ConfigInspectionError(RuntimeError):
    """Raised when configuration inspection fails unexpectedly."""


def check_config(path: Path) -> tuple[dict[str, Any], int, AppConfig | None]:
    """Validate the configuration file and collect warnings.

    Returns a tuple of ``(result_dict, exit_code, config_instance_or_None)``.
    """

    try:
        config = load_config(AppConfig, path)
    except FileNotFoundError as exc:
        return _error(path, "missing_file", str(exc)), 2, None
    except PermissionError as exc:
        return _error(path, "permission_error", str(exc)), 2, None
    except ValidationError as exc:
        result = _error(path, "validation_error", "Configuration validation failed")
        result["error"]["details"] = [
            {
                "loc": _format_error_location(err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        return result, 3, None
    except ValueError as exc:
        return _error(path, "invalid_format", str(exc)), 1, None
    except Exception as exc:  # pragma: no cover - unexpected failures
        raise ConfigInspectionError("Unexpected configuration inspection error") from exc

    result = {
        "status": "ok",
        "config_path": str(path),
        "warnings": collect_warnings(config, base_dir=Path(path).parent),
    }
    return result, 0, config


def collect_warnings(config: AppConfig, *, base_dir: Path | None = None) -> list[str]:
    warnings: list[str] = []

    minerals_root = config.minerals_root
    if not minerals_root.is_absolute() and base_dir is not None:
        minerals_root = base_dir / minerals_root
    if not minerals_root.exists():
        warnings.append(f"Minerals directory {minerals_root} does not exist; the catalogue is empty")

    build = config.report.build
    if shutil.which(build.command[0]) is None:
        warnings.append(f"Build executable '{build.command[0]}' not found on PATH; report builds will fail")
    if build.timeout_seconds > _LONG_BUILD_TIMEOUT:
        warnings.append(
            f"Build timeout of {build.timeout_seconds:g}s is unusually long; a hung toolchain will hold its folder lock"
        )
    if build.source_filename == config.report.markup_filename:
        warnings.append("Markup and typesetting documents share a filename; one will overwrite the other")

    return warnings


def _error(path: Path, kind: str, message: str) -> dict[str, Any]:
    return {
        "status": "error",
        "config_path": str(path),
        "error": {"type": kind, "message": message},
    }


def _format_error_location(location: Iterable[Union[int, str]]) -> str:
    return ".".join(str(part) for part in location)


__all__ = ["ConfigInspectionError", "check_config", "collect_warnings"]
