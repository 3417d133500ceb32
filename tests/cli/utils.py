"""Shared helpers for CLI tests."""

from __future__ import annotations

import json
from pathlib import Path

from tests.utils import QUARTZ_PAYLOAD, SUCCESS_SCRIPT, stub_command, write_mineral

QUARTZ_SLUG = "mineral.silicate.0x1a2b3c"


def write_app_config(base_dir: Path, *, script: str = SUCCESS_SCRIPT, extra: str = "") -> Path:
    """Write a config.toml whose catalogue holds one quartz record and whose build runs ``script``."""

    minerals_root = base_dir / "data" / "minerals"
    minerals_root.mkdir(parents=True, exist_ok=True)
    write_mineral(minerals_root, QUARTZ_SLUG, QUARTZ_PAYLOAD)

    config_text = f"""
data_root = "data"
logging_level = "INFO"

[report.build]
command = {json.dumps(stub_command(script))}
timeout_seconds = 10
{extra}
"""
    config_file = base_dir / "config.toml"
    config_file.write_text(config_text, encoding="utf-8")
    return config_file
