"""Pytest helpers for path configuration and shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from mineralsys.catalog import MineralRecord  # noqa: E402
from mineralsys.report import AnalysisContext  # noqa: E402

from tests.utils import make_quartz_record  # noqa: E402


@pytest.fixture()
def quartz_record() -> MineralRecord:
    return make_quartz_record()


@pytest.fixture()
def bare_record() -> MineralRecord:
    return MineralRecord(family="oxide", mineral_id="0xabc", names={"en": "Mystery Oxide"})


@pytest.fixture()
def geologist_context() -> AnalysisContext:
    return AnalysisContext(
        audience="resource geologist",
        purpose="mine planning",
        site_context="pilot drill campaign",
    )


@pytest.fixture()
def mineral_folder(tmp_path: Path, quartz_record: MineralRecord) -> Path:
    folder = tmp_path / "minerals" / quartz_record.folder_name
    folder.mkdir(parents=True)
    return folder
