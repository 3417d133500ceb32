"""Shared helpers: sample records, catalogue folders and stub build commands."""

from __future__ import annotations

import json
import sys
import textwrap
from pathlib import Path
from typing import Any

from mineralsys.catalog import MineralRecord, Numeric, Text

# Each stub receives the typesetting source filename as sys.argv[1] and runs
# inside the mineral folder, mirroring the real latexmk invocation.
SUCCESS_SCRIPT = """
import pathlib, sys
source = pathlib.Path(sys.argv[1]).read_text(encoding="utf-8")
pathlib.Path("report.pdf").write_text(source, encoding="utf-8")
print("Output written on report.pdf")
"""

FAILING_SCRIPT = """
import sys
print("This is XeTeX, Version 3.141592653")
sys.stderr.write("! Undefined control sequence.\\n")
sys.stderr.write("l.12 \\\\badmacro\\n")
sys.exit(12)
"""

SLEEPING_SCRIPT = """
import time
print("starting build", flush=True)
time.sleep(30)
"""

NO_ARTIFACT_SCRIPT = """
print("nothing to typeset")
"""

SLOW_COPY_SCRIPT = """
import pathlib, sys, time
source = pathlib.Path(sys.argv[1]).read_text(encoding="utf-8")
half = len(source) // 2
with pathlib.Path("report.pdf").open("w", encoding="utf-8") as fp:
    fp.write(source[:half])
    fp.flush()
    time.sleep(0.3)
    fp.write(source[half:])
"""

FINISH_LATE_SCRIPT = """
import pathlib, time
time.sleep(3)
pathlib.Path("finished.flag").write_text("yes", encoding="utf-8")
pathlib.Path("report.pdf").write_text("pdf", encoding="utf-8")
"""

MARKER_SCRIPT = """
import pathlib
pathlib.Path("build-invoked.flag").write_text("yes", encoding="utf-8")
pathlib.Path("report.pdf").write_text("pdf", encoding="utf-8")
"""


def stub_command(script: str) -> list[str]:
    return [sys.executable, "-c", textwrap.dedent(script).strip()]


def make_quartz_record() -> MineralRecord:
    return MineralRecord(
        family="silicate",
        mineral_id="0x1a2b3c",
        names={"en": "Quartz", "fr": "Quartz rose"},
        descriptions={"en": "Common silica mineral found in most sands."},
        attributes={
            "formula": Text("SiO2"),
            "hardness_mohs": Numeric(7.0),
            "density_g_cm3": Numeric(2.65),
            "crystal_system": Text("trigonal"),
            "color": Text("colorless"),
            "streak": Text("white"),
            "luster": Text("vitreous"),
        },
        major_elements_pct={"Si": 46.7, "O": 53.3},
        notes="Reference specimen.",
        image_file="quartz.png",
    )


def write_mineral(root: Path, folder_name: str, payload: dict[str, Any], *, filename: str = "mineral.en.json") -> Path:
    folder = root / folder_name
    folder.mkdir(parents=True, exist_ok=True)
    (folder / filename).write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return folder


QUARTZ_PAYLOAD: dict[str, Any] = {
    "common_name": "Quartz",
    "description": "Common silica mineral found in most sands.",
    "mineral_family": "silicate",
    "formula": "SiO2",
    "hardness_mohs": 7.0,
    "density_g_cm3": 2.65,
    "crystal_system": "trigonal",
    "color": "colorless",
    "streak": "white",
    "luster": "vitreous",
    "major_elements_pct": {"Si": 46.7, "O": 53.3},
    "notes": "Reference specimen.",
}
