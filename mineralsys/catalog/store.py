"""Folder-backed, read-only access to the mineral catalogue."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .models import ENGLISH, Attribute, MineralRecord, TechnicalValue, coerce_value, is_valid_folder_name, split_folder_name

_LANG_FILE = re.compile(r"^mineral\.(?P<lang>[A-Za-z-]{2,8})\.json$")
_LEGACY_FILE = "mineral.json"


class CatalogError(RuntimeError):
    """Raised when a mineral folder holds unreadable metadata."""


class MineralNotFoundError(LookupError):
    """Raised when no mineral folder matches a slug."""


class MineralDiskRecord(BaseModel):
    """On-disk JSON layout of ``mineral.<lang>.json``."""

    model_config = ConfigDict(extra="ignore")

    common_name: str
    description: str = ""
    mineral_family: str | None = Field(None, validation_alias=AliasChoices("mineral_family", "mineral_group"))
    formula: Any = None
    hardness_mohs: Any = None
    density_g_cm3: Any = None
    crystal_system: Any = None
    color: Any = None
    streak: Any = None
    luster: Any = None
    major_elements_pct: dict[str, float] = Field(default_factory=dict)
    properties: dict[str, Any] = Field(default_factory=dict)
    notes: str = ""
    image_file: str | None = None

    def technical_attributes(self) -> dict[str, TechnicalValue]:
        attributes: dict[str, TechnicalValue] = {}
        for name, raw in self.properties.items():
            value = coerce_value(raw)
            if value is not None:
                attributes[name] = value
        for attribute in Attribute:
            value = coerce_value(getattr(self, attribute.value))
            if value is not None:
                attributes[attribute.value] = value
        return attributes


class MineralStore:
    """Load :class:`MineralRecord` objects from ``<root>/mineral.<family>.<id>/`` folders."""

    def __init__(self, minerals_root: Path) -> None:
        self._root = Path(minerals_root)

    @property
    def root(self) -> Path:
        return self._root

    def folder_for(self, record: MineralRecord) -> Path:
        return self._root / record.folder_name

    def list_minerals(self) -> list[MineralRecord]:
        if not self._root.exists():
            logger.debug("Mineral root {} does not exist yet", self._root)
            return []
        records: list[MineralRecord] = []
        for folder in sorted(self._root.iterdir()):
            if not folder.is_dir() or not is_valid_folder_name(folder.name):
                continue
            record = self._load_folder(folder)
            if record is not None:
                records.append(record)
        records.sort(key=lambda record: record.name(ENGLISH))
        return records

    def get(self, slug: str) -> MineralRecord:
        if not is_valid_folder_name(slug):
            raise MineralNotFoundError(f"'{slug}' is not a valid mineral identifier")
        folder = self._root / slug
        record = self._load_folder(folder) if folder.is_dir() else None
        if record is None:
            raise MineralNotFoundError(f"Mineral '{slug}' not found in {self._root}")
        return record

    # ------------------------------------------------------------------
    def _load_folder(self, folder: Path) -> MineralRecord | None:
        localized: dict[str, MineralDiskRecord] = {}
        for path in sorted(folder.glob("mineral*.json")):
            match = _LANG_FILE.match(path.name)
            if match:
                localized[match.group("lang")] = self._read(path)
            elif path.name == _LEGACY_FILE:
                localized.setdefault(ENGLISH, self._read(path))

        primary = localized.get(ENGLISH)
        if primary is None:
            logger.debug("Skipping {}: no English metadata", folder.name)
            return None

        family, mineral_id = split_folder_name(folder.name)
        if primary.mineral_family and primary.mineral_family != family:
            logger.debug("{} declares family {}; using folder family", folder.name, primary.mineral_family)
        names = {lang: disk.common_name for lang, disk in localized.items() if disk.common_name.strip()}
        descriptions = {lang: disk.description for lang, disk in localized.items() if disk.description.strip()}
        try:
            return MineralRecord(
                family=family,
                mineral_id=mineral_id,
                names=names,
                descriptions=descriptions,
                attributes=primary.technical_attributes(),
                major_elements_pct=dict(primary.major_elements_pct),
                notes=primary.notes,
                image_file=Path(primary.image_file).name if primary.image_file else None,
            )
        except ValueError as exc:
            raise CatalogError(f"Invalid metadata in {folder}: {exc}") from exc

    def _read(self, path: Path) -> MineralDiskRecord:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return MineralDiskRecord.model_validate(raw)
        except (json.JSONDecodeError, ValidationError) as exc:
            raise CatalogError(f"Failed to parse {path}: {exc}") from exc


__all__ = ["CatalogError", "MineralDiskRecord", "MineralNotFoundError", "MineralStore"]
