"""Data models describing a single catalogued mineral."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

ENGLISH = "en"

_FOLDER_PATTERN = re.compile(r"^mineral\.(?P<family>[^.]+)\.(?P<id>0x[0-9a-fA-F]{3,})$")


class Attribute(str, Enum):
    """Technical attributes the analysis understands."""

    FORMULA = "formula"
    HARDNESS_MOHS = "hardness_mohs"
    DENSITY_G_CM3 = "density_g_cm3"
    CRYSTAL_SYSTEM = "crystal_system"
    COLOR = "color"
    STREAK = "streak"
    LUSTER = "luster"


@dataclass(frozen=True, slots=True)
class Numeric:
    value: float

    def display(self) -> str:
        return f"{self.value:.2f}"


@dataclass(frozen=True, slots=True)
class Text:
    value: str

    def display(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Flag:
    value: bool

    def display(self) -> str:
        return "yes" if self.value else "no"


TechnicalValue = Union[Numeric, Text, Flag]


def coerce_value(raw: Any) -> TechnicalValue | None:
    """Map a JSON scalar onto a :data:`TechnicalValue`; ``None`` means absent."""

    if raw is None:
        return None
    if isinstance(raw, bool):
        return Flag(raw)
    if isinstance(raw, (int, float)):
        number = float(raw)
        return Numeric(number) if math.isfinite(number) else None
    if isinstance(raw, str):
        stripped = raw.strip()
        return Text(stripped) if stripped else None
    return Text(str(raw))


def attribute_key(name: str | Attribute) -> str:
    return name.value if isinstance(name, Attribute) else name


def is_valid_folder_name(name: str) -> bool:
    """Return ``True`` for ``mineral.<family>.0x<hex>`` folder names."""

    return _FOLDER_PATTERN.match(name) is not None


def split_folder_name(name: str) -> tuple[str, str]:
    match = _FOLDER_PATTERN.match(name)
    if match is None:
        raise ValueError(f"'{name}' is not a mineral folder name")
    return match.group("family"), match.group("id")


@dataclass(frozen=True, slots=True)
class MineralRecord:
    """Canonical in-memory metadata for one mineral.

    ``names`` and ``descriptions`` map language codes to text; English is the
    authoritative entry and the fallback for every other language.
    """

    family: str
    mineral_id: str
    names: Mapping[str, str]
    descriptions: Mapping[str, str] = field(default_factory=dict)
    attributes: Mapping[str, TechnicalValue] = field(default_factory=dict)
    major_elements_pct: Mapping[str, float] = field(default_factory=dict)
    notes: str = ""
    image_file: str | None = None

    def __post_init__(self) -> None:
        if not self.names.get(ENGLISH, "").strip():
            raise ValueError(f"Mineral {self.family}.{self.mineral_id} has no English name")

    @property
    def folder_name(self) -> str:
        return f"mineral.{self.family}.{self.mineral_id}"

    @property
    def slug(self) -> str:
        return self.folder_name

    def name(self, language: str = ENGLISH) -> str:
        return self.names.get(language) or self.names[ENGLISH]

    def description(self, language: str = ENGLISH) -> str:
        return self.descriptions.get(language) or self.descriptions.get(ENGLISH, "")

    def value(self, name: str | Attribute) -> TechnicalValue | None:
        return self.attributes.get(attribute_key(name))

    def numeric(self, name: str | Attribute) -> float | None:
        value = self.value(name)
        return value.value if isinstance(value, Numeric) else None

    def text(self, name: str | Attribute) -> str | None:
        value = self.value(name)
        if value is None:
            return None
        return value.display()


__all__ = [
    "ENGLISH",
    "Attribute",
    "Flag",
    "MineralRecord",
    "Numeric",
    "TechnicalValue",
    "Text",
    "attribute_key",
    "coerce_value",
    "is_valid_folder_name",
    "split_folder_name",
]
