"""Mineral catalogue: record model and folder-backed store."""

from __future__ import annotations

from .models import (
    ENGLISH,
    Attribute,
    Flag,
    MineralRecord,
    Numeric,
    TechnicalValue,
    Text,
    coerce_value,
    is_valid_folder_name,
    split_folder_name,
)
from .store import CatalogError, MineralNotFoundError, MineralStore

__all__ = [
    "ENGLISH",
    "Attribute",
    "CatalogError",
    "Flag",
    "MineralNotFoundError",
    "MineralRecord",
    "MineralStore",
    "Numeric",
    "TechnicalValue",
    "Text",
    "coerce_value",
    "is_valid_folder_name",
    "split_folder_name",
]
