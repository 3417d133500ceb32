from __future__ import annotations

from pathlib import Path

import pytest

from mineralsys.catalog import CatalogError, MineralNotFoundError, MineralStore, Numeric, Text
from tests.utils import QUARTZ_PAYLOAD, write_mineral


@pytest.fixture()
def minerals_root(tmp_path: Path) -> Path:
    root = tmp_path / "minerals"
    root.mkdir()
    return root


def test_get_loads_localized_record(minerals_root: Path) -> None:
    write_mineral(minerals_root, "mineral.silicate.0x1a2b3c", {**QUARTZ_PAYLOAD, "image_file": "images/quartz.png"})
    write_mineral(
        minerals_root,
        "mineral.silicate.0x1a2b3c",
        {"common_name": "Quartz rose", "description": "Minéral de silice.", "hardness_mohs": 1.0},
        filename="mineral.fr.json",
    )

    record = MineralStore(minerals_root).get("mineral.silicate.0x1a2b3c")

    assert record.name("fr") == "Quartz rose"
    assert record.description("fr") == "Minéral de silice."
    assert record.value("hardness_mohs") == Numeric(7.0)
    assert record.value("formula") == Text("SiO2")
    assert record.major_elements_pct == {"Si": 46.7, "O": 53.3}
    assert record.image_file == "quartz.png"


def test_open_properties_and_group_alias(minerals_root: Path) -> None:
    payload = {
        "common_name": "Uraninite",
        "mineral_group": "oxide",
        "hardness_mohs": "  ",
        "properties": {"radioactive": True, "fluorescence": "weak"},
    }
    write_mineral(minerals_root, "mineral.oxide.0x0f1", payload)

    record = MineralStore(minerals_root).get("mineral.oxide.0x0f1")

    assert record.family == "oxide"
    assert record.value("hardness_mohs") is None
    assert record.text("radioactive") == "yes"
    assert record.text("fluorescence") == "weak"


def test_legacy_metadata_file_is_english(minerals_root: Path) -> None:
    write_mineral(minerals_root, "mineral.oxide.0xabc", {"common_name": "Hematite"}, filename="mineral.json")

    assert MineralStore(minerals_root).get("mineral.oxide.0xabc").name() == "Hematite"


def test_list_sorts_by_english_name_and_skips_invalid_folders(minerals_root: Path) -> None:
    write_mineral(minerals_root, "mineral.silicate.0x1a2b3c", QUARTZ_PAYLOAD)
    write_mineral(minerals_root, "mineral.oxide.0xabc", {"common_name": "Hematite"})
    write_mineral(minerals_root, "not-a-mineral", {"common_name": "Ignored"})
    write_mineral(minerals_root, "mineral.oxide.0xdef", {"common_name": "Rutile"}, filename="mineral.fr.json")
    (minerals_root / "README.txt").write_text("catalogue", encoding="utf-8")

    records = MineralStore(minerals_root).list_minerals()

    assert [record.name() for record in records] == ["Hematite", "Quartz"]


def test_list_of_missing_root_is_empty(tmp_path: Path) -> None:
    assert MineralStore(tmp_path / "absent").list_minerals() == []


@pytest.mark.parametrize("slug", ["mineral.oxide.0xfff", "../etc", "mineral.oxide"])
def test_unknown_slug_raises_not_found(minerals_root: Path, slug: str) -> None:
    with pytest.raises(MineralNotFoundError):
        MineralStore(minerals_root).get(slug)


def test_malformed_json_raises_catalog_error(minerals_root: Path) -> None:
    folder = minerals_root / "mineral.oxide.0xabc"
    folder.mkdir()
    (folder / "mineral.en.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(CatalogError, match="mineral.en.json"):
        MineralStore(minerals_root).get("mineral.oxide.0xabc")


def test_folder_for_record(minerals_root: Path) -> None:
    write_mineral(minerals_root, "mineral.silicate.0x1a2b3c", QUARTZ_PAYLOAD)
    store = MineralStore(minerals_root)

    record = store.get("mineral.silicate.0x1a2b3c")

    assert store.folder_for(record) == minerals_root / "mineral.silicate.0x1a2b3c"
