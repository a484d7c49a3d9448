from __future__ import annotations

import json
from pathlib import Path

from reticle_store.json_medium import JsonFileMedium
from reticle_store.settings_store import SettingsStore


def test_missing_file_reads_empty(tmp_path: Path):
    medium = JsonFileMedium(tmp_path / "nested" / "settings.json")

    assert medium.read_all() == {}
    assert medium.stamp() is None


def test_write_creates_parent_and_round_trips(tmp_path: Path):
    path = tmp_path / "nested" / "settings.json"
    medium = JsonFileMedium(path)

    medium.write_all({"circleEnabled": True, "saved_pro": {"dotRadius": "3"}})

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "circleEnabled": True,
        "saved_pro": {"dotRadius": "3"},
    }
    assert medium.read_all()["saved_pro"] == {"dotRadius": "3"}
    assert medium.stamp() is not None
    assert list(path.parent.iterdir()) == [path]


def test_corrupt_file_reads_empty(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    assert JsonFileMedium(path).read_all() == {}


def test_non_object_file_reads_empty(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    assert JsonFileMedium(path).read_all() == {}


def test_store_persists_key_order(tmp_path: Path):
    path = tmp_path / "settings.json"
    store = SettingsStore(JsonFileMedium(path))
    store.set("quickSlot2", "pro")
    store.set("crossColor", "#fff")

    reopened = SettingsStore(JsonFileMedium(path))

    assert reopened.keys() == ["quickSlot2", "crossColor"]
    assert reopened.get("quickSlot2") == "pro"


def test_same_size_rewrite_changes_stamp(tmp_path: Path):
    path = tmp_path / "settings.json"
    medium = JsonFileMedium(path)
    medium.write_all({"circleColor": "#111111"})
    before = medium.stamp()

    medium.write_all({"circleColor": "#222222"})

    assert path.stat().st_size == before[-1]
    assert medium.stamp() != before


def test_reader_sees_same_size_write_from_another_store(tmp_path: Path):
    path = tmp_path / "settings.json"
    writer = SettingsStore(JsonFileMedium(path))
    writer.set("circleColor", "#111111")
    reader = SettingsStore(JsonFileMedium(path))

    writer.set("circleColor", "#222222")

    assert reader.needs_reload() is True
    assert reader.reload() == ["circleColor"]
    assert reader.get("circleColor") == "#222222"
