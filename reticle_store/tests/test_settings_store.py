from __future__ import annotations

import pytest

from reticle_store.json_medium import MemoryMedium
from reticle_store.settings_store import SettingsStore, StoreWriteError


class Recorder:
    def __init__(self) -> None:
        self.events: list[tuple[str, object, object]] = []

    def __call__(self, key, new_value, old_value) -> None:
        self.events.append((key, new_value, old_value))


class FailingMedium(MemoryMedium):
    def write_all(self, data) -> None:
        raise OSError("disk full")


def test_set_broadcasts_new_and_old_value():
    store = SettingsStore(MemoryMedium({"circleRadius": "10"}))
    recorder = Recorder()
    store.subscribe(recorder)

    store.set("circleRadius", "12")

    assert store.get("circleRadius") == "12"
    assert recorder.events == [("circleRadius", "12", "10")]


def test_set_same_value_still_notifies():
    store = SettingsStore(MemoryMedium())
    recorder = Recorder()
    store.subscribe(recorder)

    store.set("dotEnabled", True)
    store.set("dotEnabled", True)

    assert recorder.events == [("dotEnabled", True, None), ("dotEnabled", True, True)]


def test_remove_broadcasts_and_ignores_missing_key():
    store = SettingsStore(MemoryMedium({"saved_a": {"x": "1"}}))
    recorder = Recorder()
    store.subscribe(recorder)

    store.remove("saved_a")
    store.remove("saved_a")

    assert "saved_a" not in store
    assert recorder.events == [("saved_a", None, {"x": "1"})]


def test_every_listener_receives_each_event_once():
    store = SettingsStore(MemoryMedium())
    first, second = Recorder(), Recorder()
    store.subscribe(first)
    store.subscribe(second)

    store.set("a", "1")
    store.set("b", "2")

    assert first.events == second.events == [("a", "1", None), ("b", "2", None)]


def test_writes_from_listener_are_delivered_in_write_order():
    store = SettingsStore(MemoryMedium())
    seen: list[str] = []

    def chained(key, new_value, old_value) -> None:
        if key == "a":
            store.set("b", "from-listener")

    store.subscribe(chained)
    store.subscribe(lambda key, *_: seen.append(key))

    store.set("a", "1")

    assert seen == ["a", "b"]


def test_failing_listener_does_not_block_others():
    store = SettingsStore(MemoryMedium())
    recorder = Recorder()

    def broken(*_args) -> None:
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(recorder)
    store.set("crossColor", "#fff")

    assert recorder.events == [("crossColor", "#fff", None)]


def test_dispose_stops_delivery():
    store = SettingsStore(MemoryMedium())
    recorder = Recorder()
    dispose = store.subscribe(recorder)

    dispose()
    dispose()
    store.set("a", "1")

    assert recorder.events == []


def test_enumeration_and_length():
    store = SettingsStore(MemoryMedium())
    store.set("b", "1")
    store.set("a", "2")

    assert store.keys() == ["b", "a"]
    assert store.key(1) == "a"
    assert store.key(5) is None
    assert store.length() == len(store) == 2


def test_profile_values_are_copied_on_read():
    store = SettingsStore(MemoryMedium())
    store.set("saved_pro", {"circleRadius": "4"})

    snapshot = store.get("saved_pro")
    snapshot["circleRadius"] = "99"

    assert store.get("saved_pro") == {"circleRadius": "4"}


def test_failed_write_raises_without_notifying():
    store = SettingsStore(FailingMedium())
    recorder = Recorder()
    store.subscribe(recorder)

    with pytest.raises(StoreWriteError):
        store.set("a", "1")

    assert store.get("a") is None
    assert recorder.events == []


def test_reload_reports_external_changes_only():
    medium = MemoryMedium()
    writer = SettingsStore(medium)
    reader = SettingsStore(medium)
    recorder = Recorder()
    reader.subscribe(recorder)

    writer.set("circleColor", "#123456")
    writer.set("crossEnabled", False)

    assert reader.needs_reload() is True
    assert reader.reload() == ["circleColor", "crossEnabled"]
    assert recorder.events == [("circleColor", "#123456", None), ("crossEnabled", False, None)]
    assert reader.needs_reload() is False
    assert reader.reload() == []


def test_reload_reports_removed_keys():
    medium = MemoryMedium({"saved_a": {"x": "1"}})
    writer = SettingsStore(medium)
    reader = SettingsStore(medium)
    recorder = Recorder()
    reader.subscribe(recorder)

    writer.remove("saved_a")
    reader.reload()

    assert recorder.events == [("saved_a", None, {"x": "1"})]


class _WriteDuringRead(MemoryMedium):
    """Lets a second writer land right after the reader has taken its snapshot."""

    def __init__(self) -> None:
        super().__init__()
        self.after_read = None

    def read_all(self):
        data = super().read_all()
        hook, self.after_read = self.after_read, None
        if hook is not None:
            hook()
        return data


def test_write_racing_a_reload_is_delivered_by_the_next_reload():
    medium = _WriteDuringRead()
    writer = SettingsStore(medium)
    reader = SettingsStore(medium)
    recorder = Recorder()
    reader.subscribe(recorder)
    writer.set("circleColor", "#111111")
    medium.after_read = lambda: writer.set("circleColor", "#222222")

    assert reader.reload() == ["circleColor"]
    assert reader.get("circleColor") == "#111111"

    assert reader.needs_reload() is True
    assert reader.reload() == ["circleColor"]
    assert reader.get("circleColor") == "#222222"
    assert recorder.events == [
        ("circleColor", "#111111", None),
        ("circleColor", "#222222", "#111111"),
    ]
