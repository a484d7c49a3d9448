from __future__ import annotations

import os
from types import SimpleNamespace
from typing import Any, Callable, List, Optional

import pytest

from reticle_settings.defaults import DEFAULT_RETICLE_SETTINGS
from reticle_settings.field_binder import FieldSet
from reticle_settings.profile_manager import quick_slot_names
from reticle_settings.settings_controller import SettingsController
from reticle_store.json_medium import MemoryMedium
from reticle_store.settings_store import SettingsStore


def pytest_runtest_setup(item):
    if item.get_closest_marker("pyqt_required"):
        if not os.getenv("PYQT_TESTS"):
            pytest.skip("PYQT_TESTS not set; skipping PyQt-dependent test")


class FakeField:
    """Form input double: ``write(notify=True)`` fires callbacks only when the value changes."""

    def __init__(self, key: str, value: Any = "", *, is_toggle: bool = False) -> None:
        self.key = key
        self.value = value
        self.is_toggle = is_toggle
        self.writes: List[tuple[Any, bool]] = []
        self._callbacks: List[Callable[[], None]] = []

    def read(self) -> Any:
        return self.value

    def write(self, value: Any, *, notify: bool) -> None:
        before = self.value
        self.value = value
        self.writes.append((value, notify))
        if notify and value != before:
            self._fire()

    def on_change(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def user_edit(self, value: Any) -> None:
        self.value = value
        self._fire()

    def _fire(self) -> None:
        for callback in list(self._callbacks):
            callback()


class FakeSelector:
    def __init__(self) -> None:
        self.options: List[str] = []
        self.selected = ""

    def set_options(self, labels: List[str]) -> None:
        self.options = list(labels)
        if self.selected not in self.options:
            self.selected = self.options[0] if self.options else ""

    def current(self) -> str:
        return self.selected

    def select(self, label: str) -> None:
        if label == "" or label in self.options:
            self.selected = label


class FakeTransfer:
    def __init__(self, text: str = "") -> None:
        self.value = text
        self.selected = False

    def text(self) -> str:
        return self.value

    def set_text(self, text: str) -> None:
        self.value = text
        self.selected = False

    def select_all(self) -> None:
        self.selected = True


class FakeHotkeys:
    def __init__(self) -> None:
        self.registered: dict[str, Callable[[str], None]] = {}

    def register_hotkey(self, name: str, callback: Callable[[str], None]) -> None:
        self.registered[name] = callback

    def press(self, name: str) -> None:
        self.registered[name](name)


class CountingStore(SettingsStore):
    def __init__(self, medium) -> None:
        super().__init__(medium)
        self.set_calls: List[str] = []

    def set(self, key: str, value: Any) -> None:
        self.set_calls.append(key)
        super().set(key, value)


def build_fields() -> FieldSet:
    fields = FieldSet()
    for key, value in DEFAULT_RETICLE_SETTINGS.items():
        if isinstance(value, bool):
            fields.add(FakeField(key, False, is_toggle=True))
        else:
            fields.add(FakeField(key, ""))
    return fields


def build_harness(
    medium: Optional[MemoryMedium] = None,
    *,
    prompt_answers: Optional[List[Optional[str]]] = None,
) -> SimpleNamespace:
    medium = medium if medium is not None else MemoryMedium()
    store = CountingStore(medium)
    fields = build_fields()
    selector = FakeSelector()
    transfer = FakeTransfer()
    hotkeys = FakeHotkeys()
    errors: List[str] = []
    controls: List[bool] = []
    answers = list(prompt_answers or [])
    quick_slots = [FakeField(name, "") for name in quick_slot_names()]

    def prompt(_text: str) -> Optional[str]:
        return answers.pop(0) if answers else None

    controller = SettingsController(
        store,
        fields,
        selector,
        report_error=errors.append,
        prompt_label=prompt,
        transfer=transfer,
        set_controls_enabled=controls.append,
        quick_slot_fields=quick_slots,
        hotkeys=hotkeys,
    )
    return SimpleNamespace(
        medium=medium,
        store=store,
        fields=fields,
        selector=selector,
        transfer=transfer,
        hotkeys=hotkeys,
        errors=errors,
        controls=controls,
        quick_slots={field.key: field for field in quick_slots},
        controller=controller,
        profiles=controller.profiles,
    )


@pytest.fixture
def harness() -> SimpleNamespace:
    return build_harness()


@pytest.fixture
def make_harness():
    return build_harness


@pytest.fixture
def fake_field():
    return FakeField


@pytest.fixture
def counting_store():
    return CountingStore
